from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from pydantic import Field, field_validator
from typing import Optional

from .base import CamelModel


TWO_PLACES = Decimal("0.01")


class ProductBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal
    original_price: Optional[Decimal] = None
    image: Optional[str] = None
    category_id: str
    is_new: bool = False
    limited_stock: Optional[int] = None
    in_stock: bool = True
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    slug: Optional[str] = None


class ProductCreate(ProductBase):

    @field_validator("original_price", mode="before")
    @classmethod
    def empty_original_price(cls, value):
        """An empty original price means the product is not discounted."""
        if value in ("", None):
            return None
        return value

    @field_validator("price", "original_price")
    @classmethod
    def round_price(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is None:
            return None
        return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class ProductResponse(ProductBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
