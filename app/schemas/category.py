from __future__ import annotations

from datetime import datetime
from pydantic import Field, field_validator
from typing import Optional, List

from .base import CamelModel, reject_null


class CategoryBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    order: int = 0


class CategoryCreate(CategoryBase):
    slug: Optional[str] = None   # generated from the name when omitted


class CategoryUpdate(CamelModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    order: Optional[int] = None

    @field_validator("name", "order")
    @classmethod
    def required_columns(cls, value):
        return reject_null(value)


class CategoryResponse(CategoryBase):
    id: str
    slug: str
    order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("order", mode="before")
    @classmethod
    def default_order(cls, value):
        return 0 if value is None else value


class CategoryWithCount(CategoryResponse):
    product_count: int = 0


class CategoryTreeNode(CategoryWithCount):
    children: List[CategoryTreeNode] = []


CategoryTreeNode.model_rebuild()
