from datetime import datetime
from pydantic import Field, field_validator
from typing import Optional

from .base import CamelModel, reject_null


class RepairServiceBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = None


class RepairServiceCreate(RepairServiceBase):
    pass


class RepairServiceUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("name")
    @classmethod
    def required_columns(cls, value):
        return reject_null(value)


class RepairServiceResponse(RepairServiceBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
