from datetime import datetime
from decimal import Decimal
from pydantic import Field, StrictBool, computed_field, field_validator
from typing import List, Optional, Union

from .base import CamelModel, reject_null
from ..enums import ApprovalState, RepairItemType


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class RepairItem(CamelModel):
    """A single labor line or replaced part on a repair quote."""
    type: RepairItemType
    description: str = ""
    price: Optional[Decimal] = None

    @field_validator("price", mode="before")
    @classmethod
    def blank_price(cls, value):
        return _blank_to_none(value)


# repair items arrive either as a list or as an already serialized JSON string
RepairItems = Union[List[RepairItem], str]


class RepairRequestCreate(CamelModel):
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_phone: str = Field(..., min_length=1, max_length=20)
    customer_email: Optional[str] = None
    device_type: str = Field(..., min_length=1, max_length=255)
    device_brand: Optional[str] = None
    device_model: Optional[str] = None
    device_serial_number: Optional[str] = None
    problem_description: str = Field(..., min_length=1)
    repair_service_id: Optional[str] = None
    estimated_price: Optional[Decimal] = None
    images: List[str] = []   # URLs of already uploaded images, in display order

    @field_validator("estimated_price", mode="before")
    @classmethod
    def blank_estimated_price(cls, value):
        return _blank_to_none(value)


class AdminRepairRequestCreate(RepairRequestCreate):
    status: Optional[str] = None


class RepairRequestUpdate(CamelModel):
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    device_type: Optional[str] = None
    device_brand: Optional[str] = None
    device_model: Optional[str] = None
    device_serial_number: Optional[str] = None
    problem_description: Optional[str] = None
    repair_service_id: Optional[str] = None
    status: Optional[str] = None
    estimated_price: Optional[Decimal] = None
    final_price: Optional[Decimal] = None
    labor_cost: Optional[Decimal] = None
    parts_cost: Optional[Decimal] = None
    diagnosis_notes: Optional[str] = None
    repair_notes: Optional[str] = None
    repair_items: Optional[RepairItems] = None

    @field_validator("customer_name", "customer_phone", "device_type", "problem_description", "status")
    @classmethod
    def required_columns(cls, value):
        return reject_null(value)


class PriceQuote(CamelModel):
    # optional here so a missing price is reported as a 400 by the service
    final_price: Optional[Decimal] = None
    labor_cost: Optional[Decimal] = None
    parts_cost: Optional[Decimal] = None
    diagnosis_notes: Optional[str] = None
    repair_items: Optional[RepairItems] = None

    @field_validator("final_price", "labor_cost", "parts_cost", mode="before")
    @classmethod
    def blank_amounts(cls, value):
        return _blank_to_none(value)


class StatusUpdate(CamelModel):
    status: Optional[str] = None
    repair_notes: Optional[str] = None
    repair_items: Optional[RepairItems] = None


class ApprovalDecision(CamelModel):
    # only a JSON boolean counts; "true" or 1 is not an answer
    approved: StrictBool


class RepairRequestImageCreate(CamelModel):
    image_url: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    order: int = 0


class RepairRequestImageResponse(CamelModel):
    id: str
    repair_request_id: str
    image_url: str
    description: Optional[str] = None
    order: int = 0
    created_at: Optional[datetime] = None


class RepairRequestResponse(CamelModel):
    id: str
    tracking_number: str
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    device_type: str
    device_brand: Optional[str] = None
    device_model: Optional[str] = None
    device_serial_number: Optional[str] = None
    problem_description: str
    repair_service_id: Optional[str] = None
    status: str
    estimated_price: Optional[Decimal] = None
    final_price: Optional[Decimal] = None
    labor_cost: Optional[Decimal] = None
    parts_cost: Optional[Decimal] = None
    customer_approved: Optional[bool] = None
    approved_at: Optional[datetime] = None
    diagnosis_notes: Optional[str] = None
    repair_notes: Optional[str] = None
    repair_items: Optional[str] = None
    completed_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def approval_state(self) -> ApprovalState:
        return ApprovalState.from_flag(self.customer_approved)


class RepairRequestTracking(RepairRequestResponse):
    images: List[RepairRequestImageResponse] = []


class CustomerSummary(CamelModel):
    phone: str
    name: str
    email: Optional[str] = None
    total_repairs: int
    last_repair_date: Optional[datetime] = None


class CustomerDetail(CustomerSummary):
    repair_requests: List[RepairRequestResponse] = []
