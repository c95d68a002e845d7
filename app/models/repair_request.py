from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, DateTime
from sqlalchemy.sql import func

from ..db.base import Base
from ..enums import RepairStatus
from ..models.base import TimeStampMixin, generate_uuid


class RepairRequest(Base, TimeStampMixin):
    __tablename__ = "repair_requests"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    tracking_number = Column(String(50), nullable=False, unique=True, index=True)

    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=False, index=True)
    customer_email = Column(String(255), nullable=True)

    device_type = Column(String(255), nullable=False)
    device_brand = Column(String(255), nullable=True)
    device_model = Column(String(255), nullable=True)
    device_serial_number = Column(String(255), nullable=True)
    problem_description = Column(Text, nullable=False)
    repair_service_id = Column(String(36), nullable=True)

    # free-form in storage; RepairStatus lists the values the workflow itself writes
    status = Column(String(50), nullable=False, default=RepairStatus.PENDING.value)

    estimated_price = Column(Numeric(10, 2), nullable=True)
    final_price = Column(Numeric(10, 2), nullable=True)
    labor_cost = Column(Numeric(10, 2), nullable=True)
    parts_cost = Column(Numeric(10, 2), nullable=True)

    customer_approved = Column(Boolean, nullable=True)  # None = waiting, True = approved, False = rejected
    approved_at = Column(DateTime, nullable=True)

    diagnosis_notes = Column(Text, nullable=True)
    repair_notes = Column(Text, nullable=True)
    repair_items = Column(Text, nullable=True)  # JSON list of {type, description, price}

    completed_at = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)


    def __repr__(self):
        return f'<RepairRequest(id={self.id}, tracking_number={self.tracking_number}, status={self.status})>'


class RepairRequestImage(Base):
    __tablename__ = "repair_request_images"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    repair_request_id = Column(String(36), nullable=False, index=True)
    image_url = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    order = Column("order", Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


    def __repr__(self):
        return f'<RepairRequestImage(id={self.id}, repair_request_id={self.repair_request_id}, order={self.order})>'
