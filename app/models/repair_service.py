from sqlalchemy import Column, String, Text

from ..db.base import Base
from ..models.base import TimeStampMixin, generate_uuid


class RepairService(Base, TimeStampMixin):
    __tablename__ = "repair_services"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)


    def __repr__(self):
        return f'<RepairService(id={self.id}, name={self.name})>'
