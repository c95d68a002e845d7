from sqlalchemy import Column, Integer, String

from ..db.base import Base
from app.models.base import TimeStampMixin, generate_uuid


class Category(Base, TimeStampMixin):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    # plain column, not a foreign key: rows pointing at a missing parent are tolerated
    parent_id = Column(String(36), nullable=True, index=True)
    icon = Column(String(100), nullable=True)
    order = Column("order", Integer, nullable=False, default=0)


    def __repr__(self):
        return f'<Category(id={self.id}, name={self.name}, parent_id={self.parent_id})>'
