from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric

from ..db.base import Base
from ..models.base import TimeStampMixin, generate_uuid


class Product(Base, TimeStampMixin):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=True)  # set only when the product is discounted
    image = Column(String(500), nullable=True)
    category_id = Column(String(36), nullable=False, index=True)
    is_new = Column(Boolean, default=False)
    limited_stock = Column(Integer, nullable=True)
    in_stock = Column(Boolean, default=True)

    # SEO
    meta_title = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)
    slug = Column(String(255), nullable=True, unique=True, index=True)


    def __repr__(self):
        return f"<Product(id={self.id}, category_id={self.category_id}, price={self.price})>"
