import logging
from sqlalchemy.exc import IntegrityError
from typing import List, Optional

from ..exceptions import ConflictException, NotFoundException
from ..models import Product
from ..repositories import Storage
from ..schemas.product import ProductCreate


logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, storage: Storage):
        self.storage = storage


    async def list_products(self, category_id: Optional[str] = None) -> List[Product]:
        return await self.storage.get_products(category_id)


    async def create_product(self, data: ProductCreate) -> Product:
        """Create a product in an existing category."""
        if not await self.storage.get_category(data.category_id):
            raise NotFoundException(f"Category with ID {data.category_id} not found")

        product_data = data.model_dump()
        product_data["slug"] = product_data.get("slug") or None

        try:
            product = await self.storage.create_product(product_data)
        except IntegrityError as e:
            logger.warning("Failed to create product %r: %s", product_data["title"], e)
            raise ConflictException("A product with this slug already exists")

        logger.info("Created product %s in category %s", product.id, product.category_id)
        return product
