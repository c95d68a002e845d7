from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional

from .base import Storage
from ..models import Category, Product, RepairRequest, RepairRequestImage, RepairService


class DatabaseStorage(Storage):
    """
    SQLAlchemy implementation of :class:`Storage` bound to one request session.

    Every write commits immediately. A request that spans several writes (a
    repair request followed by its images) is therefore not atomic.
    """

    def __init__(self, db: AsyncSession):
        self.db = db


    async def _add(self, instance):
        try:
            self.db.add(instance)
            await self.db.commit()
            await self.db.refresh(instance)
            return instance
        except Exception:
            await self.db.rollback()
            raise


    async def _update(self, model, entity_id: str, data: Dict[str, Any]):
        instance = await self.db.get(model, entity_id)
        if not instance:
            return None

        try:
            for field, value in data.items():
                setattr(instance, field, value)

            await self.db.commit()
            await self.db.refresh(instance)
            return instance
        except Exception:
            await self.db.rollback()
            raise


    async def _delete(self, model, entity_id: str) -> None:
        instance = await self.db.get(model, entity_id)
        if not instance:
            return

        try:
            await self.db.delete(instance)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise


    # Categories
    async def get_categories(self) -> List[Category]:
        result = await self.db.execute(select(Category).order_by(Category.order, Category.name))
        return list(result.scalars().all())


    async def get_categories_by_parent(self, parent_id: Optional[str]) -> List[Category]:
        query = select(Category)

        if parent_id is None:
            query = query.where(Category.parent_id.is_(None))
        else:
            query = query.where(Category.parent_id == parent_id)

        result = await self.db.execute(query.order_by(Category.order, Category.name))
        return list(result.scalars().all())


    async def get_category(self, category_id: str) -> Optional[Category]:
        return await self.db.get(Category, category_id)


    async def get_category_by_slug(self, slug: str) -> Optional[Category]:
        result = await self.db.execute(select(Category).where(Category.slug == slug))
        return result.scalars().first()


    async def category_slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        query = select(Category.id).where(Category.slug == slug)

        # when updating, the category's own slug does not count as taken
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)

        result = await self.db.execute(query)
        return result.first() is not None


    async def count_child_categories(self, category_id: str) -> int:
        query = select(func.count()).select_from(Category).where(Category.parent_id == category_id)
        return (await self.db.execute(query)).scalar() or 0


    async def create_category(self, data: Dict[str, Any]) -> Category:
        return await self._add(Category(**data))


    async def update_category(self, category_id: str, data: Dict[str, Any]) -> Optional[Category]:
        return await self._update(Category, category_id, data)


    async def delete_category(self, category_id: str) -> None:
        await self._delete(Category, category_id)


    # Products
    async def get_category_product_counts(self) -> Dict[str, int]:
        query = (
            select(Product.category_id, func.count(Product.id))
            .group_by(Product.category_id)
        )
        result = await self.db.execute(query)
        return {category_id: int(count or 0) for category_id, count in result.all()}


    async def count_products_in_category(self, category_id: str) -> int:
        query = select(func.count()).select_from(Product).where(Product.category_id == category_id)
        return (await self.db.execute(query)).scalar() or 0


    async def get_products(self, category_id: Optional[str] = None) -> List[Product]:
        query = select(Product)
        if category_id:
            query = query.where(Product.category_id == category_id)

        result = await self.db.execute(query.order_by(Product.created_at.desc()))
        return list(result.scalars().all())


    async def create_product(self, data: Dict[str, Any]) -> Product:
        return await self._add(Product(**data))


    # Repair services
    async def get_repair_services(self) -> List[RepairService]:
        result = await self.db.execute(select(RepairService).order_by(RepairService.name))
        return list(result.scalars().all())


    async def get_repair_service(self, service_id: str) -> Optional[RepairService]:
        return await self.db.get(RepairService, service_id)


    async def create_repair_service(self, data: Dict[str, Any]) -> RepairService:
        return await self._add(RepairService(**data))


    async def update_repair_service(self, service_id: str, data: Dict[str, Any]) -> Optional[RepairService]:
        return await self._update(RepairService, service_id, data)


    async def delete_repair_service(self, service_id: str) -> None:
        await self._delete(RepairService, service_id)


    # Repair requests
    async def get_repair_requests(self) -> List[RepairRequest]:
        result = await self.db.execute(select(RepairRequest).order_by(RepairRequest.created_at.desc()))
        return list(result.scalars().all())


    async def get_repair_request(self, request_id: str) -> Optional[RepairRequest]:
        return await self.db.get(RepairRequest, request_id)


    async def get_repair_request_by_tracking_number(self, tracking_number: str) -> Optional[RepairRequest]:
        result = await self.db.execute(
            select(RepairRequest).where(RepairRequest.tracking_number == tracking_number)
        )
        return result.scalars().first()


    async def get_repair_requests_by_customer_phone(self, phone: str) -> List[RepairRequest]:
        result = await self.db.execute(
            select(RepairRequest)
            .where(RepairRequest.customer_phone == phone)
            .order_by(RepairRequest.created_at.desc())
        )
        return list(result.scalars().all())


    async def create_repair_request(self, data: Dict[str, Any]) -> RepairRequest:
        return await self._add(RepairRequest(**data))


    async def update_repair_request(self, request_id: str, data: Dict[str, Any]) -> Optional[RepairRequest]:
        return await self._update(RepairRequest, request_id, data)


    async def delete_repair_request(self, request_id: str) -> None:
        await self._delete(RepairRequest, request_id)


    # Repair request images
    async def get_repair_request_images(self, request_id: str) -> List[RepairRequestImage]:
        result = await self.db.execute(
            select(RepairRequestImage)
            .where(RepairRequestImage.repair_request_id == request_id)
            .order_by(RepairRequestImage.order)
        )
        return list(result.scalars().all())


    async def create_repair_request_image(self, data: Dict[str, Any]) -> RepairRequestImage:
        return await self._add(RepairRequestImage(**data))


    async def delete_repair_request_image(self, image_id: str) -> None:
        await self._delete(RepairRequestImage, image_id)
