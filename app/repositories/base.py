from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import Category, Product, RepairRequest, RepairRequestImage, RepairService


class Storage(ABC):
    """
    Persistence boundary used by the services.

    The category tree and the repair workflow only talk to this interface, so the
    relational store can be swapped (or faked in tests) without touching the
    business rules. Writes take plain dicts of column values.
    """

    # Categories
    @abstractmethod
    async def get_categories(self) -> List[Category]:
        """All categories ordered by (order, name)."""

    @abstractmethod
    async def get_categories_by_parent(self, parent_id: Optional[str]) -> List[Category]:
        """Direct children of ``parent_id``; roots when ``parent_id`` is None."""

    @abstractmethod
    async def get_category(self, category_id: str) -> Optional[Category]: ...

    @abstractmethod
    async def get_category_by_slug(self, slug: str) -> Optional[Category]: ...

    @abstractmethod
    async def category_slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool: ...

    @abstractmethod
    async def count_child_categories(self, category_id: str) -> int: ...

    @abstractmethod
    async def create_category(self, data: Dict[str, Any]) -> Category: ...

    @abstractmethod
    async def update_category(self, category_id: str, data: Dict[str, Any]) -> Optional[Category]: ...

    @abstractmethod
    async def delete_category(self, category_id: str) -> None: ...

    # Products
    @abstractmethod
    async def get_category_product_counts(self) -> Dict[str, int]:
        """Direct product count per category id, from a single aggregate query."""

    @abstractmethod
    async def count_products_in_category(self, category_id: str) -> int: ...

    @abstractmethod
    async def get_products(self, category_id: Optional[str] = None) -> List[Product]: ...

    @abstractmethod
    async def create_product(self, data: Dict[str, Any]) -> Product: ...

    # Repair services
    @abstractmethod
    async def get_repair_services(self) -> List[RepairService]: ...

    @abstractmethod
    async def get_repair_service(self, service_id: str) -> Optional[RepairService]: ...

    @abstractmethod
    async def create_repair_service(self, data: Dict[str, Any]) -> RepairService: ...

    @abstractmethod
    async def update_repair_service(self, service_id: str, data: Dict[str, Any]) -> Optional[RepairService]: ...

    @abstractmethod
    async def delete_repair_service(self, service_id: str) -> None: ...

    # Repair requests
    @abstractmethod
    async def get_repair_requests(self) -> List[RepairRequest]:
        """All repair requests, newest first."""

    @abstractmethod
    async def get_repair_request(self, request_id: str) -> Optional[RepairRequest]: ...

    @abstractmethod
    async def get_repair_request_by_tracking_number(self, tracking_number: str) -> Optional[RepairRequest]: ...

    @abstractmethod
    async def get_repair_requests_by_customer_phone(self, phone: str) -> List[RepairRequest]: ...

    @abstractmethod
    async def create_repair_request(self, data: Dict[str, Any]) -> RepairRequest: ...

    @abstractmethod
    async def update_repair_request(self, request_id: str, data: Dict[str, Any]) -> Optional[RepairRequest]: ...

    @abstractmethod
    async def delete_repair_request(self, request_id: str) -> None: ...

    # Repair request images
    @abstractmethod
    async def get_repair_request_images(self, request_id: str) -> List[RepairRequestImage]:
        """Images of a repair request ordered by their ``order`` field."""

    @abstractmethod
    async def create_repair_request_image(self, data: Dict[str, Any]) -> RepairRequestImage: ...

    @abstractmethod
    async def delete_repair_request_image(self, image_id: str) -> None: ...
