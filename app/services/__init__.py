from .category_service import CategoryService
from .product_service import ProductService
from .repair_catalog_service import RepairCatalogService
from .repair_request_service import RepairRequestService


__all__ = [
    "CategoryService",
    "ProductService",
    "RepairCatalogService",
    "RepairRequestService",
]
