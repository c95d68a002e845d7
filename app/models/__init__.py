from .category import Category
from .product import Product
from .repair_request import RepairRequest, RepairRequestImage
from .repair_service import RepairService


__all__ = [
    "Category",
    "Product",
    "RepairRequest",
    "RepairRequestImage",
    "RepairService",
]
