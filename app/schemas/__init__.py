from .category import (
    CategoryCreate,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
    CategoryWithCount,
)
from .product import ProductCreate, ProductResponse
from .repair_request import (
    AdminRepairRequestCreate,
    ApprovalDecision,
    CustomerDetail,
    CustomerSummary,
    PriceQuote,
    RepairItem,
    RepairRequestCreate,
    RepairRequestImageCreate,
    RepairRequestImageResponse,
    RepairRequestResponse,
    RepairRequestTracking,
    RepairRequestUpdate,
    StatusUpdate,
)
from .repair_service import RepairServiceCreate, RepairServiceResponse, RepairServiceUpdate


__all__ = [
    # category schemas
    "CategoryCreate",
    "CategoryResponse",
    "CategoryTreeNode",
    "CategoryUpdate",
    "CategoryWithCount",

    # product schemas
    "ProductCreate",
    "ProductResponse",

    # repair request schemas
    "AdminRepairRequestCreate",
    "ApprovalDecision",
    "CustomerDetail",
    "CustomerSummary",
    "PriceQuote",
    "RepairItem",
    "RepairRequestCreate",
    "RepairRequestImageCreate",
    "RepairRequestImageResponse",
    "RepairRequestResponse",
    "RepairRequestTracking",
    "RepairRequestUpdate",
    "StatusUpdate",

    # repair service schemas
    "RepairServiceCreate",
    "RepairServiceResponse",
    "RepairServiceUpdate",
]
