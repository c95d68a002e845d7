from fastapi import APIRouter, Depends, Path, Query, Response, status
from typing import List, Optional, Union

from ..core.dependencies import (
    get_category_service,
    get_current_admin,
    get_product_service,
    get_repair_catalog_service,
    get_repair_request_service,
)
from ..schemas.category import CategoryCreate, CategoryResponse, CategoryTreeNode, CategoryUpdate
from ..schemas.product import ProductCreate, ProductResponse
from ..schemas.repair_request import (
    AdminRepairRequestCreate,
    CustomerDetail,
    CustomerSummary,
    PriceQuote,
    RepairRequestImageCreate,
    RepairRequestImageResponse,
    RepairRequestResponse,
    RepairRequestUpdate,
    StatusUpdate,
)
from ..schemas.repair_service import RepairServiceCreate, RepairServiceResponse, RepairServiceUpdate
from ..services import CategoryService, ProductService, RepairCatalogService, RepairRequestService
from .categories import parse_parent_id


router = APIRouter()

admin_only = Depends(get_current_admin)


# Categories
@router.get("/categories", response_model=None)
async def admin_list_categories(
    hierarchical: bool = Query(False, description="Return the nested category forest"),
    main: bool = Query(False, description="Only root categories"),
    parent: Optional[str] = Query(None, description="Only children of this category; `null` for roots"),
    service: CategoryService = Depends(get_category_service),
    _: bool = admin_only
) -> Union[List[CategoryTreeNode], List[CategoryResponse]]:
    """
    **List Categories - Admin Only**

    **Query Parameters:**
    - **main**: `true` returns root categories only
    - **parent**: returns the direct children of the given category (`null` for roots)
    - **hierarchical**: `true` returns the category forest with aggregated counts

    Without parameters every category is returned in display order.
    """
    if main or parent is not None:
        parent_id = None if main else parse_parent_id(parent)
        categories = await service.list_child_categories(parent_id)
        return [CategoryResponse.model_validate(c) for c in categories]

    if hierarchical:
        return await service.get_categories_hierarchical()

    return [CategoryResponse.model_validate(c) for c in await service.list_categories()]


@router.get("/categories/hierarchical", response_model=List[CategoryTreeNode])
async def admin_list_categories_hierarchical(
    service: CategoryService = Depends(get_category_service),
    _: bool = admin_only
):
    return await service.get_categories_hierarchical()


@router.get("/categories/parent/{parent_id}", response_model=List[CategoryResponse])
async def admin_list_categories_by_parent(
    parent_id: str = Path(..., description="Parent category ID, or `null` for root categories"),
    service: CategoryService = Depends(get_category_service),
    _: bool = admin_only
):
    return await service.list_child_categories(parse_parent_id(parent_id))


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def admin_get_category(
    category_id: str = Path(..., description="ID of the category"),
    service: CategoryService = Depends(get_category_service),
    _: bool = admin_only
):
    return await service.get_category(category_id)


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
    _: bool = admin_only
):
    """
    **Create Category - Admin Only**

    **Request Body:**
    - **name**: Category name (required)
    - **slug**: URL slug; generated from the name when omitted
    - **parentId**: ID of the parent category, `null` for a root category
    - **icon**: Icon name shown in the storefront menu
    - **order**: Position among its siblings (default 0)

    **Error Responses:**
    - **404 Not Found**: Parent category not found
    - **409 Conflict**: Slug already in use
    """
    return await service.create_category(category_data)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_data: CategoryUpdate,
    category_id: str = Path(..., description="ID of the category to update"),
    service: CategoryService = Depends(get_category_service),
    _: bool = admin_only
):
    """
    **Update Category - Admin Only**

    Only the fields sent are changed. Renaming without an explicit slug
    regenerates the slug.

    **Error Responses:**
    - **404 Not Found**: Category or parent category not found
    - **409 Conflict**: Slug already in use, or the category is set as its own parent
    """
    return await service.update_category(category_id, category_data)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str = Path(..., description="ID of the category to delete"),
    service: CategoryService = Depends(get_category_service),
    _: bool = admin_only
):
    """
    **Delete Category - Admin Only**

    **Error Responses:**
    - **400 Bad Request**: The category still has child categories or products
    - **404 Not Found**: Category not found
    """
    await service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Products
@router.get("/products", response_model=List[ProductResponse])
async def admin_list_products(
    category_id: Optional[str] = Query(None, alias="categoryId", description="Only products of this category"),
    service: ProductService = Depends(get_product_service),
    _: bool = admin_only
):
    return await service.list_products(category_id)


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_service),
    _: bool = admin_only
):
    """
    **Create Product - Admin Only**

    Prices are rounded to two decimals; an empty `originalPrice` means the
    product is not discounted.
    """
    return await service.create_product(product_data)


# Repair services
@router.get("/repair-services", response_model=List[RepairServiceResponse])
async def admin_list_repair_services(
    service: RepairCatalogService = Depends(get_repair_catalog_service),
    _: bool = admin_only
):
    return await service.list_services()


@router.get("/repair-services/{service_id}", response_model=RepairServiceResponse)
async def admin_get_repair_service(
    service_id: str = Path(..., description="ID of the repair service"),
    service: RepairCatalogService = Depends(get_repair_catalog_service),
    _: bool = admin_only
):
    return await service.get_service(service_id)


@router.post("/repair-services", response_model=RepairServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_repair_service(
    service_data: RepairServiceCreate,
    service: RepairCatalogService = Depends(get_repair_catalog_service),
    _: bool = admin_only
):
    return await service.create_service(service_data)


@router.put("/repair-services/{service_id}", response_model=RepairServiceResponse)
async def update_repair_service(
    service_data: RepairServiceUpdate,
    service_id: str = Path(..., description="ID of the repair service"),
    service: RepairCatalogService = Depends(get_repair_catalog_service),
    _: bool = admin_only
):
    return await service.update_service(service_id, service_data)


@router.delete("/repair-services/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_repair_service(
    service_id: str = Path(..., description="ID of the repair service"),
    service: RepairCatalogService = Depends(get_repair_catalog_service),
    _: bool = admin_only
):
    await service.delete_service(service_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Repair requests
@router.get("/repair-requests", response_model=List[RepairRequestResponse])
async def admin_list_repair_requests(
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    """
    List all repair requests, newest first.
    """
    return await service.list_requests()


@router.delete("/repair-requests/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_repair_request_image(
    image_id: str = Path(..., description="ID of the image to delete"),
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    await service.delete_image(image_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/repair-requests/{request_id}", response_model=RepairRequestResponse)
async def admin_get_repair_request(
    request_id: str = Path(..., description="ID of the repair request"),
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    return await service.get_request(request_id)


@router.post("/repair-requests", response_model=RepairRequestResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_repair_request(
    request_data: AdminRepairRequestCreate,
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    """
    **Create Repair Request - Admin Only**

    Same body as the public submission, plus an optional **status** for
    requests taken in over the counter.
    """
    return await service.create_request(request_data, status=request_data.status)


@router.put("/repair-requests/{request_id}", response_model=RepairRequestResponse)
async def admin_update_repair_request(
    request_data: RepairRequestUpdate,
    request_id: str = Path(..., description="ID of the repair request"),
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    return await service.update_request(request_id, request_data)


@router.post("/repair-requests/{request_id}/quote-price", response_model=RepairRequestResponse)
async def quote_repair_price(
    quote: PriceQuote,
    request_id: str = Path(..., description="ID of the repair request"),
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    """
    **Quote Repair Price - Admin Only**

    **Request Body:**
    - **finalPrice**: Quoted price (required)
    - **laborCost**, **partsCost**: Cost breakdown; derived from `repairItems` when omitted
    - **diagnosisNotes**: Findings; the previous notes are kept when omitted
    - **repairItems**: Itemised `labor` and `part` lines

    The request moves to `price_quoted` and the customer's approval is reset
    to pending.

    **Error Responses:**
    - **400 Bad Request**: Final price missing
    - **404 Not Found**: Repair request not found
    """
    return await service.quote_price(request_id, quote)


@router.post("/repair-requests/{request_id}/update-status", response_model=RepairRequestResponse)
async def update_repair_status(
    status_data: StatusUpdate,
    request_id: str = Path(..., description="ID of the repair request"),
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    """
    **Update Repair Status - Admin Only**

    The status is stored as sent. `completed` and `delivered` record the
    completion and delivery time.

    **Error Responses:**
    - **400 Bad Request**: Status missing
    - **404 Not Found**: Repair request not found
    """
    return await service.update_status(request_id, status_data)


@router.get("/repair-requests/{request_id}/images", response_model=List[RepairRequestImageResponse])
async def admin_list_repair_request_images(
    request_id: str = Path(..., description="ID of the repair request"),
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    return await service.list_images(request_id)


@router.post(
    "/repair-requests/{request_id}/images",
    response_model=RepairRequestImageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_repair_request_image(
    image_data: RepairRequestImageCreate,
    request_id: str = Path(..., description="ID of the repair request"),
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    return await service.add_image(request_id, image_data)


@router.delete("/repair-requests/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def admin_delete_repair_request(
    request_id: str = Path(..., description="ID of the repair request"),
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    await service.delete_request(request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Customers
@router.get("/customers", response_model=List[CustomerSummary])
async def admin_list_customers(
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    """
    Customers who have submitted repair requests, grouped by phone number.
    """
    return await service.list_customers()


@router.get("/customers/{phone}", response_model=CustomerDetail)
async def admin_get_customer(
    phone: str = Path(..., description="Customer phone number"),
    service: RepairRequestService = Depends(get_repair_request_service),
    _: bool = admin_only
):
    return await service.get_customer(phone)
