from fastapi import APIRouter, Depends, Path, status
from typing import List

from ..core.dependencies import get_repair_catalog_service, get_repair_request_service
from ..schemas.repair_request import (
    ApprovalDecision,
    RepairRequestCreate,
    RepairRequestImageResponse,
    RepairRequestResponse,
    RepairRequestTracking,
)
from ..schemas.repair_service import RepairServiceResponse
from ..services import RepairCatalogService, RepairRequestService


router = APIRouter()


@router.get("/repair-services", response_model=List[RepairServiceResponse])
async def list_repair_services(
    service: RepairCatalogService = Depends(get_repair_catalog_service),
):
    return await service.list_services()


@router.post("/repair-requests", response_model=RepairRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_repair_request(
    request_data: RepairRequestCreate,
    service: RepairRequestService = Depends(get_repair_request_service),
):
    """
    **Submit a Repair Request**

    **Request Body:**
    - **customerName**, **customerPhone**: contact details (required)
    - **deviceType**: device being repaired (required)
    - **deviceBrand**, **deviceModel**, **deviceSerialNumber**: optional device details
    - **problemDescription**: what is wrong (required)
    - **images**: URLs of images uploaded beforehand, in display order

    **Returns:**
    - The created request with status `pending` and its tracking number
    """
    return await service.create_request(request_data)


@router.get("/repair-requests/track/{tracking_number}", response_model=RepairRequestTracking)
async def track_repair_request(
    tracking_number: str = Path(..., description="Tracking number given at submission"),
    service: RepairRequestService = Depends(get_repair_request_service),
):
    """
    Look up a repair request by tracking number, including its images.
    """
    return await service.track(tracking_number)


@router.get("/repair-requests/{request_id}/images", response_model=List[RepairRequestImageResponse])
async def list_repair_request_images(
    request_id: str = Path(..., description="ID of the repair request"),
    service: RepairRequestService = Depends(get_repair_request_service),
):
    return await service.list_images(request_id)


@router.post("/repair-requests/{tracking_number}/approve", response_model=RepairRequestResponse)
async def approve_repair_quote(
    decision: ApprovalDecision,
    tracking_number: str = Path(..., description="Tracking number of the repair request"),
    service: RepairRequestService = Depends(get_repair_request_service),
):
    """
    **Approve or Reject a Price Quote**

    - `{"approved": true}` moves the request to `customer_approved` and records the approval time
    - `{"approved": false}` moves it to `customer_rejected`
    """
    return await service.set_customer_approval(tracking_number, decision.approved)
