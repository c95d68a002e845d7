import json
import logging
import random
import string
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..core.config import Config
from ..enums import ApprovalState, RepairItemType, RepairStatus
from ..exceptions import BadRequestException, NotFoundException
from ..models import RepairRequest, RepairRequestImage
from ..repositories import Storage
from ..schemas.repair_request import (
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


logger = logging.getLogger(__name__)

BASE36_DIGITS = string.digits + string.ascii_uppercase


def to_base36(number: int) -> str:
    if number == 0:
        return "0"

    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def generate_tracking_number(now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    """
    Build a customer-facing tracking number.

    Format: prefix + base-36 millisecond timestamp + random base-36 suffix, all
    upper case (``TRM1ABCDEF9XQ2``). Uniqueness is not checked against storage.
    """
    now = now or datetime.now(timezone.utc)
    rng = rng or random.SystemRandom()

    millis = int(now.timestamp() * 1000)
    suffix = "".join(rng.choice(BASE36_DIGITS) for _ in range(Config.TRACKING_NUMBER_SUFFIX_LENGTH))
    return f"{Config.TRACKING_NUMBER_PREFIX}{to_base36(millis)}{suffix}"


def utcnow() -> datetime:
    # DateTime columns are naive and hold UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def serialize_repair_items(items) -> Optional[str]:
    """Repair items are stored as JSON text; strings are assumed already serialized."""
    if items is None:
        return None
    if isinstance(items, str):
        return items
    return json.dumps([item.model_dump(mode="json") for item in items])


def summarize_repair_items(items: List[RepairItem]) -> Dict[RepairItemType, Decimal]:
    totals: Dict[RepairItemType, Decimal] = defaultdict(Decimal)
    for item in items:
        if item.price is not None:
            totals[item.type] += item.price
    return totals


class RepairRequestService:
    """
    Repair request workflow.

    A request moves through ``pending -> diagnosis -> price_quoted ->
    customer_approved | customer_rejected -> in_repair -> completed ->
    delivered``. Only quoting and customer approval enforce their own effects;
    the admin status update stores any status string as given and only stamps
    ``completed_at`` / ``delivered_at`` for the matching values.

    Concurrent updates are last-write-wins.
    """

    def __init__(self, storage: Storage):
        self.storage = storage


    async def list_requests(self) -> List[RepairRequest]:
        return await self.storage.get_repair_requests()


    async def get_request(self, request_id: str) -> RepairRequest:
        request = await self.storage.get_repair_request(request_id)

        if not request:
            raise NotFoundException("Repair request not found")

        return request


    async def get_by_tracking_number(self, tracking_number: str) -> RepairRequest:
        request = await self.storage.get_repair_request_by_tracking_number(tracking_number)

        if not request:
            raise NotFoundException("Repair request not found")

        return request


    async def track(self, tracking_number: str) -> RepairRequestTracking:
        """
        Customer-facing lookup: the request plus its images in display order.
        """
        request = await self.get_by_tracking_number(tracking_number)
        images = await self.storage.get_repair_request_images(request.id)

        tracking = RepairRequestTracking.model_validate(request)
        tracking.images = [RepairRequestImageResponse.model_validate(image) for image in images]
        return tracking


    async def create_request(self, data: RepairRequestCreate, status: Optional[str] = None) -> RepairRequest:
        """
        Create a repair request and attach its pre-uploaded images.

        Status is ``pending`` unless an admin supplies another one. Images are
        written after the request in list order; a failure while attaching them
        leaves the request in place.
        """
        request_data = data.model_dump(exclude={"images"})
        request_data["tracking_number"] = generate_tracking_number()
        request_data["status"] = status or RepairStatus.PENDING.value

        request = await self.storage.create_repair_request(request_data)
        logger.info("Created repair request %s with tracking number %s", request.id, request.tracking_number)

        for index, image_url in enumerate(data.images):
            try:
                await self.storage.create_repair_request_image({
                    "repair_request_id": request.id,
                    "image_url": image_url,
                    "description": None,
                    "order": index,
                })
            except Exception:
                logger.exception("Failed to attach image %d to repair request %s", index, request.id)
                raise

        return request


    async def update_request(self, request_id: str, data: RepairRequestUpdate) -> RepairRequest:
        await self.get_request(request_id)

        update_data = data.model_dump(exclude_unset=True)
        if "repair_items" in update_data:
            update_data["repair_items"] = serialize_repair_items(data.repair_items)

        return await self.storage.update_repair_request(request_id, update_data)


    async def quote_price(self, request_id: str, quote: PriceQuote) -> RepairRequest:
        """
        Record the diagnosed price and ask the customer for approval again.

        Re-quoting always clears a previous approval or rejection.
        """
        if not quote.final_price:
            raise BadRequestException("Final price is required")

        request = await self.get_request(request_id)

        update_data: Dict[str, Any] = {
            "final_price": quote.final_price,
            "diagnosis_notes": quote.diagnosis_notes or request.diagnosis_notes,
            "status": RepairStatus.PRICE_QUOTED.value,
            "customer_approved": ApprovalState.PENDING.to_flag(),
            "approved_at": None,
        }

        if quote.labor_cost is not None:
            update_data["labor_cost"] = quote.labor_cost

        if quote.parts_cost is not None:
            update_data["parts_cost"] = quote.parts_cost

        if quote.repair_items is not None:
            update_data["repair_items"] = serialize_repair_items(quote.repair_items)

            if not isinstance(quote.repair_items, str):
                # costs left blank are derived from the itemised lines
                totals = summarize_repair_items(quote.repair_items)
                if quote.labor_cost is None and totals.get(RepairItemType.LABOR):
                    update_data["labor_cost"] = totals[RepairItemType.LABOR]
                if quote.parts_cost is None and totals.get(RepairItemType.PART):
                    update_data["parts_cost"] = totals[RepairItemType.PART]

        updated = await self.storage.update_repair_request(request_id, update_data)
        logger.info("Quoted %s for repair request %s", quote.final_price, request_id)
        return updated


    async def set_customer_approval(self, tracking_number: str, approved: bool) -> RepairRequest:
        """
        Store the customer's answer to a price quote.
        """
        request = await self.get_by_tracking_number(tracking_number)

        if RepairStatus.parse(request.status) is not RepairStatus.PRICE_QUOTED:
            logger.debug("Approval recorded for repair request %s in status %r",
                         request.id, request.status)

        decision = ApprovalState.APPROVED if approved else ApprovalState.REJECTED
        status = RepairStatus.CUSTOMER_APPROVED if approved else RepairStatus.CUSTOMER_REJECTED

        updated = await self.storage.update_repair_request(request.id, {
            "customer_approved": decision.to_flag(),
            "approved_at": utcnow() if approved else None,
            "status": status.value,
        })
        logger.info("Repair request %s %s by customer", request.id, decision.value)
        return updated


    async def update_status(self, request_id: str, data: StatusUpdate) -> RepairRequest:
        """
        Set the status verbatim.

        Any non-empty string is accepted. ``completed`` and ``delivered`` stamp
        their timestamp on every call.
        """
        if not data.status:
            raise BadRequestException("Status is required")

        await self.get_request(request_id)

        update_data: Dict[str, Any] = {"status": data.status}

        if data.repair_notes is not None:
            update_data["repair_notes"] = data.repair_notes

        if data.repair_items is not None:
            update_data["repair_items"] = serialize_repair_items(data.repair_items)

        known_status = RepairStatus.parse(data.status)
        if known_status is RepairStatus.COMPLETED:
            update_data["completed_at"] = utcnow()
        elif known_status is RepairStatus.DELIVERED:
            update_data["delivered_at"] = utcnow()
        elif known_status is None:
            logger.warning("Repair request %s set to unrecognised status %r", request_id, data.status)

        return await self.storage.update_repair_request(request_id, update_data)


    async def delete_request(self, request_id: str) -> None:
        await self.get_request(request_id)
        await self.storage.delete_repair_request(request_id)
        logger.info("Deleted repair request %s", request_id)


    # Images
    async def list_images(self, request_id: str) -> List[RepairRequestImage]:
        return await self.storage.get_repair_request_images(request_id)


    async def add_image(self, request_id: str, data: RepairRequestImageCreate) -> RepairRequestImage:
        await self.get_request(request_id)

        return await self.storage.create_repair_request_image({
            "repair_request_id": request_id,
            "image_url": data.image_url,
            "description": data.description or None,
            "order": data.order or 0,
        })


    async def delete_image(self, image_id: str) -> None:
        await self.storage.delete_repair_request_image(image_id)


    # Customers
    @staticmethod
    def _summarize_customer(phone: str, requests: List[RepairRequest]) -> CustomerSummary:
        ordered = sorted(requests, key=lambda r: r.created_at or datetime.min, reverse=True)
        latest = ordered[0]
        return CustomerSummary(
            phone=phone,
            name=latest.customer_name,
            email=latest.customer_email,
            total_repairs=len(requests),
            last_repair_date=latest.created_at,
        )


    async def list_customers(self) -> List[CustomerSummary]:
        """
        Customers derived from repair requests, grouped by phone number, most
        recent repair first.
        """
        by_phone: Dict[str, List[RepairRequest]] = defaultdict(list)
        for request in await self.storage.get_repair_requests():
            by_phone[request.customer_phone].append(request)

        customers = [self._summarize_customer(phone, requests) for phone, requests in by_phone.items()]
        return sorted(
            customers,
            key=lambda c: (c.last_repair_date is not None, c.last_repair_date or datetime.min),
            reverse=True,
        )


    async def get_customer(self, phone: str) -> CustomerDetail:
        requests = await self.storage.get_repair_requests_by_customer_phone(phone)

        if not requests:
            raise NotFoundException("Customer not found")

        summary = self._summarize_customer(phone, requests)
        return CustomerDetail(
            **summary.model_dump(),
            repair_requests=[RepairRequestResponse.model_validate(r) for r in requests],
        )
