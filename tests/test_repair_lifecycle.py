import json
import random
import re
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi import HTTPException

from app.enums import ApprovalState, RepairStatus
from app.schemas.repair_request import (
    PriceQuote,
    RepairRequestCreate,
    RepairRequestImageCreate,
    RepairRequestUpdate,
    StatusUpdate,
)
from app.services.repair_request_service import (
    RepairRequestService,
    generate_tracking_number,
    to_base36,
)


TRACKING_NUMBER = re.compile(r"^TR[A-Z0-9]+$")


@pytest.fixture
def service(storage):
    return RepairRequestService(storage)


def make_request_data(**overrides):
    data = {
        "customer_name": "Ayşe Yılmaz",
        "customer_phone": "05551234567",
        "device_type": "Phone",
        "device_brand": "Samsung",
        "problem_description": "Screen is cracked",
    }
    data.update(overrides)
    return RepairRequestCreate(**data)


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "Z"
    assert to_base36(36) == "10"
    assert to_base36(1700000000000) == "LOYW3V28"


def test_tracking_number_format():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    tracking_number = generate_tracking_number(now=now, rng=random.Random(1))

    millis = to_base36(int(now.timestamp() * 1000))
    assert tracking_number.startswith("TR" + millis)
    assert len(tracking_number) == 2 + len(millis) + 4
    assert TRACKING_NUMBER.match(tracking_number)


def test_approval_state_flags():
    assert ApprovalState.from_flag(None) is ApprovalState.PENDING
    assert ApprovalState.from_flag(True) is ApprovalState.APPROVED
    assert ApprovalState.from_flag(False) is ApprovalState.REJECTED
    assert ApprovalState.PENDING.to_flag() is None
    assert ApprovalState.REJECTED.to_flag() is False


def test_status_parse_tolerates_unknown_values():
    assert RepairStatus.parse("in_repair") is RepairStatus.IN_REPAIR
    assert RepairStatus.parse("waiting_for_parts") is None


async def test_create_starts_pending(service):
    request = await service.create_request(make_request_data())

    assert request.status == "pending"
    assert request.customer_approved is None
    assert TRACKING_NUMBER.match(request.tracking_number)
    assert request.device_model is None


async def test_create_attaches_images_in_order(service):
    request = await service.create_request(make_request_data(images=["https://img/1.jpg", "https://img/2.jpg"]))

    tracking = await service.track(request.tracking_number)

    assert [image.image_url for image in tracking.images] == ["https://img/1.jpg", "https://img/2.jpg"]
    assert [image.order for image in tracking.images] == [0, 1]


async def test_admin_create_with_explicit_status(service):
    request = await service.create_request(make_request_data(), status="diagnosis")

    assert request.status == "diagnosis"


async def test_track_unknown_tracking_number(service):
    with pytest.raises(HTTPException) as exc_info:
        await service.track("TRNOPE")

    assert exc_info.value.status_code == 404


async def test_quote_moves_to_price_quoted(service):
    request = await service.create_request(make_request_data())

    quoted = await service.quote_price(request.id, PriceQuote(
        final_price=Decimal("1500"),
        diagnosis_notes="Display panel broken",
    ))

    assert quoted.status == "price_quoted"
    assert quoted.final_price == Decimal("1500")
    assert quoted.diagnosis_notes == "Display panel broken"
    assert quoted.customer_approved is None


async def test_quote_requires_final_price(service):
    request = await service.create_request(make_request_data())

    for quote in (PriceQuote(), PriceQuote(final_price=""), PriceQuote(final_price=0), PriceQuote(final_price="0.00")):
        with pytest.raises(HTTPException) as exc_info:
            await service.quote_price(request.id, quote)
        assert exc_info.value.status_code == 400

    unchanged = await service.get_request(request.id)
    assert unchanged.status == "pending"


async def test_quote_keeps_previous_diagnosis_notes(service):
    request = await service.create_request(make_request_data())
    await service.update_request(request.id, RepairRequestUpdate(diagnosis_notes="Battery swollen"))

    quoted = await service.quote_price(request.id, PriceQuote(final_price=Decimal("800")))

    assert quoted.diagnosis_notes == "Battery swollen"


async def test_quote_derives_costs_from_items(service):
    request = await service.create_request(make_request_data())

    quoted = await service.quote_price(request.id, PriceQuote(
        final_price=Decimal("1200"),
        repair_items=[
            {"type": "labor", "description": "Screen replacement", "price": "300"},
            {"type": "part", "description": "OLED panel", "price": "850"},
            {"type": "part", "description": "Adhesive", "price": "50"},
        ],
    ))

    assert quoted.labor_cost == Decimal("300")
    assert quoted.parts_cost == Decimal("900")
    items = json.loads(quoted.repair_items)
    assert [item["type"] for item in items] == ["labor", "part", "part"]


async def test_customer_approval(service):
    request = await service.create_request(make_request_data())
    await service.quote_price(request.id, PriceQuote(final_price=Decimal("1500")))

    approved = await service.set_customer_approval(request.tracking_number, True)

    assert approved.status == "customer_approved"
    assert approved.customer_approved is True
    assert approved.approved_at is not None


async def test_customer_rejection(service):
    request = await service.create_request(make_request_data())
    await service.quote_price(request.id, PriceQuote(final_price=Decimal("1500")))

    rejected = await service.set_customer_approval(request.tracking_number, False)

    assert rejected.status == "customer_rejected"
    assert rejected.customer_approved is False
    assert rejected.approved_at is None


async def test_requote_resets_approval(service):
    request = await service.create_request(make_request_data())
    await service.quote_price(request.id, PriceQuote(final_price=Decimal("1500")))
    await service.set_customer_approval(request.tracking_number, True)

    requoted = await service.quote_price(request.id, PriceQuote(final_price=Decimal("1300")))

    assert requoted.status == "price_quoted"
    assert requoted.customer_approved is None
    assert requoted.approved_at is None
    assert requoted.final_price == Decimal("1300")


async def test_completed_and_delivered_are_stamped(service):
    request = await service.create_request(make_request_data())

    completed = await service.update_status(request.id, StatusUpdate(status="completed"))
    first_completed_at = completed.completed_at
    assert first_completed_at is not None
    assert completed.delivered_at is None

    delivered = await service.update_status(request.id, StatusUpdate(status="delivered"))
    assert delivered.status == "delivered"
    assert delivered.delivered_at is not None
    assert delivered.completed_at == first_completed_at


async def test_completed_is_restamped(service):
    request = await service.create_request(make_request_data())
    first = await service.update_status(request.id, StatusUpdate(status="completed"))
    first_completed_at = first.completed_at

    again = await service.update_status(request.id, StatusUpdate(status="completed"))

    assert again.completed_at >= first_completed_at


async def test_any_status_is_accepted(service):
    request = await service.create_request(make_request_data())

    updated = await service.update_status(request.id, StatusUpdate(status="waiting_for_parts", repair_notes="Ordered"))

    assert updated.status == "waiting_for_parts"
    assert updated.repair_notes == "Ordered"
    assert updated.completed_at is None


async def test_status_required(service):
    request = await service.create_request(make_request_data())

    with pytest.raises(HTTPException) as exc_info:
        await service.update_status(request.id, StatusUpdate(status=""))

    assert exc_info.value.status_code == 400


async def test_status_update_unknown_request(service):
    with pytest.raises(HTTPException) as exc_info:
        await service.update_status("missing", StatusUpdate(status="completed"))

    assert exc_info.value.status_code == 404


async def test_images_added_and_deleted(service):
    request = await service.create_request(make_request_data())

    image = await service.add_image(request.id, RepairRequestImageCreate(image_url="https://img/a.jpg", order=2))
    assert [i.id for i in await service.list_images(request.id)] == [image.id]

    await service.delete_image(image.id)
    assert await service.list_images(request.id) == []


async def test_customers_grouped_by_phone(service):
    await service.create_request(make_request_data())
    await service.create_request(make_request_data(device_type="Laptop"))
    await service.create_request(make_request_data(customer_name="Mehmet", customer_phone="05330000000"))

    customers = await service.list_customers()

    totals = {c.phone: c.total_repairs for c in customers}
    assert totals == {"05551234567": 2, "05330000000": 1}

    detail = await service.get_customer("05551234567")
    assert detail.total_repairs == 2
    assert {r.device_type for r in detail.repair_requests} == {"Phone", "Laptop"}


async def test_unknown_customer(service):
    with pytest.raises(HTTPException) as exc_info:
        await service.get_customer("0000")

    assert exc_info.value.status_code == 404
