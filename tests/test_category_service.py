import pytest
from fastapi import HTTPException

from app.schemas.category import CategoryCreate, CategoryUpdate
from app.services.category_service import CategoryService, slugify


@pytest.fixture
def service(storage):
    return CategoryService(storage)


async def add_products(storage, category_id, count):
    for i in range(count):
        await storage.create_product({
            "title": f"Product {category_id} {i}",
            "price": 10,
            "category_id": category_id,
        })


def test_slugify():
    assert slugify("Cep Telefonları") == "cep-telefonlari"
    assert slugify("  Audio & Video_Kits ") == "audio-video-kits"
    assert slugify("Ölçü Aletleri") == "olcu-aletleri"
    assert slugify("!!!") == ""


async def test_hierarchical_aggregates_root_counts(service, storage):
    phones = await service.create_category(CategoryCreate(name="Phones"))
    cases = await service.create_category(CategoryCreate(name="Cases", parent_id=phones.id))
    await add_products(storage, phones.id, 2)
    await add_products(storage, cases.id, 3)

    forest = await service.get_categories_hierarchical()

    assert len(forest) == 1
    assert forest[0].product_count == 5
    assert forest[0].children[0].id == cases.id
    assert forest[0].children[0].product_count == 3


async def test_by_parent_roots_carry_subtree_totals(service, storage):
    phones = await service.create_category(CategoryCreate(name="Phones", order=1))
    audio = await service.create_category(CategoryCreate(name="Audio", order=2))
    cases = await service.create_category(CategoryCreate(name="Cases", parent_id=phones.id))
    chargers = await service.create_category(CategoryCreate(name="Chargers", parent_id=cases.id))
    await add_products(storage, cases.id, 1)
    await add_products(storage, chargers.id, 4)
    await add_products(storage, audio.id, 2)

    roots = await service.get_categories_by_parent(None)
    assert [(c.id, c.product_count) for c in roots] == [(phones.id, 5), (audio.id, 2)]

    children = await service.get_categories_by_parent(phones.id)
    assert [(c.id, c.product_count) for c in children] == [(cases.id, 1)]


async def test_flat_listing_aggregates_roots_only(service, storage):
    phones = await service.create_category(CategoryCreate(name="Phones"))
    cases = await service.create_category(CategoryCreate(name="Cases", parent_id=phones.id, order=1))
    await add_products(storage, cases.id, 2)

    flat = await service.get_categories_flat()

    counts = {c.id: c.product_count for c in flat}
    assert counts == {phones.id: 2, cases.id: 2}
    assert await service.get_category_total_product_count(phones.id) == 2


async def test_create_generates_unique_slug(service):
    first = await service.create_category(CategoryCreate(name="Smart Watches"))
    second = await service.create_category(CategoryCreate(name="Smart Watches"))

    assert first.slug == "smart-watches"
    assert second.slug.startswith("smart-watches-")
    assert second.slug != first.slug


async def test_create_rejects_taken_slug(service):
    await service.create_category(CategoryCreate(name="Audio", slug="audio"))

    with pytest.raises(HTTPException) as exc_info:
        await service.create_category(CategoryCreate(name="Sound", slug="audio"))

    assert exc_info.value.status_code == 409


async def test_create_requires_existing_parent(service):
    with pytest.raises(HTTPException) as exc_info:
        await service.create_category(CategoryCreate(name="Cases", parent_id="missing"))

    assert exc_info.value.status_code == 404


async def test_update_rejects_self_parent(service):
    phones = await service.create_category(CategoryCreate(name="Phones"))

    with pytest.raises(HTTPException) as exc_info:
        await service.update_category(phones.id, CategoryUpdate(parent_id=phones.id))

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Category cannot be its own parent"


async def test_rename_regenerates_slug(service):
    phones = await service.create_category(CategoryCreate(name="Phones"))

    updated = await service.update_category(phones.id, CategoryUpdate(name="Mobile Phones"))

    assert updated.name == "Mobile Phones"
    assert updated.slug == "mobile-phones"


async def test_update_keeps_slug_when_name_unchanged(service):
    phones = await service.create_category(CategoryCreate(name="Phones"))

    updated = await service.update_category(phones.id, CategoryUpdate(icon="smartphone", order=3))

    assert updated.slug == "phones"
    assert updated.icon == "smartphone"
    assert updated.order == 3


async def test_delete_blocked_by_children(service):
    phones = await service.create_category(CategoryCreate(name="Phones"))
    await service.create_category(CategoryCreate(name="Cases", parent_id=phones.id))

    with pytest.raises(HTTPException) as exc_info:
        await service.delete_category(phones.id)

    assert exc_info.value.status_code == 400
    assert "child categories" in exc_info.value.detail


async def test_delete_blocked_by_products(service, storage):
    phones = await service.create_category(CategoryCreate(name="Phones"))
    await add_products(storage, phones.id, 1)

    with pytest.raises(HTTPException) as exc_info:
        await service.delete_category(phones.id)

    assert exc_info.value.status_code == 400
    assert "products" in exc_info.value.detail


async def test_delete_empty_category(service, storage):
    phones = await service.create_category(CategoryCreate(name="Phones"))

    await service.delete_category(phones.id)

    assert await storage.get_category(phones.id) is None


async def test_get_category_by_slug_not_found(service):
    with pytest.raises(HTTPException) as exc_info:
        await service.get_category_by_slug("nothing-here")

    assert exc_info.value.status_code == 404
