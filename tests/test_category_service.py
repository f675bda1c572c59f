import pytest

from smart_planogram.enterprise.core import (
    AlreadyExistsError,
    FieldValidationError,
    ForbiddenError,
    NotFoundError,
)
from smart_planogram.observability import metrics_registry
from smart_planogram.persistence import InMemoryPlanogramRepository
from smart_planogram.services import CategoryService, PlanogramService


@pytest.mark.asyncio
async def test_category_names_are_unique_per_owner():
    service = CategoryService(InMemoryPlanogramRepository())
    await service.create_category("user-1", "Haircare")

    with pytest.raises(AlreadyExistsError):
        await service.create_category("user-1", "  HAIRCARE ")

    other = await service.create_category("user-2", "Haircare")
    assert other.owner_id == "user-2"


@pytest.mark.asyncio
async def test_blank_category_name_is_rejected():
    service = CategoryService(InMemoryPlanogramRepository())
    with pytest.raises(FieldValidationError):
        await service.create_category("user-1", "   ")


@pytest.mark.asyncio
async def test_rename_category():
    service = CategoryService(InMemoryPlanogramRepository())
    first = await service.create_category("user-1", "Haircare")
    await service.create_category("user-1", "Oral care")

    renamed = await service.rename_category("user-1", first.id, "Hair care")
    assert renamed.name == "Hair care"
    assert (await service.rename_category("user-1", first.id, "hair CARE")).name == "hair CARE"

    with pytest.raises(AlreadyExistsError):
        await service.rename_category("user-1", first.id, "oral care")
    with pytest.raises(ForbiddenError):
        await service.rename_category("user-2", first.id, "Mine now")


@pytest.mark.asyncio
async def test_delete_category_drops_planogram():
    repo = InMemoryPlanogramRepository()
    categories = CategoryService(repo)
    planograms = PlanogramService(repo)
    category = await categories.create_category("user-1", "Haircare")
    planogram = await planograms.create_planogram("user-1", category.id)

    await categories.delete_category("user-1", category.id)

    assert await repo.load_planogram(planogram.id) is None
    with pytest.raises(NotFoundError):
        await categories.get_category("user-1", category.id)
    with pytest.raises(NotFoundError):
        await planograms.add_product("user-1", planogram.id, name="Soap", mrp=1, gp=1, facings=1)


def _rename_count(outcome):
    value = metrics_registry.get_sample_value(
        "smart_planogram_mutations_total",
        {"operation": "rename_category", "outcome": outcome},
    )
    return value or 0.0


@pytest.mark.asyncio
async def test_rename_category_touches_timestamp_and_counts_rejections():
    repo = InMemoryPlanogramRepository()
    service = CategoryService(repo)
    category = await service.create_category("user-1", "Haircare")
    await service.create_category("user-1", "Oral care")

    renamed = await service.rename_category("user-1", category.id, "Hair care")
    assert renamed.updated_at > category.updated_at
    assert renamed.created_at == category.created_at
    assert (await repo.get_category(category.id)).updated_at == renamed.updated_at

    before = _rename_count("ALREADY_EXISTS")
    with pytest.raises(AlreadyExistsError):
        await service.rename_category("user-1", category.id, "Oral care")
    assert _rename_count("ALREADY_EXISTS") == before + 1

    before = _rename_count("NOT_FOUND")
    with pytest.raises(NotFoundError):
        await service.rename_category("user-1", "missing", "Anything")
    assert _rename_count("NOT_FOUND") == before + 1
