import pytest

from smart_planogram.enterprise.core import (
    AlreadyExistsError,
    ConflictError,
    FieldValidationError,
    ForbiddenError,
    InvalidPositionsError,
    NotFoundError,
    Position,
)
from smart_planogram.persistence import InMemoryPlanogramRepository
from smart_planogram.services import CategoryService, PlanogramService

OWNER = "user-1"
STRANGER = "user-2"


async def _setup():
    repo = InMemoryPlanogramRepository()
    categories = CategoryService(repo)
    planograms = PlanogramService(repo)
    category = await categories.create_category(OWNER, "Haircare")
    return repo, categories, planograms, category


@pytest.mark.asyncio
async def test_create_planogram_persists_and_links_category():
    repo, _categories, planograms, category = await _setup()

    planogram = await planograms.create_planogram(OWNER, category.id)

    assert planogram.version == 1
    assert (planogram.grid_size.rows, planogram.grid_size.cols) == (4, 4)
    stored_category = await repo.get_category(category.id)
    assert stored_category.planogram_id == planogram.id
    assert (await planograms.get_planogram(OWNER, category.id)).id == planogram.id


@pytest.mark.asyncio
async def test_create_planogram_with_custom_grid_and_duplicates():
    _repo, _categories, planograms, category = await _setup()

    planogram = await planograms.create_planogram(OWNER, category.id, rows=3, cols=6)
    assert (planogram.grid_size.rows, planogram.grid_size.cols) == (3, 6)

    with pytest.raises(AlreadyExistsError):
        await planograms.create_planogram(OWNER, category.id)


@pytest.mark.asyncio
async def test_create_planogram_rejects_bad_grid_and_missing_category():
    _repo, categories, planograms, category = await _setup()

    with pytest.raises(FieldValidationError):
        await planograms.create_planogram(OWNER, category.id, rows=1, cols=4)
    with pytest.raises(NotFoundError):
        await planograms.create_planogram(OWNER, "missing")

    stored = await categories.get_category(OWNER, category.id)
    assert stored.planogram_id is None


@pytest.mark.asyncio
async def test_get_planogram_without_layout():
    _repo, _categories, planograms, category = await _setup()
    with pytest.raises(NotFoundError):
        await planograms.get_planogram(OWNER, category.id)


@pytest.mark.asyncio
async def test_mutations_require_ownership():
    _repo, _categories, planograms, category = await _setup()
    planogram = await planograms.create_planogram(OWNER, category.id)

    with pytest.raises(ForbiddenError):
        await planograms.resize_grid(STRANGER, planogram.id, 6, 6)
    with pytest.raises(ForbiddenError):
        await planograms.get_planogram(STRANGER, category.id)
    with pytest.raises(NotFoundError):
        await planograms.resize_grid(OWNER, "missing", 6, 6)


@pytest.mark.asyncio
async def test_rejected_mutation_is_not_persisted():
    repo, _categories, planograms, category = await _setup()
    planogram = await planograms.create_planogram(OWNER, category.id)
    planogram = await planograms.add_product(
        OWNER, planogram.id, name="Soap", mrp=50, gp=20, facings=2,
        positions=[Position(row=0, col=0), Position(row=0, col=1)],
    )

    with pytest.raises(InvalidPositionsError):
        await planograms.add_product(
            OWNER, planogram.id, name="Shampoo", mrp=120, gp=25, facings=1,
            positions=[Position(row=0, col=1)],
        )

    stored = await repo.load_planogram(planogram.id)
    assert stored.version == 2
    assert [product.name for product in stored.products] == ["Soap"]


@pytest.mark.asyncio
async def test_version_tracking_through_service():
    _repo, _categories, planograms, category = await _setup()
    planogram = await planograms.create_planogram(OWNER, category.id)
    planogram = await planograms.add_product(OWNER, planogram.id, name="Soap", mrp=50, gp=20, facings=1)
    product_id = planogram.products[0].id

    planogram = await planograms.update_product(OWNER, planogram.id, product_id, mrp=55)
    assert planogram.version == 2
    assert planogram.products[0].mrp == 55

    planogram = await planograms.update_product_positions(
        OWNER, planogram.id, product_id, [Position(row=2, col=2)]
    )
    assert planogram.version == 3

    planogram = await planograms.update_facings(OWNER, planogram.id, product_id, 3)
    assert planogram.version == 4

    planogram = await planograms.delete_product(OWNER, planogram.id, "missing")
    assert planogram.version == 4

    planogram = await planograms.delete_product(OWNER, planogram.id, product_id)
    assert planogram.version == 5
    assert planogram.products == []


@pytest.mark.asyncio
async def test_expected_version_conflict():
    repo, _categories, planograms, category = await _setup()
    planogram = await planograms.create_planogram(OWNER, category.id)
    await planograms.resize_grid(OWNER, planogram.id, 5, 5, expected_version=1)

    with pytest.raises(ConflictError) as excinfo:
        await planograms.resize_grid(OWNER, planogram.id, 6, 6, expected_version=1)

    assert excinfo.value.actual == 2
    stored = await repo.load_planogram(planogram.id)
    assert (stored.grid_size.rows, stored.grid_size.cols) == (5, 5)


@pytest.mark.asyncio
async def test_last_write_wins_without_expected_version():
    repo, _categories, planograms, category = await _setup()
    planogram = await planograms.create_planogram(OWNER, category.id)

    await planograms.resize_grid(OWNER, planogram.id, 5, 5)
    await planograms.resize_grid(OWNER, planogram.id, 7, 3)

    stored = await repo.load_planogram(planogram.id)
    assert (stored.grid_size.rows, stored.grid_size.cols) == (7, 3)
    assert stored.version == 3


@pytest.mark.asyncio
async def test_planogram_with_missing_category_is_not_found():
    repo, _categories, planograms, category = await _setup()
    planogram = await planograms.create_planogram(OWNER, category.id)
    repo.categories.pop(category.id)

    with pytest.raises(NotFoundError) as excinfo:
        await planograms.resize_grid(OWNER, planogram.id, 6, 6)
    assert excinfo.value.message == "Category not found"


@pytest.mark.asyncio
async def test_guarded_save_rejects_stale_version():
    repo, _categories, planograms, category = await _setup()
    planogram = await planograms.create_planogram(OWNER, category.id)
    stale = await repo.load_planogram(planogram.id)
    await planograms.resize_grid(OWNER, planogram.id, 5, 5)

    resized = planograms.engine.resize_grid(stale, 8, 8)
    with pytest.raises(ConflictError) as excinfo:
        await repo.save_planogram(resized, previous_version=stale.version)

    assert (excinfo.value.expected, excinfo.value.actual) == (1, 2)
    stored = await repo.load_planogram(planogram.id)
    assert (stored.grid_size.rows, stored.grid_size.cols) == (5, 5)
