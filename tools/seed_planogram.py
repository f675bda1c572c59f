import asyncio

from smart_planogram.enterprise.core import PlanogramError, Position
from smart_planogram.persistence import InMemoryPlanogramRepository
from smart_planogram.services import CategoryService, PlanogramService


async def main() -> None:
    repo = InMemoryPlanogramRepository()
    categories = CategoryService(repo)
    planograms = PlanogramService(repo)

    category = await categories.create_category("demo-user", "Personal Care")
    planogram = await planograms.create_planogram("demo-user", category.id)
    print(f"created {planogram.id} grid={planogram.grid_size.rows}x{planogram.grid_size.cols} v{planogram.version}")

    planogram = await planograms.add_product(
        "demo-user",
        planogram.id,
        name="Soap",
        mrp=50,
        gp=20,
        facings=2,
        positions=[Position(row=0, col=0), Position(row=0, col=1)],
    )
    print(f"added Soap v{planogram.version}")

    for label, call in (
        ("add Shampoo at (0, 1)", planograms.add_product(
            "demo-user", planogram.id, name="Shampoo", mrp=120, gp=25, facings=1,
            positions=[Position(row=0, col=1)],
        )),
        ("resize to 2x1", planograms.resize_grid("demo-user", planogram.id, 2, 1)),
    ):
        try:
            await call
        except PlanogramError as exc:
            print(f"{label}: {exc.code} ({exc.message})")


if __name__ == "__main__":
    asyncio.run(main())
