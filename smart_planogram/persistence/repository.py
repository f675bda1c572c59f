"""Repository storing categories and planograms through SQLAlchemy."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from smart_planogram.enterprise.core import Category, ConflictError, GridSize, Planogram, Product

from .models import CategoryRecord, PlanogramRecord


def planogram_document(planogram: Planogram) -> dict[str, Any]:
    """Serialise the layout part of a planogram to its stored JSON shape."""

    return planogram.model_dump(mode="json", include={"grid_size", "products"})


def planogram_from_record(record: PlanogramRecord) -> Planogram:
    document = record.document or {}
    return Planogram(
        id=record.id,
        category_id=record.category_id,
        grid_size=GridSize(**document.get("grid_size", {})),
        products=[Product(**item) for item in document.get("products", [])],
        version=record.version,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def category_from_record(record: CategoryRecord) -> Category:
    return Category(
        id=record.id,
        name=record.name,
        owner_id=record.owner_id,
        planogram_id=record.planogram_id,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class PlanogramRepository:
    """Load/save operations for planograms and their owning categories.

    Plain saves overwrite whatever is stored; saves given the version that was
    loaded only succeed while the row still carries it.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def load_planogram(self, planogram_id: str) -> Optional[Planogram]:
        record = await self.session.get(PlanogramRecord, planogram_id)
        return planogram_from_record(record) if record else None

    async def save_planogram(self, planogram: Planogram, previous_version: Optional[int] = None) -> None:
        """Insert or overwrite a planogram.

        With ``previous_version`` the row is only written while it still holds
        that version; otherwise ``ConflictError`` is raised.
        """

        if previous_version is not None:
            stmt = (
                update(PlanogramRecord)
                .where(PlanogramRecord.id == planogram.id, PlanogramRecord.version == previous_version)
                .values(
                    version=planogram.version,
                    document=planogram_document(planogram),
                    updated_at=planogram.updated_at,
                )
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)
            if result.rowcount == 0:
                stored = await self.session.scalar(
                    select(PlanogramRecord.version).where(PlanogramRecord.id == planogram.id)
                )
                raise ConflictError(previous_version, stored if stored is not None else 0)
            self.session.expire_all()
            return

        record = await self.session.get(PlanogramRecord, planogram.id)
        if record is None:
            record = PlanogramRecord(
                id=planogram.id,
                category_id=planogram.category_id,
                created_at=planogram.created_at,
            )
            self.session.add(record)
        record.version = planogram.version
        record.document = planogram_document(planogram)
        record.updated_at = planogram.updated_at
        await self.session.flush()

    async def delete_planogram(self, planogram_id: str) -> None:
        await self.session.execute(delete(PlanogramRecord).where(PlanogramRecord.id == planogram_id))

    async def get_category(self, category_id: str) -> Optional[Category]:
        record = await self.session.get(CategoryRecord, category_id)
        return category_from_record(record) if record else None

    async def find_category_by_name(self, owner_id: str, name: str) -> Optional[Category]:
        stmt = select(CategoryRecord).where(
            CategoryRecord.owner_id == owner_id,
            func.lower(CategoryRecord.name) == name.lower(),
        )
        result = await self.session.execute(stmt)
        record = result.scalars().first()
        return category_from_record(record) if record else None

    async def save_category(self, category: Category) -> None:
        record = await self.session.get(CategoryRecord, category.id)
        if record is None:
            record = CategoryRecord(id=category.id, owner_id=category.owner_id, created_at=category.created_at)
            self.session.add(record)
        record.name = category.name
        record.planogram_id = category.planogram_id
        record.updated_at = category.updated_at
        await self.session.flush()

    async def delete_category(self, category_id: str) -> None:
        await self.session.execute(delete(CategoryRecord).where(CategoryRecord.id == category_id))

    async def commit(self) -> None:
        await self.session.commit()
