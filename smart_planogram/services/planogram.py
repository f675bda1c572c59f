"""Planogram service: ownership checks and persistence around the layout engine."""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

import structlog

from smart_planogram.enterprise.config.settings import AppSettings, get_settings
from smart_planogram.enterprise.core import (
    Category,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    Planogram,
    PlanogramError,
    Position,
)
from smart_planogram.observability.metrics import record_mutation
from smart_planogram.observability.tracing import get_tracer
from smart_planogram.services.layout import PlanogramEngine

logger = structlog.get_logger(__name__)
tracer = get_tracer(__name__)


class PlanogramStore(Protocol):
    async def load_planogram(self, planogram_id: str) -> Optional[Planogram]: ...

    async def save_planogram(self, planogram: Planogram, previous_version: Optional[int] = None) -> None: ...

    async def delete_planogram(self, planogram_id: str) -> None: ...

    async def get_category(self, category_id: str) -> Optional[Category]: ...

    async def find_category_by_name(self, owner_id: str, name: str) -> Optional[Category]: ...

    async def save_category(self, category: Category) -> None: ...

    async def delete_category(self, category_id: str) -> None: ...

    async def commit(self) -> None: ...


async def owned_category(store: PlanogramStore, user_id: str, category_id: str) -> Category:
    category = await store.get_category(category_id)
    if category is None:
        raise NotFoundError("Category not found")
    if not category.is_owned_by(user_id):
        raise ForbiddenError("Not authorized to access this category")
    return category


class PlanogramService:
    """Runs one load-mutate-save unit of work per call."""

    def __init__(
        self,
        repository: PlanogramStore,
        engine: Optional[PlanogramEngine] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self.repository = repository
        self.engine = engine or PlanogramEngine()
        self.settings = settings or get_settings()

    async def create_planogram(
        self,
        user_id: str,
        category_id: str,
        rows: Optional[int] = None,
        cols: Optional[int] = None,
    ) -> Planogram:
        with tracer.start_as_current_span("planogram.create"):
            try:
                category = await owned_category(self.repository, user_id, category_id)
                grid_size = self.engine.make_grid_size(
                    rows if rows is not None else self.settings.grid.default_rows,
                    cols if cols is not None else self.settings.grid.default_cols,
                )
                planogram, category = self.engine.create_planogram(category, grid_size)
            except PlanogramError as exc:
                self._rejected("create", category_id, exc)
                raise

            await self.repository.save_category(category)
            await self.repository.save_planogram(planogram)
            await self.repository.commit()
            record_mutation("create")
            logger.info(
                "planogram_created",
                planogram_id=planogram.id,
                category_id=category.id,
                rows=planogram.grid_size.rows,
                cols=planogram.grid_size.cols,
            )
            return planogram

    async def get_planogram(self, user_id: str, category_id: str) -> Planogram:
        category = await owned_category(self.repository, user_id, category_id)
        if not category.planogram_id:
            raise NotFoundError("Planogram not found")
        planogram = await self.repository.load_planogram(category.planogram_id)
        if planogram is None:
            raise NotFoundError("Planogram not found")
        return planogram

    async def resize_grid(
        self,
        user_id: str,
        planogram_id: str,
        rows: int,
        cols: int,
        expected_version: Optional[int] = None,
    ) -> Planogram:
        return await self._mutate(
            "resize_grid",
            user_id,
            planogram_id,
            expected_version,
            lambda planogram: self.engine.resize_grid(planogram, rows, cols),
        )

    async def add_product(
        self,
        user_id: str,
        planogram_id: str,
        name: str,
        mrp: float,
        gp: float,
        facings: int,
        positions: Sequence[Position] = (),
        expected_version: Optional[int] = None,
    ) -> Planogram:
        return await self._mutate(
            "add_product",
            user_id,
            planogram_id,
            expected_version,
            lambda planogram: self.engine.add_product(planogram, name, mrp, gp, facings, positions),
        )

    async def update_product(
        self,
        user_id: str,
        planogram_id: str,
        product_id: str,
        name: Optional[str] = None,
        mrp: Optional[float] = None,
        gp: Optional[float] = None,
        expected_version: Optional[int] = None,
    ) -> Planogram:
        return await self._mutate(
            "update_product",
            user_id,
            planogram_id,
            expected_version,
            lambda planogram: self.engine.update_product(planogram, product_id, name=name, mrp=mrp, gp=gp),
        )

    async def delete_product(
        self,
        user_id: str,
        planogram_id: str,
        product_id: str,
        expected_version: Optional[int] = None,
    ) -> Planogram:
        return await self._mutate(
            "delete_product",
            user_id,
            planogram_id,
            expected_version,
            lambda planogram: self.engine.delete_product(planogram, product_id),
        )

    async def update_product_positions(
        self,
        user_id: str,
        planogram_id: str,
        product_id: str,
        positions: Sequence[Position],
        expected_version: Optional[int] = None,
    ) -> Planogram:
        return await self._mutate(
            "update_positions",
            user_id,
            planogram_id,
            expected_version,
            lambda planogram: self.engine.update_product_positions(planogram, product_id, positions),
        )

    async def update_facings(
        self,
        user_id: str,
        planogram_id: str,
        product_id: str,
        facings: int,
        expected_version: Optional[int] = None,
    ) -> Planogram:
        return await self._mutate(
            "update_facings",
            user_id,
            planogram_id,
            expected_version,
            lambda planogram: self.engine.update_facings(planogram, product_id, facings),
        )

    async def _load_for_update(
        self,
        user_id: str,
        planogram_id: str,
        expected_version: Optional[int],
    ) -> Planogram:
        planogram = await self.repository.load_planogram(planogram_id)
        if planogram is None:
            raise NotFoundError("Planogram not found")
        category = await self.repository.get_category(planogram.category_id)
        if category is None:
            raise NotFoundError("Category not found")
        if not category.is_owned_by(user_id):
            raise ForbiddenError("Not authorized to access this planogram")
        if expected_version is not None and expected_version != planogram.version:
            raise ConflictError(expected_version, planogram.version)
        return planogram

    async def _mutate(
        self,
        operation: str,
        user_id: str,
        planogram_id: str,
        expected_version: Optional[int],
        apply: Callable[[Planogram], Planogram],
    ) -> Planogram:
        with tracer.start_as_current_span(f"planogram.{operation}") as span:
            span.set_attribute("planogram.id", planogram_id)
            try:
                current = await self._load_for_update(user_id, planogram_id, expected_version)
                updated = apply(current)
            except PlanogramError as exc:
                self._rejected(operation, planogram_id, exc)
                raise

            if updated is current:
                record_mutation(operation, "noop")
                return current

            try:
                # Only writes while the row still holds the version that was checked.
                await self.repository.save_planogram(
                    updated,
                    previous_version=current.version if expected_version is not None else None,
                )
            except ConflictError as exc:
                self._rejected(operation, planogram_id, exc)
                raise
            await self.repository.commit()
            record_mutation(operation)
            logger.info(
                "planogram_updated",
                operation=operation,
                planogram_id=planogram_id,
                version=updated.version,
            )
            return updated

    @staticmethod
    def _rejected(operation: str, target_id: str, exc: PlanogramError) -> None:
        record_mutation(operation, exc.code)
        logger.warning(
            "planogram_operation_rejected",
            operation=operation,
            target_id=target_id,
            code=exc.code,
            reason=exc.message,
        )
