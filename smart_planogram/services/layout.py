"""Invariant-preserving layout mutations for a single planogram.

Each operation works on a deep copy of the planogram and hands the copy back
only once every check has passed, so a rejected call leaves the caller's
entity untouched. ``version`` moves forward by one whenever the grid or the
product layout changes; metadata edits keep it where it is.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional, Sequence, Tuple

from pydantic import ValidationError

from smart_planogram import grid
from smart_planogram.enterprise.core import (
    AlreadyExistsError,
    Category,
    FieldValidationError,
    GridSize,
    InvalidFacingsError,
    InvalidPositionsError,
    InvalidResizeError,
    NotFoundError,
    Planogram,
    Position,
    Product,
)

MIN_GRID_DIMENSION = 2


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "value"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


class PlanogramEngine:
    """Applies layout operations to planograms, all or nothing."""

    def create_planogram(
        self,
        category: Category,
        grid_size: Optional[GridSize] = None,
    ) -> Tuple[Planogram, Category]:
        """Create the planogram for ``category`` and return it with the back-linked category."""

        if category.planogram_id:
            raise AlreadyExistsError("Planogram already exists for this category")
        planogram = Planogram(category_id=category.id, grid_size=grid_size or GridSize())
        linked = category.model_copy(update={"planogram_id": planogram.id, "updated_at": _utcnow()})
        return planogram, linked

    @staticmethod
    def make_grid_size(rows: int, cols: int) -> GridSize:
        try:
            return GridSize(rows=rows, cols=cols)
        except ValidationError as exc:
            raise FieldValidationError(_describe(exc)) from exc

    def resize_grid(self, planogram: Planogram, rows: int, cols: int) -> Planogram:
        if not planogram.validate_grid_resize(rows, cols):
            max_row, max_col = planogram.max_occupied_dimensions()
            raise InvalidResizeError(
                "Cannot resize grid: products would be out of bounds "
                f"(occupied up to row {max_row}, column {max_col})"
            )
        if rows < MIN_GRID_DIMENSION or cols < MIN_GRID_DIMENSION:
            raise InvalidResizeError(
                f"Grid must have at least {MIN_GRID_DIMENSION} rows and {MIN_GRID_DIMENSION} columns"
            )

        def mutate(candidate: Planogram) -> None:
            candidate.grid_size = GridSize(rows=rows, cols=cols)

        return self._apply(planogram, mutate)

    def add_product(
        self,
        planogram: Planogram,
        name: str,
        mrp: float,
        gp: float,
        facings: int,
        positions: Sequence[Position] = (),
    ) -> Planogram:
        try:
            product = Product(name=name, mrp=mrp, gp=gp, facings=facings, positions=list(positions))
        except ValidationError as exc:
            raise FieldValidationError(_describe(exc)) from exc

        self._check_positions(planogram, None, product.positions, product.facings)

        def mutate(candidate: Planogram) -> None:
            candidate.products.append(product)

        return self._apply(planogram, mutate)

    def update_product(
        self,
        planogram: Planogram,
        product_id: str,
        name: Optional[str] = None,
        mrp: Optional[float] = None,
        gp: Optional[float] = None,
    ) -> Planogram:
        """Overwrite product metadata; positions and facings are left alone."""

        self._require_product(planogram, product_id)

        def mutate(candidate: Planogram) -> None:
            product = candidate.get_product(product_id)
            assert product is not None
            if name is not None:
                product.name = name
            if mrp is not None:
                product.mrp = mrp
            if gp is not None:
                product.gp = gp

        return self._apply(planogram, mutate)

    def delete_product(self, planogram: Planogram, product_id: str) -> Planogram:
        """Remove a product. Unknown ids leave the planogram as it is."""

        if planogram.get_product(product_id) is None:
            return planogram

        def mutate(candidate: Planogram) -> None:
            candidate.products = [p for p in candidate.products if p.id != product_id]

        return self._apply(planogram, mutate)

    def update_product_positions(
        self,
        planogram: Planogram,
        product_id: str,
        positions: Sequence[Position],
    ) -> Planogram:
        product = self._require_product(planogram, product_id)
        self._check_positions(planogram, product_id, positions, product.facings)

        def mutate(candidate: Planogram) -> None:
            target = candidate.get_product(product_id)
            assert target is not None
            target.positions = list(positions)

        return self._apply(planogram, mutate)

    def update_facings(self, planogram: Planogram, product_id: str, facings: int) -> Planogram:
        product = self._require_product(planogram, product_id)
        if facings < 1:
            raise FieldValidationError("facings: Minimum facing must be 1")
        if facings < len(product.positions):
            raise InvalidFacingsError("Cannot reduce facings below current position count")

        def mutate(candidate: Planogram) -> None:
            target = candidate.get_product(product_id)
            assert target is not None
            target.facings = facings

        return self._apply(planogram, mutate)

    @staticmethod
    def _require_product(planogram: Planogram, product_id: str) -> Product:
        product = planogram.get_product(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _check_positions(
        planogram: Planogram,
        product_id: Optional[str],
        positions: Sequence[Position],
        facings: int,
    ) -> None:
        if grid.has_duplicate_cells(positions):
            raise InvalidPositionsError("Invalid positions provided: duplicate cells")
        if not planogram.validate_positions(product_id, positions):
            raise InvalidPositionsError("Invalid positions provided")
        if len(positions) > facings:
            raise InvalidPositionsError(
                f"Invalid positions provided: {len(positions)} positions exceed {facings} facings"
            )

    @staticmethod
    def _apply(planogram: Planogram, mutate: Callable[[Planogram], None]) -> Planogram:
        candidate = planogram.model_copy(deep=True)
        try:
            mutate(candidate)
        except ValidationError as exc:
            raise FieldValidationError(_describe(exc)) from exc

        if candidate.layout_signature() != planogram.layout_signature():
            candidate.version = planogram.version + 1
        if candidate.model_dump(exclude={"updated_at"}) != planogram.model_dump(exclude={"updated_at"}):
            candidate.updated_at = _utcnow()
        return candidate


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
