"""Domain models for the Smart Planogram backend.

These models provide a typed representation of categories, planograms and
the products laid out on them. They are framework-agnostic so services,
APIs and persistence layers can share them.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from smart_planogram import grid


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class Position(BaseModel):
    """Single occupied grid cell."""

    model_config = ConfigDict(frozen=True)

    row: NonNegativeInt = Field(..., description="Row index (0 = top shelf).")
    col: NonNegativeInt = Field(..., description="Column index.")

    @classmethod
    def from_tuple(cls, position: Sequence[int]) -> "Position":
        return cls(row=int(position[0]), col=int(position[1]))

    def to_tuple(self) -> tuple[int, int]:
        return (self.row, self.col)


class GridSize(BaseModel):
    """Bounds of the planogram coordinate space ``[0, rows) x [0, cols)``."""

    model_config = ConfigDict(frozen=True)

    rows: int = Field(4, ge=2)
    cols: int = Field(4, ge=2)

    def contains(self, position: Position) -> bool:
        """Return ``True`` if the position falls within the grid bounds."""

        return position.row < self.rows and position.col < self.cols


class Product(BaseModel):
    """A product placed on exactly one planogram."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id)
    name: str = Field(..., min_length=1)
    mrp: float = Field(..., ge=0, description="Maximum retail price.")
    gp: float = Field(..., ge=0, le=100, description="Gross profit percentage.")
    facings: int = Field(1, ge=1, description="Upper bound on simultaneous positions.")
    positions: List[Position] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    def cells(self) -> set[tuple[int, int]]:
        return {pos.to_tuple() for pos in self.positions}


class Planogram(BaseModel):
    """Grid layout of products for a single category."""

    id: str = Field(default_factory=_new_id)
    category_id: str
    grid_size: GridSize = Field(default_factory=GridSize)
    products: List[Product] = Field(default_factory=list)
    version: int = Field(1, ge=1)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def get_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def max_occupied_dimensions(self) -> tuple[int, int]:
        return grid.max_occupied_dimensions(self.products)

    def validate_grid_resize(self, rows: int, cols: int) -> bool:
        """A resize is safe only if every occupied index stays strictly inside."""

        max_row, max_col = self.max_occupied_dimensions()
        return rows > max_row and cols > max_col

    def is_position_occupied(self, row: int, col: int, exclude_product_id: Optional[str] = None) -> bool:
        return grid.is_position_occupied(self.products, row, col, exclude_product_id)

    def validate_positions(self, product_id: Optional[str], positions: Sequence[Position]) -> bool:
        return grid.validate_positions(self, product_id, positions)

    def layout_signature(self) -> tuple:
        """Everything that counts as a layout change (metadata excluded)."""

        return (
            self.grid_size.rows,
            self.grid_size.cols,
            tuple(
                (product.id, product.facings, frozenset(product.cells()))
                for product in self.products
            ),
        )


class Category(BaseModel):
    """User-owned product category; owns at most one planogram."""

    id: str = Field(default_factory=_new_id)
    name: str = Field(..., min_length=1)
    owner_id: str
    planogram_id: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id
