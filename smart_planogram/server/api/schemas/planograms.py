"""Pydantic schemas for planogram and category API payloads."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, NonNegativeInt

from smart_planogram.enterprise.core import Category, Planogram, Position, Product


class PositionSchema(BaseModel):
    row: NonNegativeInt
    col: NonNegativeInt

    def to_domain(self) -> Position:
        return Position(row=self.row, col=self.col)


class GridSizeSchema(BaseModel):
    rows: int
    cols: int


class ProductSchema(BaseModel):
    id: str
    name: str
    mrp: float
    gp: float
    facings: int
    positions: List[PositionSchema]

    @classmethod
    def from_domain(cls, product: Product) -> "ProductSchema":
        return cls(
            id=product.id,
            name=product.name,
            mrp=product.mrp,
            gp=product.gp,
            facings=product.facings,
            positions=[PositionSchema(row=pos.row, col=pos.col) for pos in product.positions],
        )


class PlanogramSchema(BaseModel):
    id: str
    category_id: str
    grid_size: GridSizeSchema
    products: List[ProductSchema]
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, planogram: Planogram) -> "PlanogramSchema":
        return cls(
            id=planogram.id,
            category_id=planogram.category_id,
            grid_size=GridSizeSchema(rows=planogram.grid_size.rows, cols=planogram.grid_size.cols),
            products=[ProductSchema.from_domain(product) for product in planogram.products],
            version=planogram.version,
            created_at=planogram.created_at,
            updated_at=planogram.updated_at,
        )


class CategorySchema(BaseModel):
    id: str
    name: str
    planogram_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, category: Category) -> "CategorySchema":
        return cls(
            id=category.id,
            name=category.name,
            planogram_id=category.planogram_id,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class CategoryRequest(BaseModel):
    name: str


class VersionedRequest(BaseModel):
    expected_version: Optional[int] = Field(
        None, description="Reject the change with 409 if the stored version differs."
    )


class CreatePlanogramRequest(BaseModel):
    grid_size: Optional[GridSizeSchema] = None


class ResizeGridRequest(VersionedRequest):
    rows: int
    cols: int


class AddProductRequest(VersionedRequest):
    name: str
    mrp: float
    gp: float
    facings: int
    positions: List[PositionSchema] = Field(default_factory=list)

    def domain_positions(self) -> List[Position]:
        return [pos.to_domain() for pos in self.positions]


class UpdateProductRequest(VersionedRequest):
    name: Optional[str] = None
    mrp: Optional[float] = None
    gp: Optional[float] = None


class UpdatePositionsRequest(VersionedRequest):
    positions: List[PositionSchema]

    def domain_positions(self) -> List[Position]:
        return [pos.to_domain() for pos in self.positions]


class UpdateFacingsRequest(VersionedRequest):
    facings: int


class ErrorSchema(BaseModel):
    code: str
    detail: str
