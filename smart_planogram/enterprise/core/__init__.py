"""Core domain package for the Smart Planogram backend."""

from .errors import (
    AlreadyExistsError,
    ConflictError,
    FieldValidationError,
    ForbiddenError,
    InvalidFacingsError,
    InvalidPositionsError,
    InvalidResizeError,
    NotFoundError,
    PlanogramError,
)
from .models import Category, GridSize, Planogram, Position, Product

__all__ = [
    "Category",
    "GridSize",
    "Planogram",
    "Position",
    "Product",
    "PlanogramError",
    "NotFoundError",
    "AlreadyExistsError",
    "ForbiddenError",
    "ConflictError",
    "InvalidResizeError",
    "InvalidPositionsError",
    "InvalidFacingsError",
    "FieldValidationError",
]
