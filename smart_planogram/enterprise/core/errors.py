"""Typed failures raised by planogram and category operations.

Every error is raised before any change is stored, so callers never need
to roll back. Each class carries a stable ``code`` that the HTTP layer
exposes unchanged.
"""

from __future__ import annotations


class PlanogramError(Exception):
    """Base class for all domain failures."""

    code = "PLANOGRAM_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(PlanogramError):
    code = "NOT_FOUND"


class AlreadyExistsError(PlanogramError):
    code = "ALREADY_EXISTS"


class ForbiddenError(PlanogramError):
    code = "FORBIDDEN"


class ConflictError(PlanogramError):
    """Raised when the caller's expected version no longer matches the store."""

    code = "CONFLICT"

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Planogram version mismatch: expected {expected}, found {actual}")
        self.expected = expected
        self.actual = actual


class InvalidResizeError(PlanogramError):
    code = "INVALID_RESIZE"


class InvalidPositionsError(PlanogramError):
    code = "INVALID_POSITIONS"


class InvalidFacingsError(PlanogramError):
    code = "INVALID_FACINGS"


class FieldValidationError(PlanogramError):
    """Malformed numeric or string field on a product or category."""

    code = "VALIDATION_ERROR"
