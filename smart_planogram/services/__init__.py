"""Service layer exports for the Smart Planogram backend."""

from .categories import CategoryService
from .layout import PlanogramEngine
from .planogram import PlanogramService, PlanogramStore

__all__ = [
	"CategoryService",
	"PlanogramEngine",
	"PlanogramService",
	"PlanogramStore",
]
