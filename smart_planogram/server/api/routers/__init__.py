"""API routers exposed by the server package."""

from .v1.categories import router as categories_router
from .v1.health import router as health_router
from .v1.observability import router as observability_router
from .v1.planograms import router as planograms_router

__all__ = [
	"categories_router",
	"health_router",
	"observability_router",
	"planograms_router",
]
