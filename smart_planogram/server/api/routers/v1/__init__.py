"""Versioned API routers."""

from .categories import router as categories
from .health import router as health
from .planograms import router as planograms

__all__ = ["categories", "health", "planograms"]
