"""Persistence layer built on async SQLAlchemy."""

from .database import create_schema, dispose_engine, get_async_session, init_engine, metadata
from .memory import InMemoryPlanogramRepository
from .repository import PlanogramRepository

__all__ = [
    "init_engine",
    "create_schema",
    "dispose_engine",
    "get_async_session",
    "metadata",
    "PlanogramRepository",
    "InMemoryPlanogramRepository",
]
