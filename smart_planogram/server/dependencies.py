"""Dependency providers for the API layer."""

from __future__ import annotations

from typing import AsyncGenerator, Optional, Union

from fastapi import Depends, HTTPException, Request, status

from smart_planogram.enterprise.config.settings import AppSettings, get_settings
from smart_planogram.observability import bind_request_context
from smart_planogram.persistence import (
    InMemoryPlanogramRepository,
    PlanogramRepository,
    get_async_session,
    init_engine,
)
from smart_planogram.services import CategoryService, PlanogramService

__all__ = [
    "get_app_settings",
    "get_current_user",
    "get_repository",
    "get_memory_repository",
    "reset_repository",
    "get_planogram_service",
    "get_category_service",
]

Repository = Union[PlanogramRepository, InMemoryPlanogramRepository]

_memory_repo: Optional[InMemoryPlanogramRepository] = None


def get_app_settings() -> AppSettings:
    return get_settings()


def get_current_user(request: Request, settings: AppSettings = Depends(get_app_settings)) -> str:
    """Return the user id the auth gateway put on the request."""

    user_id = request.headers.get(settings.auth.user_header, "").strip()
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    bind_request_context(user_id=user_id, path=request.url.path, method=request.method)
    return user_id


def get_memory_repository() -> InMemoryPlanogramRepository:
    global _memory_repo
    if _memory_repo is None:
        _memory_repo = InMemoryPlanogramRepository()
    return _memory_repo


async def get_repository(
    settings: AppSettings = Depends(get_app_settings),
) -> AsyncGenerator[Repository, None]:
    if not settings.database.enabled:
        yield get_memory_repository()
        return

    init_engine(settings)
    async with get_async_session() as session:
        yield PlanogramRepository(session)


def reset_repository() -> None:
    """Drop the in-memory store (useful for tests)."""

    global _memory_repo
    _memory_repo = None


def get_planogram_service(
    repository: Repository = Depends(get_repository),
    settings: AppSettings = Depends(get_app_settings),
) -> PlanogramService:
    return PlanogramService(repository, settings=settings)


def get_category_service(repository: Repository = Depends(get_repository)) -> CategoryService:
    return CategoryService(repository)
