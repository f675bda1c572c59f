"""Liveness and readiness probes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text

from smart_planogram.enterprise.config.settings import AppSettings
from smart_planogram.persistence import get_async_session, init_engine
from smart_planogram.server.dependencies import get_app_settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready")
async def ready(settings: AppSettings = Depends(get_app_settings)):
    if not settings.database.enabled:
        return {"status": "ready", "storage": "memory"}
    try:
        init_engine(settings)
        async with get_async_session() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - needs a live database
        return JSONResponse(status_code=503, content={"status": "unavailable", "reason": str(exc)})
    return {"status": "ready", "storage": "database"}
