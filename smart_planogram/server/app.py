"""FastAPI application exposing planogram services."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from smart_planogram.enterprise.config.settings import get_settings
from smart_planogram.enterprise.core import (
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
from smart_planogram.observability import bind_request_context, configure_logging, configure_tracer
from smart_planogram.observability.metrics import REQUEST_COUNTER
from smart_planogram.persistence import create_schema, dispose_engine
from smart_planogram.server.api.routers import (
	categories_router,
	health_router,
	observability_router,
	planograms_router,
)

settings = get_settings()
configure_logging(settings.logging)
configure_tracer("smart-planogram-api", settings.telemetry.otlp_endpoint, settings.environment)

ERROR_STATUS = {
	NotFoundError: 404,
	ForbiddenError: 403,
	AlreadyExistsError: 409,
	ConflictError: 409,
	InvalidResizeError: 400,
	InvalidPositionsError: 400,
	InvalidFacingsError: 400,
	FieldValidationError: 422,
}


@asynccontextmanager
async def lifespan(_app: FastAPI):
	if settings.database.enabled:
		await create_schema(settings)
	yield
	await dispose_engine()


app = FastAPI(title="Smart Planogram API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
	CORSMiddleware,
	allow_origins=list(settings.cors.allow_origins),
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

FastAPIInstrumentor.instrument_app(app)


@app.middleware("http")
async def count_requests(request: Request, call_next):
	REQUEST_COUNTER.inc()
	bind_request_context(reset=True, request_id=request.headers.get("X-Request-Id") or uuid.uuid4().hex)
	return await call_next(request)


@app.exception_handler(PlanogramError)
async def planogram_error_handler(_request: Request, exc: PlanogramError) -> JSONResponse:
	status_code = ERROR_STATUS.get(type(exc), 400)
	return JSONResponse(status_code=status_code, content={"code": exc.code, "detail": exc.message})


app.include_router(health_router, prefix="/api/v1")
app.include_router(observability_router, prefix="/api/v1")
app.include_router(categories_router, prefix="/api/v1")
app.include_router(planograms_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict[str, str]:
	return {"message": "Smart Planogram API"}
