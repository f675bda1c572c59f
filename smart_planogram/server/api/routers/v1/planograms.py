"""Planogram layout endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status

from smart_planogram.server.api.schemas.planograms import (
    AddProductRequest,
    CreatePlanogramRequest,
    ErrorSchema,
    PlanogramSchema,
    ResizeGridRequest,
    UpdateFacingsRequest,
    UpdatePositionsRequest,
    UpdateProductRequest,
)
from smart_planogram.server.dependencies import get_current_user, get_planogram_service
from smart_planogram.services import PlanogramService

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorSchema},
    status.HTTP_403_FORBIDDEN: {"model": ErrorSchema},
    status.HTTP_404_NOT_FOUND: {"model": ErrorSchema},
    status.HTTP_409_CONFLICT: {"model": ErrorSchema},
}

router = APIRouter(prefix="/planograms", tags=["planograms"], responses=ERROR_RESPONSES)


@router.post("/{category_id}", response_model=PlanogramSchema, status_code=status.HTTP_201_CREATED)
async def create_planogram(
    category_id: str,
    payload: Optional[CreatePlanogramRequest] = Body(None),
    user_id: str = Depends(get_current_user),
    service: PlanogramService = Depends(get_planogram_service),
) -> PlanogramSchema:
    grid_size = payload.grid_size if payload else None
    planogram = await service.create_planogram(
        user_id,
        category_id,
        rows=grid_size.rows if grid_size else None,
        cols=grid_size.cols if grid_size else None,
    )
    return PlanogramSchema.from_domain(planogram)


@router.get("/{category_id}", response_model=PlanogramSchema)
async def get_planogram(
    category_id: str,
    user_id: str = Depends(get_current_user),
    service: PlanogramService = Depends(get_planogram_service),
) -> PlanogramSchema:
    planogram = await service.get_planogram(user_id, category_id)
    return PlanogramSchema.from_domain(planogram)


@router.put("/{planogram_id}/grid", response_model=PlanogramSchema)
async def resize_grid(
    planogram_id: str,
    payload: ResizeGridRequest,
    user_id: str = Depends(get_current_user),
    service: PlanogramService = Depends(get_planogram_service),
) -> PlanogramSchema:
    planogram = await service.resize_grid(
        user_id, planogram_id, payload.rows, payload.cols, expected_version=payload.expected_version
    )
    return PlanogramSchema.from_domain(planogram)


@router.post(
    "/{planogram_id}/products",
    response_model=PlanogramSchema,
    status_code=status.HTTP_201_CREATED,
)
async def add_product(
    planogram_id: str,
    payload: AddProductRequest,
    user_id: str = Depends(get_current_user),
    service: PlanogramService = Depends(get_planogram_service),
) -> PlanogramSchema:
    planogram = await service.add_product(
        user_id,
        planogram_id,
        name=payload.name,
        mrp=payload.mrp,
        gp=payload.gp,
        facings=payload.facings,
        positions=payload.domain_positions(),
        expected_version=payload.expected_version,
    )
    return PlanogramSchema.from_domain(planogram)


@router.put("/{planogram_id}/products/{product_id}", response_model=PlanogramSchema)
async def update_product(
    planogram_id: str,
    product_id: str,
    payload: UpdateProductRequest,
    user_id: str = Depends(get_current_user),
    service: PlanogramService = Depends(get_planogram_service),
) -> PlanogramSchema:
    planogram = await service.update_product(
        user_id,
        planogram_id,
        product_id,
        name=payload.name,
        mrp=payload.mrp,
        gp=payload.gp,
        expected_version=payload.expected_version,
    )
    return PlanogramSchema.from_domain(planogram)


@router.delete("/{planogram_id}/products/{product_id}", response_model=PlanogramSchema)
async def delete_product(
    planogram_id: str,
    product_id: str,
    expected_version: Optional[int] = Query(None),
    user_id: str = Depends(get_current_user),
    service: PlanogramService = Depends(get_planogram_service),
) -> PlanogramSchema:
    planogram = await service.delete_product(
        user_id, planogram_id, product_id, expected_version=expected_version
    )
    return PlanogramSchema.from_domain(planogram)


@router.put("/{planogram_id}/products/{product_id}/positions", response_model=PlanogramSchema)
async def update_product_positions(
    planogram_id: str,
    product_id: str,
    payload: UpdatePositionsRequest,
    user_id: str = Depends(get_current_user),
    service: PlanogramService = Depends(get_planogram_service),
) -> PlanogramSchema:
    planogram = await service.update_product_positions(
        user_id,
        planogram_id,
        product_id,
        payload.domain_positions(),
        expected_version=payload.expected_version,
    )
    return PlanogramSchema.from_domain(planogram)


@router.put("/{planogram_id}/products/{product_id}/facings", response_model=PlanogramSchema)
async def update_facings(
    planogram_id: str,
    product_id: str,
    payload: UpdateFacingsRequest,
    user_id: str = Depends(get_current_user),
    service: PlanogramService = Depends(get_planogram_service),
) -> PlanogramSchema:
    planogram = await service.update_facings(
        user_id, planogram_id, product_id, payload.facings, expected_version=payload.expected_version
    )
    return PlanogramSchema.from_domain(planogram)
