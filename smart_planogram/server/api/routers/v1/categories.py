"""Category endpoints backing the planogram lifecycle."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from smart_planogram.server.api.schemas.planograms import CategoryRequest, CategorySchema, ErrorSchema
from smart_planogram.server.dependencies import get_category_service, get_current_user
from smart_planogram.services import CategoryService

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorSchema},
        status.HTTP_404_NOT_FOUND: {"model": ErrorSchema},
        status.HTTP_409_CONFLICT: {"model": ErrorSchema},
    },
)


@router.post("", response_model=CategorySchema, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryRequest,
    user_id: str = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
) -> CategorySchema:
    category = await service.create_category(user_id, payload.name)
    return CategorySchema.from_domain(category)


@router.get("/{category_id}", response_model=CategorySchema)
async def get_category(
    category_id: str,
    user_id: str = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
) -> CategorySchema:
    category = await service.get_category(user_id, category_id)
    return CategorySchema.from_domain(category)


@router.put("/{category_id}", response_model=CategorySchema)
async def rename_category(
    category_id: str,
    payload: CategoryRequest,
    user_id: str = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
) -> CategorySchema:
    category = await service.rename_category(user_id, category_id, payload.name)
    return CategorySchema.from_domain(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    user_id: str = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
) -> None:
    await service.delete_category(user_id, category_id)
