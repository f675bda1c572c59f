"""Category operations needed by the planogram lifecycle."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import structlog
from pydantic import ValidationError

from smart_planogram.enterprise.core import (
    AlreadyExistsError,
    Category,
    FieldValidationError,
    PlanogramError,
)
from smart_planogram.observability.metrics import record_mutation
from smart_planogram.services.planogram import PlanogramStore, owned_category

logger = structlog.get_logger(__name__)


def _validated_name(name: str) -> str:
    try:
        return Category(name=name, owner_id="-").name
    except ValidationError as exc:
        raise FieldValidationError("name: Category name is required") from exc


class CategoryService:
    """Create, rename and delete categories; deleting one drops its planogram."""

    def __init__(self, repository: PlanogramStore) -> None:
        self.repository = repository

    async def create_category(self, owner_id: str, name: str) -> Category:
        try:
            name = _validated_name(name)
            await self._ensure_name_free(owner_id, name)
        except PlanogramError as exc:
            record_mutation("create_category", exc.code)
            raise
        category = Category(name=name, owner_id=owner_id)
        await self.repository.save_category(category)
        await self.repository.commit()
        record_mutation("create_category")
        logger.info("category_created", category_id=category.id, owner_id=owner_id)
        return category

    async def get_category(self, owner_id: str, category_id: str) -> Category:
        return await owned_category(self.repository, owner_id, category_id)

    async def rename_category(self, owner_id: str, category_id: str, name: str) -> Category:
        try:
            category = await owned_category(self.repository, owner_id, category_id)
            name = _validated_name(name)
            await self._ensure_name_free(owner_id, name, ignore_id=category.id)
        except PlanogramError as exc:
            record_mutation("rename_category", exc.code)
            raise
        renamed = category.model_copy(update={"name": name, "updated_at": datetime.now(timezone.utc)})
        await self.repository.save_category(renamed)
        await self.repository.commit()
        record_mutation("rename_category")
        logger.info("category_renamed", category_id=renamed.id, owner_id=owner_id)
        return renamed

    async def delete_category(self, owner_id: str, category_id: str) -> None:
        category = await owned_category(self.repository, owner_id, category_id)
        if category.planogram_id:
            await self.repository.delete_planogram(category.planogram_id)
        await self.repository.delete_category(category.id)
        await self.repository.commit()
        record_mutation("delete_category")
        logger.info(
            "category_deleted",
            category_id=category.id,
            planogram_id=category.planogram_id,
        )

    async def _ensure_name_free(self, owner_id: str, name: str, ignore_id: Optional[str] = None) -> None:
        existing = await self.repository.find_category_by_name(owner_id, name)
        if existing is not None and existing.id != ignore_id:
            raise AlreadyExistsError("Category with this name already exists")
