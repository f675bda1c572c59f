"""In-memory repository used when persistent storage is unavailable."""

from __future__ import annotations

from typing import Dict, Optional

from smart_planogram.enterprise.core import Category, ConflictError, Planogram


class InMemoryPlanogramRepository:
    """Keeps entities in process memory.

    Stored values are deep copies, so callers only see their changes after
    saving them, the same as with the database-backed repository.
    """

    def __init__(self) -> None:
        self.planograms: Dict[str, Planogram] = {}
        self.categories: Dict[str, Category] = {}

    async def load_planogram(self, planogram_id: str) -> Optional[Planogram]:
        planogram = self.planograms.get(planogram_id)
        return planogram.model_copy(deep=True) if planogram else None

    async def save_planogram(self, planogram: Planogram, previous_version: Optional[int] = None) -> None:
        stored = self.planograms.get(planogram.id)
        if previous_version is not None and (stored is None or stored.version != previous_version):
            raise ConflictError(previous_version, stored.version if stored else 0)
        self.planograms[planogram.id] = planogram.model_copy(deep=True)

    async def delete_planogram(self, planogram_id: str) -> None:
        self.planograms.pop(planogram_id, None)

    async def get_category(self, category_id: str) -> Optional[Category]:
        category = self.categories.get(category_id)
        return category.model_copy(deep=True) if category else None

    async def find_category_by_name(self, owner_id: str, name: str) -> Optional[Category]:
        wanted = name.strip().lower()
        for category in self.categories.values():
            if category.owner_id == owner_id and category.name.lower() == wanted:
                return category.model_copy(deep=True)
        return None

    async def save_category(self, category: Category) -> None:
        self.categories[category.id] = category.model_copy(deep=True)

    async def delete_category(self, category_id: str) -> None:
        self.categories.pop(category_id, None)

    async def commit(self) -> None:
        return None
