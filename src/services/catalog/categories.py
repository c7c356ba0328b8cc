"""Category and subcategory taxonomy management."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TypeVar

from src.errors import NotFound, ValidationError
from src.models.catalog import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    CategoryWithChildren,
    SubCategory,
    SubCategoryCreate,
    SubCategoryUpdate,
)
from src.services.repository.base import Repository

logger = logging.getLogger(__name__)

Ordered = TypeVar("Ordered", Category, SubCategory)


def _by_order(items: Sequence[Ordered]) -> list[Ordered]:
    return sorted(items, key=lambda item: (item.order, item.created_at))


class CategoryService:
    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    async def list_categories(
        self, *, include_inactive: bool = False
    ) -> list[CategoryWithChildren]:
        """Categories ordered by ``order`` with their subcategories nested.

        Unless ``include_inactive`` is set, inactive categories and inactive
        subcategories are both left out.
        """

        categories = await self._repository.list(Category)
        subcategories = await self._repository.list(SubCategory)
        if not include_inactive:
            categories = [c for c in categories if c.is_active]
            subcategories = [s for s in subcategories if s.is_active]

        children: dict[str, list[SubCategory]] = {}
        for sub in subcategories:
            children.setdefault(sub.category_id, []).append(sub)

        return [
            CategoryWithChildren(
                **category.model_dump(),
                sub_categories=_by_order(children.get(category.id, [])),
            )
            for category in _by_order(categories)
        ]

    async def count(self) -> int:
        return len(await self._repository.list(Category))

    async def get_category(self, category_id: str) -> Category:
        category = await self._repository.get(Category, category_id)
        if category is None:
            raise NotFound("Category not found")
        return category

    async def create_category(self, payload: CategoryCreate) -> Category:
        name = payload.name.strip()
        existing = await self._repository.list(Category)
        self._ensure_unique_name(name, existing)

        category = Category(
            name=name,
            icon=payload.icon or "Package",
            order=max((c.order for c in existing), default=0) + 1,
        )
        await self._repository.save(category)
        logger.info("Category %s created", category.id)
        return category

    async def update_category(
        self, category_id: str, payload: CategoryUpdate
    ) -> Category:
        category = await self.get_category(category_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            others = [
                c for c in await self._repository.list(Category) if c.id != category.id
            ]
            self._ensure_unique_name(changes["name"], others)

        for field, value in changes.items():
            setattr(category, field, value)
        category.touch()
        await self._repository.save(category)
        return category

    async def toggle_category(self, category_id: str, is_active: bool) -> Category:
        return await self.update_category(category_id, CategoryUpdate(is_active=is_active))

    async def delete_category(self, category_id: str) -> None:
        category = await self.get_category(category_id)
        children = await self._repository.find(
            SubCategory, lambda s: s.category_id == category.id
        )
        for sub in children:
            await self._repository.delete(SubCategory, sub.id)
        await self._repository.delete(Category, category.id)
        logger.info(
            "Category deleted",
            extra={"category_id": category.id, "subcategories": len(children)},
        )

    async def reorder_categories(self, ordered_ids: Sequence[str]) -> None:
        """Assign ``order = index`` following ``ordered_ids``."""

        categories = [await self.get_category(cid) for cid in ordered_ids]
        await self._assign_order(categories)

    async def create_subcategory(
        self, category_id: str, payload: SubCategoryCreate
    ) -> SubCategory:
        category = await self.get_category(category_id)
        siblings = await self._repository.find(
            SubCategory, lambda s: s.category_id == category.id
        )
        sub = SubCategory(
            category_id=category.id,
            name=payload.name.strip(),
            is_heading=payload.is_heading,
            order=max((s.order for s in siblings), default=0) + 1,
        )
        await self._repository.save(sub)
        return sub

    async def get_subcategory(self, subcategory_id: str) -> SubCategory:
        sub = await self._repository.get(SubCategory, subcategory_id)
        if sub is None:
            raise NotFound("Subcategory not found")
        return sub

    async def update_subcategory(
        self, subcategory_id: str, payload: SubCategoryUpdate
    ) -> SubCategory:
        sub = await self.get_subcategory(subcategory_id)
        for field, value in payload.model_dump(
            exclude_unset=True, exclude_none=True
        ).items():
            setattr(sub, field, value.strip() if field == "name" else value)
        sub.touch()
        await self._repository.save(sub)
        return sub

    async def toggle_subcategory(
        self, subcategory_id: str, is_active: bool
    ) -> SubCategory:
        return await self.update_subcategory(
            subcategory_id, SubCategoryUpdate(is_active=is_active)
        )

    async def delete_subcategory(self, subcategory_id: str) -> None:
        sub = await self.get_subcategory(subcategory_id)
        await self._repository.delete(SubCategory, sub.id)

    async def reorder_subcategories(
        self, category_id: str, ordered_ids: Sequence[str]
    ) -> None:
        category = await self.get_category(category_id)
        subs = []
        for sid in ordered_ids:
            sub = await self.get_subcategory(sid)
            if sub.category_id != category.id:
                raise NotFound("Subcategory not found")
            subs.append(sub)
        await self._assign_order(subs)

    async def _assign_order(self, items: Sequence[Category | SubCategory]) -> None:
        for index, item in enumerate(items):
            item.order = index
            item.touch()
            await self._repository.save(item)

    @staticmethod
    def _ensure_unique_name(name: str, existing: Sequence[Category]) -> None:
        lowered = name.lower()
        if any(c.name.lower() == lowered for c in existing):
            raise ValidationError("A category with this name already exists.")
