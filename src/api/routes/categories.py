"""Category taxonomy routes. Admin writes answer with ``{success, data}``."""

from __future__ import annotations

from fastapi import APIRouter, status

from src.api.dependencies import AdminUser, CategoryServiceDependency
from src.models.catalog import (
    ActionResult,
    CategoryCreate,
    CategoryUpdate,
    CountResponse,
    ReorderRequest,
    SubCategoryCreate,
    SubCategoryUpdate,
    ToggleRequest,
)

router = APIRouter(tags=["categories"])


@router.get("/categories", response_model=ActionResult)
async def list_active_categories(categories: CategoryServiceDependency) -> ActionResult:
    """Active categories with their active subcategories, for navigation and forms."""

    return ActionResult.of(await categories.list_categories())


@router.get("/categories/all", response_model=ActionResult)
async def list_all_categories(
    _: AdminUser, categories: CategoryServiceDependency
) -> ActionResult:
    return ActionResult.of(await categories.list_categories(include_inactive=True))


@router.get("/categories/count", response_model=CountResponse)
async def count_categories(categories: CategoryServiceDependency) -> CountResponse:
    return CountResponse(count=await categories.count())


@router.post(
    "/categories", response_model=ActionResult, status_code=status.HTTP_201_CREATED
)
async def create_category(
    payload: CategoryCreate, _: AdminUser, categories: CategoryServiceDependency
) -> ActionResult:
    return ActionResult.of(await categories.create_category(payload))


@router.post("/categories/reorder", response_model=ActionResult)
async def reorder_categories(
    payload: ReorderRequest, _: AdminUser, categories: CategoryServiceDependency
) -> ActionResult:
    await categories.reorder_categories(payload.ordered_ids)
    return ActionResult.of()


@router.patch("/categories/{category_id}", response_model=ActionResult)
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    _: AdminUser,
    categories: CategoryServiceDependency,
) -> ActionResult:
    return ActionResult.of(await categories.update_category(category_id, payload))


@router.delete("/categories/{category_id}", response_model=ActionResult)
async def delete_category(
    category_id: str, _: AdminUser, categories: CategoryServiceDependency
) -> ActionResult:
    await categories.delete_category(category_id)
    return ActionResult.of()


@router.post("/categories/{category_id}/toggle", response_model=ActionResult)
async def toggle_category(
    category_id: str,
    payload: ToggleRequest,
    _: AdminUser,
    categories: CategoryServiceDependency,
) -> ActionResult:
    return ActionResult.of(
        await categories.toggle_category(category_id, payload.is_active)
    )


@router.post(
    "/categories/{category_id}/subcategories",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
)
async def create_subcategory(
    category_id: str,
    payload: SubCategoryCreate,
    _: AdminUser,
    categories: CategoryServiceDependency,
) -> ActionResult:
    return ActionResult.of(await categories.create_subcategory(category_id, payload))


@router.post(
    "/categories/{category_id}/subcategories/reorder", response_model=ActionResult
)
async def reorder_subcategories(
    category_id: str,
    payload: ReorderRequest,
    _: AdminUser,
    categories: CategoryServiceDependency,
) -> ActionResult:
    await categories.reorder_subcategories(category_id, payload.ordered_ids)
    return ActionResult.of()


@router.patch("/subcategories/{subcategory_id}", response_model=ActionResult)
async def update_subcategory(
    subcategory_id: str,
    payload: SubCategoryUpdate,
    _: AdminUser,
    categories: CategoryServiceDependency,
) -> ActionResult:
    return ActionResult.of(
        await categories.update_subcategory(subcategory_id, payload)
    )


@router.delete("/subcategories/{subcategory_id}", response_model=ActionResult)
async def delete_subcategory(
    subcategory_id: str, _: AdminUser, categories: CategoryServiceDependency
) -> ActionResult:
    await categories.delete_subcategory(subcategory_id)
    return ActionResult.of()


@router.post("/subcategories/{subcategory_id}/toggle", response_model=ActionResult)
async def toggle_subcategory(
    subcategory_id: str,
    payload: ToggleRequest,
    _: AdminUser,
    categories: CategoryServiceDependency,
) -> ActionResult:
    return ActionResult.of(
        await categories.toggle_subcategory(subcategory_id, payload.is_active)
    )
