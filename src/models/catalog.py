"""Category taxonomy and carousel banner models."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, Field

from src.models.base import PortalModel, StoredModel


class Category(StoredModel):
    collection: ClassVar[str] = "categories"

    name: str
    icon: str = "Package"
    order: int = 0
    is_active: bool = True


class SubCategory(StoredModel):
    collection: ClassVar[str] = "subcategories"

    category_id: str
    name: str
    is_heading: bool = False
    order: int = 0
    is_active: bool = True


class CategoryWithChildren(Category):
    sub_categories: list[SubCategory] = Field(default_factory=list)


class CarouselImage(StoredModel):
    collection: ClassVar[str] = "carousel_images"

    image_url: str
    title: str = ""
    description: str = ""
    link: str = "/products"
    order: int = 0
    is_active: bool = True


class CategoryCreate(PortalModel):
    name: str = Field(..., min_length=1)
    icon: str | None = None


class CategoryUpdate(PortalModel):
    name: str | None = Field(default=None, min_length=1)
    icon: str | None = None
    order: int | None = None
    is_active: bool | None = None


class SubCategoryCreate(PortalModel):
    name: str = Field(..., min_length=1)
    is_heading: bool = False


class SubCategoryUpdate(PortalModel):
    name: str | None = Field(default=None, min_length=1)
    order: int | None = None
    is_heading: bool | None = None
    is_active: bool | None = None


class ToggleRequest(PortalModel):
    is_active: bool


class ReorderRequest(PortalModel):
    ordered_ids: list[str] = Field(..., min_length=1)


class CarouselImageCreate(PortalModel):
    image_url: str = Field(..., min_length=1)
    title: str | None = None
    description: str | None = None
    link: str | None = None


class ActionResult(PortalModel):
    """``{success, data?|error}`` envelope used by the admin catalog actions."""

    success: bool = True
    data: Any = None
    error: str | None = None

    @classmethod
    def of(cls, data: Any = None) -> ActionResult:
        """Wrap models in a successful envelope, dumped with camelCase keys."""

        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json", by_alias=True)
        elif isinstance(data, list):
            data = [
                item.model_dump(mode="json", by_alias=True)
                if isinstance(item, BaseModel)
                else item
                for item in data
            ]
        return cls(data=data)


class CountResponse(PortalModel):
    count: int
