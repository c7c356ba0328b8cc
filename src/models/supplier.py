"""Supplier and user account models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import EmailStr, Field

from src.models.base import PortalModel, StoredModel


class UserRole(str, Enum):
    SUPPLIER = "SUPPLIER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class SupplierStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class User(StoredModel):
    """Login identity. Suppliers hang off a user one-to-one."""

    collection: ClassVar[str] = "users"

    name: str
    email: str
    password_hash: str
    role: UserRole = UserRole.SUPPLIER
    email_verified_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN)

    @property
    def email_verified(self) -> bool:
        return self.email_verified_at is not None


class Supplier(StoredModel):
    collection: ClassVar[str] = "suppliers"

    user_id: str | None = None
    name: str
    email: str
    company_name: str | None = None
    phone: str | None = None
    address: str | None = None
    description: str | None = None
    status: SupplierStatus = SupplierStatus.PENDING
    verified: bool = False

    @property
    def is_public(self) -> bool:
        return self.verified and self.status == SupplierStatus.APPROVED


class UserView(PortalModel):
    """Public projection of a user, without the password hash."""

    id: str
    name: str
    email: str
    role: UserRole
    verified: bool

    @classmethod
    def from_user(cls, user: User) -> UserView:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            verified=user.email_verified,
        )


class SupplierSummary(Supplier):
    product_count: int = 0


class OnboardingRequest(PortalModel):
    company_name: str = Field(..., min_length=1)
    phone: str | None = None
    address: str | None = None
    description: str | None = None


class SupplierProfileUpdate(PortalModel):
    company_name: str | None = None
    phone: str | None = None
    address: str | None = None
    description: str | None = None


class SupplierCreateRequest(PortalModel):
    """Admin-side creation of a supplier together with its login."""

    name: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str | None = None
    address: str | None = None


class SupplierStatusUpdate(PortalModel):
    status: SupplierStatus
    verified: bool | None = None


class SupplierEnvelope(PortalModel):
    message: str | None = None
    supplier: Supplier


class SupplierCreatedResponse(PortalModel):
    supplier: Supplier
    temporary_password: str = Field(
        ...,
        description="Generated password, returned once so the admin can hand it over",
    )


class SupplierListResponse(PortalModel):
    suppliers: list[SupplierSummary]
