"""Supplier onboarding, own profile and admin supplier management."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from src.api.dependencies import AdminUser, CurrentUser, SupplierServiceDependency
from src.models.auth import MessageResponse
from src.models.supplier import (
    OnboardingRequest,
    SupplierCreatedResponse,
    SupplierCreateRequest,
    SupplierEnvelope,
    SupplierListResponse,
    SupplierProfileUpdate,
    SupplierStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["suppliers"])


@router.post("/onboarding", response_model=SupplierEnvelope)
async def complete_onboarding(
    payload: OnboardingRequest,
    user: CurrentUser,
    suppliers: SupplierServiceDependency,
) -> SupplierEnvelope:
    supplier = await suppliers.complete_onboarding(user, payload)
    return SupplierEnvelope(message="Onboarding completed successfully", supplier=supplier)


@router.get("/supplier/profile", response_model=SupplierEnvelope)
async def get_profile(
    user: CurrentUser, suppliers: SupplierServiceDependency
) -> SupplierEnvelope:
    return SupplierEnvelope(supplier=await suppliers.profile_for(user))


@router.patch("/supplier/profile", response_model=SupplierEnvelope)
async def update_profile(
    payload: SupplierProfileUpdate,
    user: CurrentUser,
    suppliers: SupplierServiceDependency,
) -> SupplierEnvelope:
    supplier = await suppliers.update_profile(user, payload)
    return SupplierEnvelope(message="Profile updated successfully", supplier=supplier)


@router.get("/suppliers", response_model=SupplierListResponse)
async def list_suppliers(
    _: AdminUser, suppliers: SupplierServiceDependency
) -> SupplierListResponse:
    return SupplierListResponse(suppliers=await suppliers.list_suppliers())


@router.post(
    "/suppliers",
    response_model=SupplierCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_supplier(
    payload: SupplierCreateRequest,
    _: AdminUser,
    suppliers: SupplierServiceDependency,
) -> SupplierCreatedResponse:
    supplier, password = await suppliers.create_supplier(payload)
    return SupplierCreatedResponse(supplier=supplier, temporary_password=password)


@router.patch("/suppliers/{supplier_id}", response_model=SupplierEnvelope)
async def update_supplier(
    supplier_id: str,
    payload: SupplierProfileUpdate,
    _: AdminUser,
    suppliers: SupplierServiceDependency,
) -> SupplierEnvelope:
    supplier = await suppliers.update_supplier(supplier_id, payload)
    return SupplierEnvelope(message="Supplier updated successfully", supplier=supplier)


@router.patch("/suppliers/{supplier_id}/status", response_model=SupplierEnvelope)
async def update_supplier_status(
    supplier_id: str,
    payload: SupplierStatusUpdate,
    _: AdminUser,
    suppliers: SupplierServiceDependency,
) -> SupplierEnvelope:
    supplier = await suppliers.set_status(supplier_id, payload)
    return SupplierEnvelope(message="Supplier status updated", supplier=supplier)


@router.delete("/suppliers/{supplier_id}", response_model=MessageResponse)
async def delete_supplier(
    supplier_id: str,
    admin: AdminUser,
    suppliers: SupplierServiceDependency,
) -> MessageResponse:
    removed = await suppliers.delete_supplier(supplier_id)
    logger.info("Admin %s deleted supplier %s", admin.id, supplier_id)
    return MessageResponse(
        message=f"Supplier deleted along with {removed} product(s)"
    )
