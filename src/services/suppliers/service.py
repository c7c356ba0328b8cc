"""Supplier onboarding, profile and admin management."""

from __future__ import annotations

import logging
from collections import Counter

from src.errors import NotFound, ValidationError
from src.models.base import utcnow
from src.models.product import Product
from src.models.supplier import (
    OnboardingRequest,
    Supplier,
    SupplierCreateRequest,
    SupplierProfileUpdate,
    SupplierStatus,
    SupplierStatusUpdate,
    SupplierSummary,
    User,
    UserRole,
)
from src.services.auth.passwords import generate_password, hash_password
from src.services.auth.service import normalize_email
from src.services.products.coordinator import ProductAssetCoordinator
from src.services.repository.base import Repository

logger = logging.getLogger(__name__)


class SupplierService:
    def __init__(
        self,
        repository: Repository,
        coordinator: ProductAssetCoordinator,
    ) -> None:
        self._repository = repository
        self._coordinator = coordinator

    async def profile_for(self, user: User) -> Supplier:
        supplier = await self._repository.find_one(
            Supplier, lambda s: s.user_id == user.id
        )
        if supplier is None:
            raise NotFound("Supplier profile not found. Please complete onboarding first.")
        return supplier

    async def complete_onboarding(
        self, user: User, payload: OnboardingRequest
    ) -> Supplier:
        if not user.email_verified:
            raise ValidationError("Email not verified")

        supplier = await self._repository.find_one(
            Supplier, lambda s: s.user_id == user.id
        )
        if supplier is None:
            supplier = Supplier(
                user_id=user.id, name=user.name, email=user.email, verified=True
            )
        supplier.company_name = payload.company_name
        supplier.phone = payload.phone
        supplier.address = payload.address
        supplier.description = payload.description
        supplier.touch()
        await self._repository.save(supplier)
        logger.info("Supplier %s completed onboarding", supplier.id)
        return supplier

    async def update_profile(
        self, user: User, payload: SupplierProfileUpdate
    ) -> Supplier:
        supplier = await self.profile_for(user)
        return await self._apply_update(supplier, payload)

    async def list_suppliers(self) -> list[SupplierSummary]:
        suppliers = await self._repository.list(Supplier)
        counts = Counter(p.supplier_id for p in await self._repository.list(Product))
        summaries = [
            SupplierSummary(**s.model_dump(), product_count=counts.get(s.id, 0))
            for s in suppliers
        ]
        return sorted(summaries, key=lambda s: s.created_at, reverse=True)

    async def create_supplier(
        self, payload: SupplierCreateRequest
    ) -> tuple[Supplier, str]:
        """Create an approved, verified supplier plus its login.

        Returns the supplier and the generated password, which is not stored
        anywhere in clear text.
        """

        email = normalize_email(payload.email)
        existing = await self._repository.find_one(User, lambda u: u.email == email)
        if existing is not None:
            raise ValidationError("User with this email already exists.")

        password = generate_password()
        user = User(
            name=payload.name,
            email=email,
            password_hash=await hash_password(password),
            role=UserRole.SUPPLIER,
            email_verified_at=utcnow(),
        )
        supplier = Supplier(
            user_id=user.id,
            name=payload.name,
            email=email,
            company_name=payload.company_name,
            phone=payload.phone,
            address=payload.address,
            status=SupplierStatus.APPROVED,
            verified=True,
        )
        await self._repository.save(user)
        await self._repository.save(supplier)
        logger.info("Admin created supplier %s", supplier.id)
        return supplier, password

    async def get_supplier(self, supplier_id: str) -> Supplier:
        supplier = await self._repository.get(Supplier, supplier_id)
        if supplier is None:
            raise NotFound("Supplier not found")
        return supplier

    async def update_supplier(
        self, supplier_id: str, payload: SupplierProfileUpdate
    ) -> Supplier:
        return await self._apply_update(await self.get_supplier(supplier_id), payload)

    async def set_status(
        self, supplier_id: str, payload: SupplierStatusUpdate
    ) -> Supplier:
        supplier = await self.get_supplier(supplier_id)
        supplier.status = payload.status
        if payload.verified is not None:
            supplier.verified = payload.verified
        supplier.touch()
        await self._repository.save(supplier)
        logger.info("Supplier %s status set to %s", supplier.id, supplier.status.value)
        return supplier

    async def delete_supplier(self, supplier_id: str) -> int:
        """Delete a supplier and every product it owns. Returns the product count.

        The linked user account is kept so the person can onboard again.
        """

        supplier = await self.get_supplier(supplier_id)
        products = await self._repository.find(
            Product, lambda p: p.supplier_id == supplier.id
        )
        for product in products:
            await self._coordinator.purge(product)

        await self._repository.delete(Supplier, supplier.id)
        logger.info(
            "Supplier deleted",
            extra={"supplier_id": supplier.id, "products": len(products)},
        )
        return len(products)

    async def _apply_update(
        self, supplier: Supplier, payload: SupplierProfileUpdate
    ) -> Supplier:
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(supplier, field, value)
        supplier.touch()
        await self._repository.save(supplier)
        return supplier
