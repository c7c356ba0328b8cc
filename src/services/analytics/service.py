"""Aggregate counts for the admin overview and the supplier dashboard."""

from __future__ import annotations

from collections.abc import Iterable

from src.models.analytics import (
    AnalyticsOverview,
    Engagement,
    OverviewSummary,
    ProductStats,
    RecentActivity,
    RecentProduct,
    RecentSupplier,
    StatusCounts,
    SupplierAnalytics,
    TopSupplier,
)
from src.models.product import Product, ProductStatus
from src.models.supplier import Supplier
from src.services.repository.base import Repository

TOP_LIMIT = 5
RECENT_LIMIT = 5


def _status_counts(statuses: Iterable[str]) -> StatusCounts:
    counts = StatusCounts()
    for status in statuses:
        counts.total += 1
        if status == "APPROVED":
            counts.approved += 1
        elif status == "PENDING":
            counts.pending += 1
        elif status == "REJECTED":
            counts.rejected += 1
    return counts


def _engagement(products: Iterable[Product]) -> Engagement:
    engagement = Engagement()
    for product in products:
        engagement.total_views += product.view_count
        engagement.total_matches += product.match_count
    return engagement


class AnalyticsService:
    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    async def overview(self) -> AnalyticsOverview:
        suppliers = await self._repository.list(Supplier)
        products = await self._repository.list(Product)

        by_supplier: dict[str, list[Product]] = {s.id: [] for s in suppliers}
        for product in products:
            by_supplier.setdefault(product.supplier_id, []).append(product)
        names = {s.id: s.company_name for s in suppliers}

        ranked = sorted(
            suppliers,
            key=lambda s: (len(by_supplier[s.id]), s.created_at),
            reverse=True,
        )[:TOP_LIMIT]
        top_suppliers = []
        for supplier in ranked:
            owned = by_supplier[supplier.id]
            engagement = _engagement(owned)
            top_suppliers.append(
                TopSupplier(
                    id=supplier.id,
                    company_name=supplier.company_name,
                    status=supplier.status,
                    contact_name=supplier.name,
                    contact_email=supplier.email,
                    total_products=len(owned),
                    approved_products=sum(
                        1 for p in owned if p.status == ProductStatus.APPROVED
                    ),
                    total_views=engagement.total_views,
                    total_matches=engagement.total_matches,
                )
            )

        recent_suppliers = [
            RecentSupplier(
                id=s.id,
                company_name=s.company_name,
                status=s.status,
                created_at=s.created_at,
            )
            for s in sorted(suppliers, key=lambda s: s.created_at, reverse=True)[
                :RECENT_LIMIT
            ]
        ]
        recent_products = [
            RecentProduct(
                id=p.id,
                title=p.title,
                status=p.status,
                company_name=names.get(p.supplier_id),
                created_at=p.created_at,
            )
            for p in sorted(products, key=lambda p: p.created_at, reverse=True)[
                :RECENT_LIMIT
            ]
        ]

        return AnalyticsOverview(
            summary=OverviewSummary(
                suppliers=_status_counts(s.status.value for s in suppliers),
                products=_status_counts(p.status.value for p in products),
                engagement=_engagement(products),
            ),
            top_suppliers=top_suppliers,
            recent_activity=RecentActivity(
                suppliers=recent_suppliers, products=recent_products
            ),
        )

    async def for_supplier(self, supplier: Supplier) -> SupplierAnalytics:
        products = await self._repository.find(
            Product, lambda p: p.supplier_id == supplier.id
        )
        products.sort(key=lambda p: (p.view_count, p.match_count), reverse=True)
        return SupplierAnalytics(
            summary=_status_counts(p.status.value for p in products),
            engagement=_engagement(products),
            products=[
                ProductStats(
                    id=p.id,
                    title=p.title,
                    status=p.status,
                    view_count=p.view_count,
                    match_count=p.match_count,
                    created_at=p.created_at,
                )
                for p in products
            ],
        )

