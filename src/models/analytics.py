"""Analytics response schemas."""

from __future__ import annotations

from datetime import datetime

from src.models.base import PortalModel
from src.models.product import ProductStatus
from src.models.supplier import SupplierStatus


class StatusCounts(PortalModel):
    total: int = 0
    approved: int = 0
    pending: int = 0
    rejected: int = 0


class Engagement(PortalModel):
    total_views: int = 0
    total_matches: int = 0


class TopSupplier(PortalModel):
    id: str
    company_name: str | None = None
    status: SupplierStatus
    contact_name: str
    contact_email: str
    total_products: int
    approved_products: int
    total_views: int
    total_matches: int


class RecentSupplier(PortalModel):
    id: str
    company_name: str | None = None
    status: SupplierStatus
    created_at: datetime


class RecentProduct(PortalModel):
    id: str
    title: str
    status: ProductStatus
    company_name: str | None = None
    created_at: datetime


class OverviewSummary(PortalModel):
    suppliers: StatusCounts
    products: StatusCounts
    engagement: Engagement


class RecentActivity(PortalModel):
    suppliers: list[RecentSupplier]
    products: list[RecentProduct]


class AnalyticsOverview(PortalModel):
    scope: str = "overview"
    summary: OverviewSummary
    top_suppliers: list[TopSupplier]
    recent_activity: RecentActivity


class ProductStats(PortalModel):
    id: str
    title: str
    status: ProductStatus
    view_count: int
    match_count: int
    created_at: datetime


class SupplierAnalytics(PortalModel):
    scope: str = "supplier"
    summary: StatusCounts
    engagement: Engagement
    products: list[ProductStats]
