"""Admin overview and per-supplier analytics."""

from __future__ import annotations

from fastapi import APIRouter

from src.api.dependencies import (
    AdminUser,
    AnalyticsDependency,
    CurrentUser,
    SupplierServiceDependency,
)
from src.models.analytics import AnalyticsOverview, SupplierAnalytics

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/overview", response_model=AnalyticsOverview)
async def analytics_overview(
    _: AdminUser, analytics: AnalyticsDependency
) -> AnalyticsOverview:
    return await analytics.overview()


@router.get("", response_model=AnalyticsOverview | SupplierAnalytics)
async def analytics_for_user(
    user: CurrentUser,
    analytics: AnalyticsDependency,
    suppliers: SupplierServiceDependency,
) -> AnalyticsOverview | SupplierAnalytics:
    """Admins get the platform overview, suppliers their own numbers."""

    if user.is_admin:
        return await analytics.overview()
    return await analytics.for_supplier(await suppliers.profile_for(user))
