"""Dashboard and report routes."""

from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from core.container import container
from models.common import to_wire
from services.analytics import AnalyticsService

router = APIRouter(prefix="/api/analytics", tags=["analytics"])

DateRange = Literal["7d", "30d", "90d", "ytd", "all"]
Period = Literal["day", "week", "month", "year"]


def analytics_service() -> AnalyticsService:
    return container.analytics_service()


@router.get("/sales")
async def get_sales_data(
    period: Period = "month",
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    analytics: AnalyticsService = Depends(analytics_service)
):
    return {"success": True, "sales": to_wire(await analytics.sales_data(period, start, end))}


@router.get("/products/performance")
async def get_product_performance(
    top: int = Query(10, ge=1, le=100),
    analytics: AnalyticsService = Depends(analytics_service)
):
    return {"success": True, "products": to_wire(await analytics.product_performance(top))}


@router.get("/customers/insights")
async def get_customer_insights(timeframe: str = "month", analytics: AnalyticsService = Depends(analytics_service)):
    return {"success": True, "insights": to_wire(await analytics.customer_insights(timeframe))}


@router.get("/inventory")
async def get_inventory_report(
    threshold: Optional[int] = Query(None, ge=0),
    analytics: AnalyticsService = Depends(analytics_service)
):
    return {"success": True, "report": to_wire(await analytics.inventory_report(threshold))}


@router.get("/metrics/totals")
async def get_total_sales(analytics: AnalyticsService = Depends(analytics_service)):
    return {"success": True, "metrics": to_wire(await analytics.total_sales_metrics())}


@router.get("/metrics/sales")
async def get_sales_metrics(
    date_range: DateRange = Query("30d", alias="range"),
    analytics: AnalyticsService = Depends(analytics_service)
):
    return {"success": True, "metrics": to_wire(await analytics.sales_metrics(date_range))}


@router.get("/metrics/inventory")
async def get_inventory_metrics(analytics: AnalyticsService = Depends(analytics_service)):
    return {"success": True, "metrics": to_wire(await analytics.inventory_metrics())}


@router.get("/metrics/customers")
async def get_customer_metrics(
    date_range: DateRange = Query("30d", alias="range"),
    analytics: AnalyticsService = Depends(analytics_service)
):
    return {"success": True, "metrics": to_wire(await analytics.customer_metrics(date_range))}


@router.get("/top-products")
async def get_top_products(
    date_range: DateRange = Query("30d", alias="range"),
    limit: int = Query(5, ge=1, le=50),
    analytics: AnalyticsService = Depends(analytics_service)
):
    return {"success": True, "products": to_wire(await analytics.top_selling_products(date_range, limit))}


@router.get("/recent-orders")
async def get_recent_orders(
    limit: int = Query(5, ge=1, le=50),
    analytics: AnalyticsService = Depends(analytics_service)
):
    return {"success": True, "orders": to_wire(await analytics.recent_orders(limit))}


@router.get("/sales-by-category")
async def get_sales_by_category(
    date_range: DateRange = Query("30d", alias="range"),
    analytics: AnalyticsService = Depends(analytics_service)
):
    return {"success": True, "categories": to_wire(await analytics.sales_by_category(date_range))}
