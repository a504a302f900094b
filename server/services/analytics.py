"""Sales, product, customer and inventory analytics.

The aggregation helpers are pure single-pass functions over entity lists
already fetched through the cached ``get_all`` of the order and product
services. ``AnalyticsService`` only picks the inputs and the time window.
"""

import calendar
from collections import Counter, defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from core.cache import Clock, now_ms
from core.document_store import DocumentStore, query
from core.logging import get_logger
from models.analytics import (
    CategorySales,
    Change,
    CustomerInsight,
    CustomerMetrics,
    InventoryMetrics,
    InventoryReport,
    LowStockItem,
    OutOfStockItem,
    ProductPerformance,
    RecentOrder,
    SalesData,
    SalesMetrics,
    SalesTotals,
    TopProduct,
)
from models.catalog import Product
from models.orders import Order
from services.orders import OrderService
from services.products import ProductService

logger = get_logger(__name__)

Window = Tuple[datetime, datetime]

ALL_TIME_START = datetime(2020, 1, 1, tzinfo=timezone.utc)
RANGES = ("7d", "30d", "90d", "ytd", "all")
PERIODS = ("day", "week", "month", "year")
TOP_LOCATIONS = 5
UNCATEGORIZED = "Uncategorized"


# ----------------------------------------------------------------------
# Time windows
# ----------------------------------------------------------------------

def months_back(moment: datetime, months: int) -> datetime:
    """Same day-of-month ``months`` earlier, clamped to the month's length."""
    total = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_start(period: str, now: datetime) -> datetime:
    if period == "day":
        return now - timedelta(days=1)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return months_back(now, 1)
    if period == "year":
        return months_back(now, 12)
    raise ValueError(f"Unknown period: {period}")


def range_window(date_range: str, now: datetime) -> Window:
    """``7d``, ``30d``, ``90d``, ``ytd`` or ``all`` ending at ``now``."""
    if date_range == "7d":
        return now - timedelta(days=7), now
    if date_range == "30d":
        return now - timedelta(days=30), now
    if date_range == "90d":
        return now - timedelta(days=90), now
    if date_range == "ytd":
        return datetime(now.year, 1, 1, tzinfo=timezone.utc), now
    if date_range == "all":
        return ALL_TIME_START, now
    raise ValueError(f"Unknown date range: {date_range}")


def as_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def previous_window(window: Window) -> Window:
    """Equal-length window ending where ``window`` starts."""
    start, end = window
    return start - (end - start), start


def in_window(orders: Iterable[Order], window: Window, include_end: bool = True) -> List[Order]:
    start, end = window
    return [
        o for o in orders
        if o.created_at is not None
        and start <= o.created_at
        and (o.created_at <= end if include_end else o.created_at < end)
    ]


# ----------------------------------------------------------------------
# Aggregations
# ----------------------------------------------------------------------

def sales_by_date(orders: Iterable[Order]) -> List[SalesData]:
    """Revenue and order count per UTC calendar date, oldest first."""
    revenue: Dict[str, float] = defaultdict(float)
    counts: Counter = Counter()
    for order in orders:
        if order.created_at is None:
            continue
        day = order.created_at.astimezone(timezone.utc).date().isoformat()
        revenue[day] += order.total
        counts[day] += 1
    return [
        SalesData(date=day, revenue=revenue[day], orders=counts[day],
                  avg_order_value=revenue[day] / counts[day])
        for day in sorted(counts)
    ]


def product_performance(orders: Iterable[Order], views: Optional[Dict[str, int]] = None,
                        top: int = 10) -> List[ProductPerformance]:
    """Revenue and units per product, best revenue first.

    ``views`` maps product id to view count; conversion is units per 100 views.
    """
    stats: Dict[str, ProductPerformance] = {}
    for order in orders:
        for item in order.items:
            entry = stats.get(item.product_id)
            if entry is None:
                entry = stats[item.product_id] = ProductPerformance(id=item.product_id, title=item.title)
            entry.total_revenue += item.line_total
            entry.units_sold += item.quantity

    for product_id, count in (views or {}).items():
        entry = stats.get(product_id)
        if entry is not None:
            entry.view_count = count
            entry.conversion_rate = entry.units_sold / count * 100 if count > 0 else 0.0

    ranked = sorted(stats.values(), key=lambda p: p.total_revenue, reverse=True)
    return ranked[:top]


def customer_insights(orders: Iterable[Order]) -> CustomerInsight:
    """One order in the window makes a new customer, more makes a returning one."""
    per_customer: Counter = Counter()
    locations: Counter = Counter()
    for order in orders:
        per_customer[order.user_id] += 1
        if order.shipping_address is not None:
            locations[order.shipping_address.location] += 1
    return CustomerInsight(
        new_customers=sum(1 for n in per_customer.values() if n == 1),
        returning_customers=sum(1 for n in per_customer.values() if n > 1),
        top_locations=dict(locations.most_common(TOP_LOCATIONS)),
    )


def inventory_report(products: Iterable[Product], threshold: int = 5) -> InventoryReport:
    low: List[LowStockItem] = []
    out: List[OutOfStockItem] = []
    for product in products:
        if product.inventory <= 0:
            out.append(OutOfStockItem(id=product.id, title=product.title))
        elif product.inventory <= threshold:
            low.append(LowStockItem(id=product.id, title=product.title, inventory=product.inventory))
    low.sort(key=lambda item: item.inventory)
    return InventoryReport(low_stock=low, out_of_stock=out)


def sales_totals(orders: Iterable[Order]) -> SalesTotals:
    revenue = 0.0
    count = 0
    for order in orders:
        revenue += order.total
        count += 1
    return SalesTotals(total_revenue=revenue, total_orders=count,
                       avg_order_value=revenue / count if count else 0.0)


def percent_change(current: float, previous: float) -> Change:
    if previous == 0:
        return Change(is_positive=True, percentage="0.0" if current == 0 else "100.0")
    change = (current - previous) / previous * 100
    return Change(is_positive=change >= 0, percentage=f"{abs(change):.1f}")


def top_selling(orders: Iterable[Order], limit: int = 5) -> List[TopProduct]:
    units: Counter = Counter()
    revenue: Dict[str, float] = defaultdict(float)
    titles: Dict[str, str] = {}
    for order in orders:
        for item in order.items:
            units[item.product_id] += item.quantity
            revenue[item.product_id] += item.line_total
            titles.setdefault(item.product_id, item.title)
    return [
        TopProduct(id=pid, title=titles[pid], sales=sold, revenue=revenue[pid])
        for pid, sold in units.most_common(limit)
    ]


def recent(orders: Iterable[Order], limit: int = 5) -> List[RecentOrder]:
    dated = [o for o in orders if o.created_at is not None]
    dated.sort(key=lambda o: o.created_at, reverse=True)
    return [
        RecentOrder(id=o.id, customer=o.customer_name or o.customer_email, total=o.total,
                    date=o.created_at.isoformat(), status=o.status)
        for o in dated[:limit]
    ]


def sales_by_category(orders: Iterable[Order], products: Iterable[Product]) -> List[CategorySales]:
    """Line-item revenue per product category, largest first."""
    category_of = {p.id: p.category or UNCATEGORIZED for p in products}
    revenue: Dict[str, float] = defaultdict(float)
    for order in orders:
        for item in order.items:
            revenue[category_of.get(item.product_id, UNCATEGORIZED)] += item.line_total
    total = sum(revenue.values())
    rows = [
        CategorySales(category=name, sales=amount,
                      percentage=round(amount / total * 100, 1) if total else 0.0)
        for name, amount in revenue.items()
    ]
    rows.sort(key=lambda row: row.sales, reverse=True)
    return rows


# ----------------------------------------------------------------------
# Service
# ----------------------------------------------------------------------

class AnalyticsService:
    """Dashboard and report figures derived from orders and products."""

    def __init__(self, store: DocumentStore, orders: OrderService, products: ProductService,
                 low_stock_threshold: int = 5, clock: Clock = now_ms):
        self.store = store
        self.orders = orders
        self.products = products
        self.low_stock_threshold = low_stock_threshold
        self.clock = clock

    def now(self) -> datetime:
        return datetime.fromtimestamp(self.clock() / 1000, tz=timezone.utc)

    async def _orders_in(self, window: Window) -> List[Order]:
        return in_window(await self.orders.get_all(), window)

    async def product_views(self) -> Dict[str, int]:
        """View counts from ``productAnalytics``; empty when unavailable."""
        try:
            docs = await self.store.list(query("productAnalytics"))
        except Exception as e:
            logger.warning("Product analytics unavailable", error=str(e))
            return {}
        return {
            str(doc.data["productId"]): int(doc.data.get("views") or 0)
            for doc in docs if doc.data.get("productId")
        }

    async def sales_data(self, period: str = "month", start: Optional[datetime] = None,
                         end: Optional[datetime] = None) -> List[SalesData]:
        now = self.now()
        window = (as_utc(start) if start else period_start(period, now), as_utc(end) if end else now)
        return sales_by_date(await self._orders_in(window))

    async def product_performance(self, top: int = 10) -> List[ProductPerformance]:
        orders = await self.orders.get_all()
        if not orders:
            return []
        return product_performance(orders, await self.product_views(), top)

    async def customer_insights(self, timeframe: str = "month") -> CustomerInsight:
        now = self.now()
        if timeframe not in ("week", "month", "year"):
            timeframe = "year"
        return customer_insights(await self._orders_in((period_start(timeframe, now), now)))

    async def inventory_report(self, threshold: Optional[int] = None) -> InventoryReport:
        limit = self.low_stock_threshold if threshold is None else threshold
        return inventory_report(await self.products.get_all(), limit)

    async def total_sales_metrics(self) -> SalesTotals:
        return sales_totals(await self.orders.get_all())

    async def sales_metrics(self, date_range: str = "30d") -> SalesMetrics:
        """Totals for the range with change against the previous range of equal length."""
        orders = await self.orders.get_all()
        window = range_window(date_range, self.now())
        current_orders = in_window(orders, window)
        current = sales_totals(current_orders)
        previous = sales_totals(in_window(orders, previous_window(window), include_end=False))
        return SalesMetrics(
            **current.model_dump(),
            sales_change=percent_change(current.total_revenue, previous.total_revenue),
            order_change=percent_change(current.total_orders, previous.total_orders),
            aov_change=percent_change(current.avg_order_value, previous.avg_order_value),
            daily_sales=sales_by_date(current_orders),
        )

    async def inventory_metrics(self) -> InventoryMetrics:
        products = await self.products.get_all()
        report = inventory_report(products, self.low_stock_threshold)
        return InventoryMetrics(
            total_products=len(products),
            in_stock=sum(1 for p in products if p.in_stock),
            low_stock=len(report.low_stock),
            out_of_stock=len(report.out_of_stock),
            low_stock_items=report.low_stock,
        )

    async def customer_metrics(self, date_range: str = "30d") -> CustomerMetrics:
        orders = await self.orders.get_all()
        window = range_window(date_range, self.now())
        current_orders = in_window(orders, window)
        insight = customer_insights(current_orders)
        current_customers = len({o.user_id for o in current_orders})
        previous_orders = in_window(orders, previous_window(window), include_end=False)
        previous_customers = len({o.user_id for o in previous_orders})
        return CustomerMetrics(
            **insight.model_dump(),
            customer_change=percent_change(current_customers, previous_customers),
        )

    async def top_selling_products(self, date_range: str = "30d", limit: int = 5) -> List[TopProduct]:
        window = range_window(date_range, self.now())
        return top_selling(await self._orders_in(window), limit)

    async def recent_orders(self, limit: int = 5) -> List[RecentOrder]:
        return recent(await self.orders.get_all(), limit)

    async def sales_by_category(self, date_range: str = "30d") -> List[CategorySales]:
        window = range_window(date_range, self.now())
        return sales_by_category(await self._orders_in(window), await self.products.get_all())
