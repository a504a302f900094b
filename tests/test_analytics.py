from datetime import datetime, timezone

import pytest

from models.catalog import Product
from models.orders import Order
from services.analytics import (
    AnalyticsService,
    as_utc,
    customer_insights,
    in_window,
    inventory_report,
    months_back,
    percent_change,
    previous_window,
    range_window,
    sales_by_category,
    sales_by_date,
)
from services.orders import OrderService
from services.products import ProductService

from conftest import FakeClock

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def order(order_id, created, total, user, items=(), city="Austin"):
    return Order.model_validate({
        "id": order_id,
        "userId": user,
        "total": total,
        "createdAt": created,
        "items": list(items),
        "shippingAddress": {"city": city, "state": "TX", "country": "US"},
    })


def item(product_id, price, quantity, title=None):
    return {"productId": product_id, "title": title or product_id.upper(), "price": price, "quantity": quantity}


# Pure helpers

def test_percent_change_edges():
    assert percent_change(0, 0).percentage == "0.0"
    assert percent_change(5, 0).percentage == "100.0"
    down = percent_change(75, 100)
    assert (down.is_positive, down.percentage) == (False, "25.0")
    up = percent_change(150, 100)
    assert (up.is_positive, up.percentage) == (True, "50.0")


def test_months_back_clamps_day():
    assert months_back(datetime(2024, 3, 31, tzinfo=timezone.utc), 1).day == 29
    assert months_back(datetime(2024, 1, 15, tzinfo=timezone.utc), 12).year == 2023


def test_range_windows():
    start, end = range_window("ytd", NOW)
    assert start == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert end == NOW
    assert range_window("all", NOW)[0].year == 2020
    window = range_window("7d", NOW)
    assert previous_window(window)[1] == window[0]
    with pytest.raises(ValueError):
        range_window("2w", NOW)


def test_order_on_window_start_counts_once():
    window = range_window("7d", NOW)
    boundary = order("edge", window[0], 10, "u1")
    assert in_window([boundary], window) == [boundary]
    assert in_window([boundary], previous_window(window), include_end=False) == []


def test_as_utc_only_fills_missing_offset():
    assert as_utc(datetime(2024, 1, 1)).tzinfo is timezone.utc
    aware = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert as_utc(aware) is aware


def test_sales_by_date_groups_per_utc_day():
    orders = [
        order("a", "2024-06-14T01:00:00Z", 30, "u1"),
        order("b", "2024-06-14T23:00:00Z", 10, "u2"),
        order("c", "2024-06-13T05:00:00Z", 5, "u1"),
    ]
    rows = sales_by_date(orders)
    assert [r.date for r in rows] == ["2024-06-13", "2024-06-14"]
    assert rows[1].revenue == 40
    assert rows[1].avg_order_value == 20


def test_customer_insights_counts_and_locations():
    orders = [
        order("a", "2024-06-14T00:00:00Z", 1, "u1", city="Austin"),
        order("b", "2024-06-14T00:00:00Z", 1, "u1", city="Austin"),
        order("c", "2024-06-14T00:00:00Z", 1, "u2", city="Denver"),
    ]
    insight = customer_insights(orders)
    assert insight.new_customers == 1
    assert insight.returning_customers == 1
    assert insight.top_locations == {"Austin, TX, US": 2, "Denver, TX, US": 1}


def test_inventory_report_thresholds():
    products = [
        Product(id="a", title="A", inventory=0),
        Product(id="b", title="B", inventory=5),
        Product(id="c", title="C", inventory=2),
        Product(id="d", title="D", inventory=6),
    ]
    report = inventory_report(products, threshold=5)
    assert [i.id for i in report.low_stock] == ["c", "b"]
    assert [i.id for i in report.out_of_stock] == ["a"]


def test_sales_by_category_percentages():
    products = [Product(id="p1", category="Hoodies"), Product(id="p2", category="T-Shirts")]
    orders = [order("a", "2024-06-14T00:00:00Z", 0, "u1",
                    items=[item("p1", 30, 2), item("p2", 20, 1), item("ghost", 10, 2)])]
    rows = sales_by_category(orders, products)
    assert [(r.category, r.sales, r.percentage) for r in rows] == [
        ("Hoodies", 60, 60.0), ("T-Shirts", 20, 20.0), ("Uncategorized", 20, 20.0)]


# Service over stored orders

@pytest.fixture
async def analytics(store, storage):
    clock = FakeClock(int(NOW.timestamp() * 1000))
    products = ProductService(store, storage, clock=clock)
    orders = OrderService(store, products=products, clock=clock)

    rows = [
        ("o1", "2024-06-14T10:00:00.000000Z", 100, "u1", [item("p1", 25, 4)]),
        ("o2", "2024-06-10T10:00:00.000000Z", 50, "u2", [item("p2", 50, 1)]),
        ("o3", "2024-06-05T10:00:00.000000Z", 100, "u1", [item("p1", 25, 4)]),
        ("o4", "2023-01-01T10:00:00.000000Z", 10, "u3", [item("p2", 10, 1)]),
    ]
    for order_id, created, total, user, items in rows:
        await store.set("orders", order_id, {"createdAt": created, "total": total, "userId": user,
                                             "customerName": user, "items": items, "status": "delivered"})
    await store.set("products", "p1", {"title": "P1", "category": "Hoodies", "inventory": 0})
    await store.set("products", "p2", {"title": "P2", "category": "T-Shirts", "inventory": 3})
    await store.set("products", "p3", {"title": "P3", "category": "T-Shirts", "inventory": 40})
    await store.set("productAnalytics", "p1", {"productId": "p1", "views": 16})
    return AnalyticsService(store, orders, products, low_stock_threshold=5, clock=clock)


async def test_sales_metrics_compare_previous_window(analytics):
    metrics = await analytics.sales_metrics("7d")
    assert metrics.total_revenue == 150
    assert metrics.total_orders == 2
    assert metrics.avg_order_value == 75
    assert (metrics.sales_change.is_positive, metrics.sales_change.percentage) == (True, "50.0")
    assert metrics.order_change.percentage == "100.0"
    assert (metrics.aov_change.is_positive, metrics.aov_change.percentage) == (False, "25.0")
    assert [d.date for d in metrics.daily_sales] == ["2024-06-10", "2024-06-14"]


async def test_total_sales_metrics(analytics):
    totals = await analytics.total_sales_metrics()
    assert totals.total_revenue == 260
    assert totals.total_orders == 4


async def test_customer_metrics(analytics):
    metrics = await analytics.customer_metrics("7d")
    assert metrics.new_customers == 2
    assert metrics.customer_change.percentage == "100.0"


async def test_inventory_metrics(analytics):
    metrics = await analytics.inventory_metrics()
    assert metrics.total_products == 3
    assert metrics.in_stock == 2
    assert metrics.low_stock == 1
    assert metrics.out_of_stock == 1
    assert metrics.low_stock_items[0].id == "p2"


async def test_product_performance_uses_views(analytics):
    ranked = await analytics.product_performance()
    assert ranked[0].id == "p1"
    assert ranked[0].units_sold == 8
    assert ranked[0].view_count == 16
    assert ranked[0].conversion_rate == 50.0
    assert ranked[1].view_count == 0


async def test_product_views_unavailable(analytics, store):
    store.failing = True
    assert await analytics.product_views() == {}


async def test_top_products_recent_orders_and_categories(analytics):
    top = await analytics.top_selling_products("30d", limit=1)
    assert [(t.id, t.sales) for t in top] == [("p1", 8)]

    recent = await analytics.recent_orders(limit=2)
    assert [r.id for r in recent] == ["o1", "o2"]

    categories = await analytics.sales_by_category("all")
    assert categories[0].category == "Hoodies"
    assert categories[0].sales == 200


async def test_customer_insights_bad_timeframe_uses_year(analytics):
    insight = await analytics.customer_insights("decade")
    assert insight.returning_customers == 1
    assert insight.new_customers == 1


@pytest.mark.parametrize("period, dates", [
    ("day", []),
    ("week", ["2024-06-10", "2024-06-14"]),
    ("month", ["2024-06-05", "2024-06-10", "2024-06-14"]),
    ("year", ["2024-06-05", "2024-06-10", "2024-06-14"]),
])
async def test_sales_data_periods(analytics, period, dates):
    rows = await analytics.sales_data(period)
    assert [r.date for r in rows] == dates


async def test_sales_data_explicit_bounds(analytics):
    rows = await analytics.sales_data(start=datetime(2023, 1, 1, tzinfo=timezone.utc),
                                      end=datetime(2024, 6, 6, tzinfo=timezone.utc))
    assert [(r.date, r.revenue) for r in rows] == [("2023-01-01", 10), ("2024-06-05", 100)]


async def test_sales_data_naive_bounds_are_utc(analytics):
    rows = await analytics.sales_data("month", start=datetime(2023, 1, 1))
    assert [r.date for r in rows][0] == "2023-01-01"
    assert len(rows) == 4

    rows = await analytics.sales_data(start=datetime(2024, 6, 10), end=datetime(2024, 6, 10, 10))
    assert [(r.date, r.orders) for r in rows] == [("2024-06-10", 1)]


async def test_sales_metrics_boundary_order_not_in_previous_window(analytics, store):
    await store.set("orders", "edge", {"createdAt": "2024-06-08T12:00:00.000000Z", "total": 50,
                                       "userId": "u4", "items": [], "status": "delivered"})
    metrics = await analytics.sales_metrics("7d")
    assert metrics.total_orders == 3
    assert metrics.total_revenue == 200
    assert (metrics.sales_change.is_positive, metrics.sales_change.percentage) == (True, "100.0")
