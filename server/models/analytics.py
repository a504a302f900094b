"""Analytics result shapes."""

from typing import Dict, List

from pydantic import Field

from models.common import CamelModel


class SalesData(CamelModel):
    date: str
    revenue: float
    orders: int
    avg_order_value: float


class ProductPerformance(CamelModel):
    id: str
    title: str
    total_revenue: float = 0.0
    units_sold: int = 0
    view_count: int = 0
    conversion_rate: float = 0.0


class CustomerInsight(CamelModel):
    new_customers: int = 0
    returning_customers: int = 0
    top_locations: Dict[str, int] = Field(default_factory=dict)


class LowStockItem(CamelModel):
    id: str
    title: str
    inventory: int


class OutOfStockItem(CamelModel):
    id: str
    title: str


class InventoryReport(CamelModel):
    low_stock: List[LowStockItem] = Field(default_factory=list)
    out_of_stock: List[OutOfStockItem] = Field(default_factory=list)


class SalesTotals(CamelModel):
    total_revenue: float = 0.0
    total_orders: int = 0
    avg_order_value: float = 0.0


class Change(CamelModel):
    is_positive: bool = True
    percentage: str = "0.0"


class SalesMetrics(SalesTotals):
    sales_change: Change = Field(default_factory=Change)
    order_change: Change = Field(default_factory=Change)
    aov_change: Change = Field(default_factory=Change)
    daily_sales: List[SalesData] = Field(default_factory=list)


class InventoryMetrics(CamelModel):
    total_products: int = 0
    in_stock: int = 0
    low_stock: int = 0
    out_of_stock: int = 0
    low_stock_items: List[LowStockItem] = Field(default_factory=list)


class CustomerMetrics(CustomerInsight):
    customer_change: Change = Field(default_factory=Change)


class TopProduct(CamelModel):
    id: str
    title: str
    sales: int
    revenue: float


class RecentOrder(CamelModel):
    id: str
    customer: str
    total: float
    date: str
    status: str


class CategorySales(CamelModel):
    category: str
    sales: float
    percentage: float
