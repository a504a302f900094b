"""Search, filter, sort and paginate helpers for the admin list views.

All of these work on lists already returned by a service's cached
``get_all``; none of them touch the store.
"""

import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from models.catalog import Product
from models.common import CamelModel, to_wire
from models.orders import Order
from models.users import Customer

T = TypeVar("T")

DEFAULT_PER_PAGE = 10
ALL = "all"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class Page(CamelModel, Generic[T]):
    items: List[T]
    page: int
    per_page: int
    total: int
    total_pages: int

    def to_wire(self) -> Dict[str, Any]:
        return {
            "items": to_wire(self.items),
            "page": self.page,
            "perPage": self.per_page,
            "total": self.total,
            "totalPages": self.total_pages,
        }


def paginate(items: List[T], page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> Page[T]:
    """Slice out 1-based ``page``. ``total_pages`` is ``ceil(total / per_page)``."""
    per_page = max(1, per_page)
    page = max(1, page)
    start = (page - 1) * per_page
    return Page(
        items=items[start:start + per_page],
        page=page,
        per_page=per_page,
        total=len(items),
        total_pages=math.ceil(len(items) / per_page),
    )


def _created(entity) -> datetime:
    value = entity.created_at
    if value is None:
        return _EPOCH
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _contains(text: Optional[str], needle: str) -> bool:
    return needle in (text or "").lower()


def _sorted(items: List[T], sorts: Dict[str, Callable[[List[T]], List[T]]], key: Optional[str],
            default: str) -> List[T]:
    return sorts.get(key or default, sorts[default])(list(items))


# ----------------------------------------------------------------------
# Orders
# ----------------------------------------------------------------------

ORDER_SORTS: Dict[str, Callable[[List[Order]], List[Order]]] = {
    "newest": lambda xs: sorted(xs, key=_created, reverse=True),
    "oldest": lambda xs: sorted(xs, key=_created),
    "total-high": lambda xs: sorted(xs, key=lambda o: o.total, reverse=True),
    "total-low": lambda xs: sorted(xs, key=lambda o: o.total),
}


def filter_orders(orders: List[Order], search: str = "", status: str = ALL) -> List[Order]:
    """Match order id or customer email, and an exact status unless ``all``."""
    needle = search.strip().lower()
    return [
        o for o in orders
        if (not needle or _contains(o.id, needle) or _contains(o.customer_email, needle))
        and (status in (ALL, "") or o.status == status)
    ]


def list_orders(orders: List[Order], search: str = "", status: str = ALL, sort: Optional[str] = None,
                page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> Page[Order]:
    matched = filter_orders(orders, search, status)
    return paginate(_sorted(matched, ORDER_SORTS, sort, "newest"), page, per_page)


# ----------------------------------------------------------------------
# Products
# ----------------------------------------------------------------------

PRODUCT_SORTS: Dict[str, Callable[[List[Product]], List[Product]]] = {
    "price-low": lambda xs: sorted(xs, key=lambda p: p.numeric_price),
    "price-high": lambda xs: sorted(xs, key=lambda p: p.numeric_price, reverse=True),
    "name-asc": lambda xs: sorted(xs, key=lambda p: p.title.lower()),
    "name-desc": lambda xs: sorted(xs, key=lambda p: p.title.lower(), reverse=True),
    # already newest first from the store
    "newest": lambda xs: xs,
}


def filter_products(products: List[Product], search: str = "", category: str = ALL,
                    status: str = ALL) -> List[Product]:
    """Title search, exact category, and ``in-stock`` / ``out-of-stock`` status."""
    needle = search.strip().lower()
    result = []
    for p in products:
        if needle and not _contains(p.title, needle):
            continue
        if category not in (ALL, "") and p.category != category:
            continue
        if status == "in-stock" and not p.in_stock:
            continue
        if status == "out-of-stock" and p.in_stock:
            continue
        result.append(p)
    return result


def list_products(products: List[Product], search: str = "", category: str = ALL, status: str = ALL,
                  sort: Optional[str] = None, page: int = 1,
                  per_page: int = DEFAULT_PER_PAGE) -> Page[Product]:
    matched = filter_products(products, search, category, status)
    return paginate(_sorted(matched, PRODUCT_SORTS, sort, "newest"), page, per_page)


# ----------------------------------------------------------------------
# Customers
# ----------------------------------------------------------------------

CUSTOMER_SORTS: Dict[str, Callable[[List[Customer]], List[Customer]]] = {
    "name-asc": lambda xs: sorted(xs, key=lambda c: c.name.lower()),
    "name-desc": lambda xs: sorted(xs, key=lambda c: c.name.lower(), reverse=True),
    "orders-high": lambda xs: sorted(xs, key=lambda c: c.total_orders, reverse=True),
    "spend-high": lambda xs: sorted(xs, key=lambda c: c.total_spent, reverse=True),
    "oldest": lambda xs: sorted(xs, key=_created),
    "newest": lambda xs: sorted(xs, key=_created, reverse=True),
}

CUSTOMER_FILTERS: Dict[str, Callable[[Customer], bool]] = {
    "high-value": lambda c: c.is_high_value,
    "recent": lambda c: c.is_recent_customer,
    "active": lambda c: c.is_active,
    "inactive": lambda c: not c.is_active,
}


def filter_customers(customers: List[Customer], search: str = "", status: str = ALL) -> List[Customer]:
    """Match name or email; ``status`` is one of the customer filter names or ``all``."""
    needle = search.strip().lower()
    keep = CUSTOMER_FILTERS.get(status, lambda c: True)
    return [
        c for c in customers
        if (not needle or _contains(c.name, needle) or _contains(c.email, needle)) and keep(c)
    ]


def list_customers(customers: List[Customer], search: str = "", status: str = ALL,
                   sort: Optional[str] = None, page: int = 1,
                   per_page: int = DEFAULT_PER_PAGE) -> Page[Customer]:
    matched = filter_customers(customers, search, status)
    return paginate(_sorted(matched, CUSTOMER_SORTS, sort, "newest"), page, per_page)
