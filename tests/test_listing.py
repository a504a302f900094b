from models.catalog import Product
from models.orders import Order
from models.users import Customer
from services.listing import list_customers, list_orders, list_products, paginate


def test_paginate_counts_pages():
    page = paginate(list(range(25)), page=3, per_page=10)
    assert page.items == [20, 21, 22, 23, 24]
    assert page.total == 25
    assert page.total_pages == 3
    assert page.to_wire()["perPage"] == 10


def test_paginate_clamps_page_and_handles_empty():
    assert paginate([1, 2], page=0).page == 1
    empty = paginate([], page=1, per_page=10)
    assert empty.items == []
    assert empty.total_pages == 0


def test_order_search_filter_sort():
    orders = [
        Order(id="A100", customer_email="ada@example.com", total=20, status="pending",
              created_at="2024-01-01T00:00:00Z"),
        Order(id="B200", customer_email="bob@example.com", total=90, status="shipped",
              created_at="2024-02-01T00:00:00Z"),
        Order(id="C300", customer_email="cy@example.com", total=50, status="pending",
              created_at="2024-03-01T00:00:00Z"),
    ]
    assert [o.id for o in list_orders(orders).items] == ["C300", "B200", "A100"]
    assert [o.id for o in list_orders(orders, sort="total-high").items] == ["B200", "C300", "A100"]
    assert [o.id for o in list_orders(orders, status="pending", sort="oldest").items] == ["A100", "C300"]
    assert [o.id for o in list_orders(orders, search="BOB").items] == ["B200"]
    assert [o.id for o in list_orders(orders, search="a100").items] == ["A100"]


def test_product_filters_and_price_sort():
    products = [
        Product(id="1", title="Black Tee", price="$30", category="T-Shirts", inventory=3),
        Product(id="2", title="Hoodie", price="$55.50", category="Hoodies", inventory=0),
        Product(id="3", title="White Tee", price=25, category="T-Shirts", inventory=9),
    ]
    assert [p.id for p in list_products(products, sort="price-low").items] == ["3", "1", "2"]
    assert [p.id for p in list_products(products, category="T-Shirts", sort="name-desc").items] == ["3", "1"]
    assert [p.id for p in list_products(products, status="out-of-stock").items] == ["2"]
    assert [p.id for p in list_products(products, search="tee", status="in-stock").items] == ["1", "3"]
    assert [p.id for p in list_products(products, sort="unknown").items] == ["1", "2", "3"]


def test_customer_filters():
    customers = [
        Customer(id="1", name="Ada", email="ada@example.com", is_high_value=True, total_spent=900),
        Customer(id="2", name="Bob", email="bob@example.com", status="banned", is_recent_customer=True),
        Customer(id="3", name="Cy", email="cy@example.com", total_orders=4),
    ]
    assert [c.id for c in list_customers(customers, status="high-value").items] == ["1"]
    assert [c.id for c in list_customers(customers, status="recent").items] == ["2"]
    assert [c.id for c in list_customers(customers, status="inactive").items] == ["2"]
    assert [c.id for c in list_customers(customers, search="CY").items] == ["3"]
    assert [c.id for c in list_customers(customers, sort="orders-high").items][0] == "3"
    assert [c.id for c in list_customers(customers, sort="spend-high").items][0] == "1"
