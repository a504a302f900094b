"""Categories, marketing collections and payment methods."""

from datetime import datetime, timedelta, timezone

import pytest

from core.exceptions import ConflictError, ValidationError
from models.marketing import Coupon
from models.payments import PaymentMethod, mask_secret
from services.categories import DEFAULT_CATEGORIES, CategoryService
from services.marketing import MarketingService
from services.payments import PaymentService


@pytest.fixture
def categories(store, service_kwargs):
    return CategoryService(store, **service_kwargs)


@pytest.fixture
def marketing(store, service_kwargs):
    return MarketingService(store, **service_kwargs)


@pytest.fixture
def payments(store, service_kwargs):
    return PaymentService(store, **service_kwargs)


# Categories

async def test_categories_fall_back_to_defaults(categories):
    result = await categories.get_all()
    assert [c.name for c in result] == ["T-Shirts", "Men's Shorts", "Joggers", "Hoodies"]
    assert categories.cache.peek() is None
    assert [c.name for c in await categories.get_available()] == ["T-Shirts"]


async def test_category_lookup_by_numeric_id(store, categories):
    await store.set("categories", "7", {"id": 7, "name": "Caps", "status": "available", "order": 1})
    assert (await categories.get_by_id(7)).name == "Caps"
    assert (await categories.get_by_id("3")).name == "Joggers"
    assert await categories.get_by_id(99) is None


async def test_create_category_assigns_next_id(store, categories):
    await store.set("categories", "4", {"id": 4, "name": "Hoodies", "order": 4})
    new_id = await categories.create({"name": "Caps"})
    assert new_id == "5"
    data = (await store.get("categories", "5")).data
    assert data["productCount"] == 0
    assert data["status"] == "coming-soon"


async def test_seed_replaces_all_categories(store, categories):
    await store.set("categories", "old", {"id": 42, "name": "Old"})
    assert await categories.seed() == len(DEFAULT_CATEGORIES)
    stored = sorted(c.id for c in await categories.get_all())
    assert stored == ["1", "2", "3", "4"]
    assert await store.get("categories", "old") is None


async def test_category_order_ascending(store, categories):
    await store.set("categories", "1", {"id": 1, "name": "B", "order": 2})
    await store.set("categories", "2", {"id": 2, "name": "A", "order": 1})
    assert [c.name for c in await categories.get_all()] == ["A", "B"]


# Marketing

async def test_coupon_codes_are_unique(store, marketing):
    coupon_id = await marketing.coupons.create({"code": "SAVE10", "type": "percentage", "value": 10})
    assert (await store.get("coupons", coupon_id)).data["usedCount"] == 0
    with pytest.raises(ConflictError):
        await marketing.coupons.create({"code": "SAVE10", "type": "fixed", "value": 5})

    other = await marketing.coupons.create({"code": "FREESHIP", "type": "free_shipping", "value": 0})
    with pytest.raises(ConflictError):
        await marketing.coupons.update(other, {"code": "SAVE10"})
    await marketing.coupons.update(coupon_id, {"code": "SAVE10", "value": 15})
    assert (await marketing.coupons.get_by_code("SAVE10")).value == 15


def test_coupon_redeemable_rules():
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    coupon = Coupon(id="c", code="X", is_active=True, min_purchase=50, max_uses=2, used_count=1,
                    valid_from=now - timedelta(days=1), valid_to=now + timedelta(days=1))
    assert coupon.is_redeemable(now, 60)
    assert not coupon.is_redeemable(now, 40)
    assert not coupon.is_redeemable(now + timedelta(days=2), 60)
    assert not coupon.model_copy(update={"used_count": 2}).is_redeemable(now, 60)
    assert not coupon.model_copy(update={"is_active": False}).is_redeemable(now, 60)


async def test_active_banners_by_position(store, marketing):
    await store.set("banners", "a", {"title": "A", "isActive": True, "position": "home_hero"})
    await store.set("banners", "b", {"title": "B", "isActive": True, "position": "sidebar"})
    await store.set("banners", "c", {"title": "C", "isActive": False, "position": "sidebar"})
    assert {b.id for b in await marketing.get_active_banners()} == {"a", "b"}
    assert [b.id for b in await marketing.get_active_banners("sidebar")] == ["b"]


async def test_marketing_slots_are_independent(store, marketing):
    await marketing.campaigns.create({"name": "Launch", "subject": "Hello"})
    await marketing.banners.get_all()
    await marketing.campaigns.get_all()
    await marketing.coupons.create({"code": "NEW", "type": "fixed", "value": 5})
    assert marketing.banners.cache.peek() is not None
    assert marketing.campaigns.cache.peek() is not None
    marketing.clear_cache()
    assert marketing.banners.cache.peek() is None


# Payments

def test_mask_secret():
    assert mask_secret("sk_live_12345678") == "************5678"
    assert mask_secret("abcd") == "****"
    assert mask_secret(None) is None
    assert mask_secret("") == ""


async def test_payment_method_defaults_currencies(store, payments):
    method_id = await payments.create({"name": "Cards", "provider": "square", "apiKey": "pk_123456"})
    data = (await store.get("paymentMethods", method_id)).data
    assert data["supportedCurrencies"] == ["USD", "CAD", "GBP"]


async def test_unknown_provider_is_rejected(payments):
    with pytest.raises(ValidationError):
        await payments.create({"name": "Coins", "provider": "doubloons"})


async def test_toggle_and_public_view(store, payments):
    method_id = await payments.create({"name": "Cards", "provider": "stripe", "secretKey": "sk_test_abcdef"})
    await payments.toggle(method_id, False)
    method = await payments.get_by_id(method_id)
    assert method.is_active is False
    view = method.public_view()
    assert view["secretKey"] == "**********cdef"
    assert view["apiKey"] is None


def test_provider_catalogue():
    from services.payments import find_provider
    assert find_provider("bank-transfer").name == "Bank Transfer"
    assert find_provider("nope") is None
    assert PaymentMethod(id="m").mode == "test"
