"""Customers, admins and invitations share the ``users`` collection."""

from datetime import timedelta

import pytest

from core.exceptions import ConflictError, DocumentNotFoundError, InvitationError
from services.admins import AdminService
from services.customers import CustomerService
from services.invitations import InvitationService

DAY_MS = 24 * 60 * 60 * 1000


@pytest.fixture
def customers(store, service_kwargs):
    return CustomerService(store, **service_kwargs)


@pytest.fixture
def invitations(store, service_kwargs):
    return InvitationService(store, expiry_days=7, **service_kwargs)


@pytest.fixture
def admins(store, invitations, service_kwargs):
    return AdminService(store, invitations, **service_kwargs)


@pytest.fixture
async def users(store):
    await store.set("users", "c1", {"email": "a@example.com", "role": "customer", "totalSpent": "$120.00",
                                    "createdAt": "2024-01-01T00:00:00.000000Z"})
    await store.set("users", "c2", {"email": "b@example.com", "totalSpent": 900,
                                    "createdAt": "2024-02-01T00:00:00.000000Z"})
    await store.set("users", "c3", {"email": "c@example.com", "role": "customer", "totalSpent": "45",
                                    "createdAt": "2024-03-01T00:00:00.000000Z"})
    await store.set("users", "a1", {"email": "boss@example.com", "role": "admin"})


async def test_customers_exclude_admins_and_include_roleless(users, customers):
    assert [c.id for c in await customers.get_all()] == ["c3", "c2", "c1"]
    assert await customers.get_by_id("a1") is None
    assert (await customers.get_by_id("c2")).role == "customer"


async def test_high_value_ranks_parsed_spend(users, customers):
    ranked = await customers.get_high_value(limit=2)
    assert [c.id for c in ranked] == ["c2", "c1"]
    assert ranked[1].total_spent == 120.0


async def test_recent_customers(users, customers):
    assert [c.id for c in await customers.get_recent(limit=2)] == ["c3", "c2"]


async def test_update_customer_status(store, users, customers):
    await customers.update_status("c1", "suspended")
    assert (await customers.get_by_id("c1")).status == "suspended"
    assert "updatedAt" in (await store.get("users", "c1")).data


async def test_admins_only_lists_admins(users, admins):
    assert [a.id for a in await admins.get_all()] == ["a1"]
    assert await admins.get_by_id("c1") is None
    assert await admins.check_admin_status("a1") is True
    assert await admins.check_admin_status("c1") is False
    assert await admins.check_admin_status("nobody") is False


async def test_check_admin_status_never_raises(store, admins):
    store.failing = True
    assert await admins.check_admin_status("a1") is False


async def test_create_admin_defaults_permissions(store, admins):
    user_id = await admins.create({"email": "new@example.com"}, created_by="a1")
    data = (await store.get("users", user_id)).data
    assert data["role"] == "admin"
    assert data["permissions"] == ["view"]
    assert data["createdBy"] == "a1"


async def test_promote_keeps_existing_fields(store, users, admins):
    await admins.promote("c1", "a@example.com", "Ada")
    data = (await store.get("users", "c1")).data
    assert data["role"] == "admin"
    assert data["totalSpent"] == "$120.00"


async def test_admin_invitation_rejects_existing_user(users, admins):
    with pytest.raises(ConflictError):
        await admins.create_admin_invitation("a@example.com", "a1")


async def test_admin_invitation_issues_token(store, admins):
    invitation_id = await admins.create_admin_invitation("fresh@example.com", "a1")
    data = (await store.get("invitations", invitation_id)).data
    assert data["role"] == "admin"
    assert data["status"] == "pending"
    assert data["token"]


async def test_one_pending_invitation_per_email(invitations):
    await invitations.create("x@example.com", "admin", "a1")
    with pytest.raises(ConflictError):
        await invitations.create("x@example.com", "customer", "a1")


async def test_accept_grants_role(store, users, invitations):
    invitation_id = await invitations.create("a@example.com", "admin", "a1")
    token = (await store.get("invitations", invitation_id)).data["token"]

    assert await invitations.accept(token, "c1") is True
    assert (await store.get("users", "c1")).data["role"] == "admin"
    invitation = await invitations.get_by_id(invitation_id)
    assert invitation.status == "accepted"
    assert invitations.cache.peek() is None

    with pytest.raises(InvitationError):
        await invitations.accept(token, "c1")


async def test_accept_unknown_token(invitations):
    with pytest.raises(InvitationError):
        await invitations.accept("bogus", "c1")


async def test_expired_invitation_is_marked_and_rejected(store, users, invitations, clock):
    invitation_id = await invitations.create("a@example.com", "admin", "a1")
    token = (await store.get("invitations", invitation_id)).data["token"]
    clock.advance(8 * DAY_MS)

    with pytest.raises(InvitationError):
        await invitations.accept(token, "c1")
    assert (await invitations.get_by_id(invitation_id)).status == "expired"
    assert (await store.get("users", "c1")).data["role"] == "customer"


async def test_resend_issues_new_token_and_expiry(store, invitations, clock):
    invitation_id = await invitations.create("x@example.com", "admin", "a1")
    before = await invitations.get_by_id(invitation_id)
    clock.advance(DAY_MS)

    token = await invitations.resend(invitation_id)
    after = await invitations.get_by_id(invitation_id)
    assert token == after.token != before.token
    assert after.expires_at - before.expires_at == timedelta(days=1)
    assert after.status == "pending"


async def test_resend_missing_invitation(invitations):
    with pytest.raises(DocumentNotFoundError):
        await invitations.resend("nope")


async def test_pending_and_cancel(invitations):
    first = await invitations.create("x@example.com", "admin", "a1")
    await invitations.create("y@example.com", "admin", "a1")
    assert len(await invitations.get_pending()) == 2
    await invitations.cancel(first)
    assert [i.email for i in await invitations.get_pending()] == ["y@example.com"]
