import pytest

from kostkelola_backend.modules.auth.models import RoleSlug


@pytest.fixture
async def admin_headers(make_user, login):
    await make_user("admin@example.com", role=RoleSlug.ADMIN)
    return await login("admin@example.com")


@pytest.fixture
async def support_headers(make_user, login):
    await make_user("support@example.com", role=RoleSlug.SUPPORT)
    return await login("support@example.com")


async def test_stats_for_staff_only(client, owner, kost, admin_headers, login):
    response = await client.get("/api/backoffice/stats", headers=admin_headers)

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["total_owners"] == 1
    assert stats["total_properties"] == 1

    forbidden = await client.get(
        "/api/backoffice/stats", headers=await login(owner.email)
    )
    assert forbidden.status_code == 403


async def test_support_can_read_but_not_manage(client, support_headers):
    listing = await client.get(
        "/api/backoffice/users", params={"role": "support"}, headers=support_headers
    )
    assert [u["email"] for u in listing.json()["data"]] == ["support@example.com"]

    response = await client.post(
        "/api/backoffice/users",
        json={
            "email": "new@example.com",
            "password": "s3cret-password",
            "full_name": "New Staff",
        },
        headers=support_headers,
    )
    assert response.status_code == 403


async def test_admin_creates_staff_user(client, admin_headers):
    response = await client.post(
        "/api/backoffice/users",
        json={
            "email": "cs@example.com",
            "password": "s3cret-password",
            "full_name": "Customer Service",
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["data"]["role"] == "support"


async def test_deactivated_user_cannot_login(client, owner, admin_headers):
    response = await client.patch(
        f"/api/backoffice/users/{owner.id}",
        json={"is_active": False},
        headers=admin_headers,
    )
    assert response.json()["data"]["is_active"] is False

    login = await client.post(
        "/api/auth/login", json={"email": owner.email, "password": "s3cret-password"}
    )
    assert login.status_code == 401


async def test_admin_cannot_demote_self(client, admin_headers):
    me = await client.get("/api/auth/me", headers=admin_headers)

    response = await client.patch(
        f"/api/backoffice/users/{me.json()['data']['id']}",
        json={"role": "support"},
        headers=admin_headers,
    )

    assert response.status_code == 409


async def test_assign_subscription_raises_limits(
    client, owner, plans, admin_headers, login
):
    response = await client.post(
        f"/api/backoffice/users/{owner.id}/subscription",
        json={"plan_id": plans["Premium"].id, "period_months": 12},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["plan"]["name"] == "Premium"

    limits = await client.get(
        "/api/subscriptions/limits", headers=await login(owner.email)
    )
    assert limits.json()["data"]["max_properties"] == 10


async def test_plan_lifecycle(client, owner, plans, admin_headers, subscribe):
    created = await client.post(
        "/api/backoffice/plans",
        json={
            "name": "Starter",
            "price": "49000",
            "max_properties": 1,
            "max_rooms_per_property": 5,
            "features": {"financial_reports": "basic"},
        },
        headers=admin_headers,
    )
    assert created.status_code == 201
    plan_id = created.json()["data"]["id"]

    updated = await client.put(
        f"/api/backoffice/plans/{plan_id}",
        json={"max_rooms_per_property": 8},
        headers=admin_headers,
    )
    assert updated.json()["data"]["max_rooms_per_property"] == 8

    deleted = await client.delete(
        f"/api/backoffice/plans/{plan_id}", headers=admin_headers
    )
    assert deleted.status_code == 200

    await subscribe(owner.id, "Pro")
    in_use = await client.delete(
        f"/api/backoffice/plans/{plans['Pro'].id}", headers=admin_headers
    )
    assert in_use.status_code == 409
