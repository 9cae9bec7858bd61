from datetime import date

from kostkelola_backend.modules.tenant_management.schemas import TenantCreate
from kostkelola_backend.modules.tenant_management.services import create_tenant


async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_register_and_me(client, register):
    user_id, headers = await register("pemilik@example.com")

    response = await client.get("/api/auth/me", headers=headers)

    data = response.json()["data"]
    assert data["id"] == user_id
    assert data["email"] == "pemilik@example.com"
    assert data["role"] == "owner"


async def test_register_duplicate_email(client, register):
    await register("pemilik@example.com")

    response = await client.post(
        "/api/auth/register",
        json={
            "email": "pemilik@example.com",
            "password": "another-password",
            "full_name": "Pemilik Lain",
        },
    )

    assert response.status_code == 409
    assert response.json()["success"] is False


async def test_staff_roles_cannot_self_register(client):
    response = await client.post(
        "/api/auth/register",
        json={
            "email": "root@example.com",
            "password": "s3cret-password",
            "full_name": "Root",
            "role": "superadmin",
        },
    )

    assert response.status_code == 400
    assert "role" in response.json()["message"]


async def test_wrong_password_counts_down(client, owner):
    response = await client.post(
        "/api/auth/login", json={"email": owner.email, "password": "wrong-password"}
    )

    assert response.status_code == 401
    assert "4 attempts remaining" in response.json()["message"]


async def test_account_locks_after_max_attempts(client, owner, login):
    for _ in range(5):
        await client.post(
            "/api/auth/login",
            json={"email": owner.email, "password": "wrong-password"},
        )

    response = await client.post(
        "/api/auth/login", json={"email": owner.email, "password": "s3cret-password"}
    )

    assert response.status_code == 401
    assert "locked" in response.json()["message"]


async def test_refresh_rotates_token(client, owner):
    login_response = await client.post(
        "/api/auth/login", json={"email": owner.email, "password": "s3cret-password"}
    )
    refresh_token = login_response.json()["data"]["refresh_token"]

    first = await client.post("/api/auth/refresh", json={"refresh_token": refresh_token})
    second = await client.post(
        "/api/auth/refresh", json={"refresh_token": refresh_token}
    )

    assert first.status_code == 200
    assert second.status_code == 401


async def test_missing_token_is_rejected(client):
    response = await client.get("/api/auth/me")

    # FastAPI answers 403 or 401 depending on its version
    assert response.status_code in (401, 403)
    assert response.json()["success"] is False


async def test_invalid_token_is_rejected(client):
    response = await client.get(
        "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401


async def test_validation_error_envelope(client):
    response = await client.post("/api/auth/login", json={"email": "not-an-email"})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["details"]["errors"]


async def test_tenant_registration_links_tenant_rows(db, client, owner, kost, register):
    property_obj, room = kost
    tenant = await create_tenant(
        db,
        property_obj.id,
        owner.id,
        TenantCreate(
            name="Sari",
            email="Sari@Example.com",
            end_date=date(2026, 12, 31),
            room_id=room.id,
        ),
    )

    user_id, _ = await register("sari@example.com", role="tenant")

    await db.refresh(tenant)
    assert tenant.user_id == user_id
