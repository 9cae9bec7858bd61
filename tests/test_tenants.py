from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from kostkelola_backend.core.exceptions import BusinessLogicError, NotFoundError
from kostkelola_backend.modules.payments.models import Payment, PaymentStatus
from kostkelola_backend.modules.payments.schemas import PaymentCreate
from kostkelola_backend.modules.payments.services import create_payment
from kostkelola_backend.modules.property_management.models import Room, RoomStatus
from kostkelola_backend.modules.property_management.schemas import (
    PropertyCreate,
    RoomCreate,
)
from kostkelola_backend.modules.property_management.services import (
    create_property,
    create_room,
)
from kostkelola_backend.modules.tenant_management.models import Tenant
from kostkelola_backend.modules.tenant_management.schemas import (
    TenantCreate,
    TenantUpdate,
)
from kostkelola_backend.modules.tenant_management.services import (
    create_tenant,
    delete_tenant,
    update_tenant,
)


@pytest.fixture
async def tenant(db, owner, kost):
    property_obj, room = kost
    return await create_tenant(
        db,
        property_obj.id,
        owner.id,
        TenantCreate(
            name="Budi Santoso",
            email="budi@example.com",
            start_date=date(2026, 1, 1),
            end_date=date(2026, 12, 31),
            room_id=room.id,
        ),
    )


async def test_create_with_room_occupies_it(db, kost, tenant):
    _, room = kost
    await db.refresh(room)

    assert tenant.room_id == room.id
    assert room.status == RoomStatus.OCCUPIED
    assert room.tenant_id == tenant.id


async def test_duplicate_email_in_property_is_rejected(db, owner, kost, tenant):
    property_obj, _ = kost

    with pytest.raises(BusinessLogicError):
        await create_tenant(
            db,
            property_obj.id,
            owner.id,
            TenantCreate(name="Budi Lain", email="BUDI@example.com"),
        )


async def test_delete_tenant_removes_payments_and_frees_room(db, owner, kost, tenant):
    property_obj, room = kost
    for paid_date in (date(2026, 1, 5), None):
        await create_payment(
            db,
            property_obj.id,
            owner.id,
            PaymentCreate(
                tenant_id=tenant.id, amount=Decimal("1500000"), paid_date=paid_date
            ),
        )

    await delete_tenant(db, tenant.id, owner.id)

    remaining = await db.scalar(
        select(func.count(Payment.id)).where(Payment.tenant_id == tenant.id)
    )
    assert remaining == 0
    assert await db.get(Tenant, tenant.id) is None
    fresh_room = (
        await db.execute(
            select(Room).where(Room.id == room.id).execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert fresh_room.status == RoomStatus.VACANT
    assert fresh_room.tenant_id is None


async def test_deactivating_tenant_vacates_room(db, owner, kost, tenant):
    _, room = kost

    updated = await update_tenant(
        db, tenant.id, owner.id, TenantUpdate(status="inactive")
    )
    await db.refresh(room)

    assert updated.room_id is None
    assert room.status == RoomStatus.VACANT


async def test_payment_defaults_follow_tenant(db, owner, kost, tenant):
    property_obj, room = kost

    payment = await create_payment(
        db,
        property_obj.id,
        owner.id,
        PaymentCreate(tenant_id=tenant.id, amount=Decimal("1500000")),
    )
    await db.refresh(tenant)

    assert payment.status == PaymentStatus.PENDING
    assert payment.due_date == tenant.end_date
    assert payment.room_id == room.id
    assert tenant.payment_status == PaymentStatus.PENDING


async def test_paid_date_marks_payment_and_tenant_paid(db, owner, kost, tenant):
    property_obj, _ = kost

    payment = await create_payment(
        db,
        property_obj.id,
        owner.id,
        PaymentCreate(
            tenant_id=tenant.id,
            amount=Decimal("1500000"),
            paid_date=date.today(),
            due_date=date.today() + timedelta(days=3),
        ),
    )
    await db.refresh(tenant)

    assert payment.status == PaymentStatus.PAID
    assert tenant.payment_status == PaymentStatus.PAID


async def test_tenant_api_lists_room_names(client, owner, tenant, login):
    headers = await login(owner.email)

    response = await client.get(
        f"/api/properties/{tenant.property_id}/tenants", headers=headers
    )

    assert response.status_code == 200
    rows = response.json()["data"]
    assert [(t["name"], t["room_name"]) for t in rows] == [("Budi Santoso", "A1")]


async def test_delete_tenant_api(client, owner, kost, tenant, login):
    _, room = kost
    headers = await login(owner.email)

    response = await client.delete(f"/api/tenants/{tenant.id}", headers=headers)
    assert response.status_code == 200

    room_response = await client.get(f"/api/rooms/{room.id}", headers=headers)
    assert room_response.json()["data"]["status"] == "vacant"
    assert room_response.json()["data"]["tenant_name"] is None


async def test_payment_api_round_trip(client, owner, tenant, login):
    headers = await login(owner.email)

    created = await client.post(
        f"/api/properties/{tenant.property_id}/payments",
        json={"tenant_id": tenant.id, "amount": "1500000"},
        headers=headers,
    )
    assert created.status_code == 201, created.text
    payment = created.json()["data"]
    assert payment["tenant_name"] == "Budi Santoso"
    assert payment["room_name"] == "A1"
    assert payment["status"] == "pending"

    updated = await client.put(
        f"/api/payments/{payment['id']}",
        json={"paid_date": "2026-10-19"},
        headers=headers,
    )
    assert updated.json()["data"]["status"] == "paid"

    tenant_response = await client.get(f"/api/tenants/{tenant.id}", headers=headers)
    assert tenant_response.json()["data"]["payment_status"] == "paid"

    listing = await client.get(
        f"/api/properties/{tenant.property_id}/payments",
        params={"status": "paid"},
        headers=headers,
    )
    assert [p["id"] for p in listing.json()["data"]] == [payment["id"]]


async def test_payment_for_foreign_tenant_is_not_found(
    client, owner, kost, tenant, make_user, login
):
    other = await make_user("other@example.com")
    headers = await login(other.email)
    created = await client.post(
        "/api/properties", json={"name": "Kost Lain"}, headers=headers
    )
    other_property = created.json()["data"]["id"]

    response = await client.post(
        f"/api/properties/{other_property}/payments",
        json={"tenant_id": tenant.id, "amount": "100000"},
        headers=headers,
    )

    assert response.status_code == 404


async def test_payment_cannot_reference_another_owners_room(
    db, owner, kost, tenant, make_user
):
    property_obj, _ = kost
    other = await make_user("other@example.com")
    other_property = await create_property(
        db, other.id, PropertyCreate(name="Kost Lain", city="Jakarta")
    )
    other_room = await create_room(
        db, other_property.id, other.id, RoomCreate(name="Z9", price=Decimal("900000"))
    )

    with pytest.raises(NotFoundError):
        await create_payment(
            db,
            property_obj.id,
            owner.id,
            PaymentCreate(
                tenant_id=tenant.id, room_id=other_room.id, amount=Decimal("1500000")
            ),
        )

    payments = await db.execute(select(func.count()).select_from(Payment))
    assert payments.scalar_one() == 0
