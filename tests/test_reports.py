from datetime import date
from decimal import Decimal

import pytest

from kostkelola_backend.modules.payments.schemas import PaymentCreate
from kostkelola_backend.modules.payments.services import create_payment
from kostkelola_backend.modules.reports.stats import monthly_stats, revenue_stats
from kostkelola_backend.modules.tenant_management.schemas import TenantCreate
from kostkelola_backend.modules.tenant_management.services import create_tenant


@pytest.fixture
async def billed_kost(db, owner, kost):
    """The kost with one tenant, one paid and one pending payment."""
    property_obj, room = kost
    tenant = await create_tenant(
        db,
        property_obj.id,
        owner.id,
        TenantCreate(
            name="Budi",
            email="budi@example.com",
            start_date=date(2026, 1, 1),
            end_date=date(2026, 12, 31),
            room_id=room.id,
        ),
    )
    paid = await create_payment(
        db,
        property_obj.id,
        owner.id,
        PaymentCreate(
            tenant_id=tenant.id,
            amount=Decimal("1500000"),
            paid_date=date(2026, 10, 2),
            due_date=date(2026, 10, 5),
        ),
    )
    pending = await create_payment(
        db,
        property_obj.id,
        owner.id,
        PaymentCreate(
            tenant_id=tenant.id, amount=Decimal("1500000"), due_date=date(2026, 11, 5)
        ),
    )
    return property_obj, tenant, [paid, pending]


async def test_revenue_counts_paid_payments_by_paid_date(billed_kost):
    _, _, payments = billed_kost

    stats = revenue_stats(payments, today=date(2026, 10, 19))

    assert stats.total_revenue == Decimal("1500000")
    assert stats.monthly_revenue == Decimal("1500000")
    assert stats.pending_payments == Decimal("1500000")
    assert stats.overdue_payments == Decimal("0")

    next_month = revenue_stats(payments, today=date(2026, 11, 3))
    assert next_month.monthly_revenue == Decimal("0")
    assert next_month.yearly_revenue == Decimal("1500000")


async def test_monthly_rows_cover_every_month(billed_kost, kost):
    _, _, payments = billed_kost
    _, room = kost

    rows = monthly_stats(payments, [room], date(2026, 9, 1), date(2026, 11, 1))

    assert [row.label for row in rows] == ["Sep 2026", "Okt 2026", "Nov 2026"]
    assert [row.revenue for row in rows] == [
        Decimal("0"),
        Decimal("1500000"),
        Decimal("0"),
    ]


async def test_report_requires_financial_reports(client, owner, billed_kost, login):
    property_obj, _, _ = billed_kost

    response = await client.get(
        f"/api/properties/{property_obj.id}/reports", headers=await login(owner.email)
    )

    assert response.status_code == 403
    assert response.json()["details"]["feature"] == "financial_reports"


async def test_basic_tier_has_no_details(client, owner, billed_kost, login, subscribe):
    property_obj, _, _ = billed_kost
    await subscribe(owner.id, "Basic")

    response = await client.get(
        f"/api/properties/{property_obj.id}/reports", headers=await login(owner.email)
    )

    assert response.status_code == 200
    report = response.json()["data"]
    assert report["tier"] == "basic"
    assert report["details"] is None
    assert report["occupancy"]["occupancy_rate"] == 100
    assert report["occupancy"]["total_tenants"] == 1


async def test_advanced_tier_includes_details(
    client, owner, billed_kost, login, subscribe
):
    property_obj, _, _ = billed_kost
    await subscribe(owner.id, "Pro")
    headers = await login(owner.email)
    room_id = billed_kost[1].room_id
    await client.post(
        f"/api/properties/{property_obj.id}/maintenance",
        json={"room_id": room_id, "title": "Keran bocor", "priority": "high"},
        headers=headers,
    )

    response = await client.get(
        f"/api/properties/{property_obj.id}/reports", headers=headers
    )

    details = response.json()["data"]["details"]
    assert response.json()["data"]["tier"] == "advanced"
    assert details["payment_collection_rate"] == 50.0
    assert details["maintenance_requests_open"] == 1
    assert Decimal(details["maintenance_costs"]) == Decimal("1000000")


async def test_monthly_range_is_validated(client, owner, billed_kost, login, subscribe):
    property_obj, _, _ = billed_kost
    await subscribe(owner.id, "Basic")

    response = await client.get(
        f"/api/properties/{property_obj.id}/reports/monthly",
        params={"start": "2026-10-01", "end": "2026-01-01"},
        headers=await login(owner.email),
    )

    assert response.status_code == 400


async def test_maintenance_lifecycle(client, owner, billed_kost, login):
    property_obj, tenant, _ = billed_kost
    headers = await login(owner.email)

    created = await client.post(
        f"/api/properties/{property_obj.id}/maintenance",
        json={
            "room_id": tenant.room_id,
            "tenant_id": tenant.id,
            "title": "Lampu mati",
            "priority": "low",
        },
        headers=headers,
    )
    assert created.status_code == 201, created.text
    request = created.json()["data"]
    assert request["room_name"] == "A1"
    assert request["tenant_name"] == "Budi"
    assert request["status"] == "pending"
    assert request["reported_date"] == date.today().isoformat()

    updated = await client.put(
        f"/api/maintenance/{request['id']}",
        json={"status": "in-progress"},
        headers=headers,
    )
    assert updated.json()["data"]["status"] == "in-progress"

    listing = await client.get(
        f"/api/properties/{property_obj.id}/maintenance",
        params={"status": "in-progress"},
        headers=headers,
    )
    assert len(listing.json()["data"]) == 1

    deleted = await client.delete(f"/api/maintenance/{request['id']}", headers=headers)
    assert deleted.status_code == 200
