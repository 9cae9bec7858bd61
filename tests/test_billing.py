from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from kostkelola_backend.modules.auth.models import RoleSlug
from kostkelola_backend.modules.billing.services import (
    REMINDER_TITLE,
    billing_key,
    billing_today,
    in_reminder_window,
    run_auto_billing,
)
from kostkelola_backend.modules.notifications.models import (
    Notification,
    NotificationStatus,
)
from kostkelola_backend.modules.payments.models import Payment, PaymentStatus
from kostkelola_backend.modules.settings.crud import create_default_settings
from kostkelola_backend.modules.tenant_management.schemas import TenantCreate
from kostkelola_backend.modules.tenant_management.services import create_tenant

TODAY = date(2026, 10, 19)


@pytest.fixture
def lease_tenant(db, owner, kost):
    """Create the kost's tenant with a lease ending ``days`` after TODAY."""

    async def _lease_tenant(days: int, email: str = "budi@example.com"):
        property_obj, room = kost
        return await create_tenant(
            db,
            property_obj.id,
            owner.id,
            TenantCreate(
                name="Budi Santoso",
                email=email,
                start_date=TODAY - timedelta(days=30),
                end_date=TODAY + timedelta(days=days),
                room_id=room.id,
            ),
        )

    return _lease_tenant


async def _payments(db) -> list[Payment]:
    result = await db.execute(
        select(Payment).execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def _notifications(db) -> list[Notification]:
    result = await db.execute(select(Notification))
    return list(result.scalars().all())


def test_reminder_window_bounds():
    due = date(2026, 10, 24)

    assert in_reminder_window(due, 5, date(2026, 10, 19))
    assert not in_reminder_window(due, 5, date(2026, 10, 18))
    assert in_reminder_window(due, 5, date(2026, 10, 23))
    assert not in_reminder_window(due, 5, due)


async def test_tenant_inside_window_gets_one_pending_payment(
    db, owner, lease_tenant, broker, mailer
):
    tenant = await lease_tenant(days=5)

    summary = await run_auto_billing(db, mailer, broker, today=TODAY)

    assert summary.processed == 1
    assert summary.errors == []
    payments = await _payments(db)
    assert len(payments) == 1
    payment = payments[0]
    assert payment.status == PaymentStatus.PENDING
    assert payment.amount == Decimal("1500000")
    assert payment.due_date == tenant.end_date
    assert payment.billing_key == billing_key(tenant.id, tenant.end_date)
    assert payment.reminder_sent_at is not None

    notifications = await _notifications(db)
    assert len(notifications) == 1
    assert notifications[0].status == NotificationStatus.UNREAD
    assert notifications[0].title == REMINDER_TITLE
    # No portal account, so the owner is told
    assert notifications[0].target_user_id == owner.id

    recipients = sorted(to for to, _, _ in mailer.sent)
    assert recipients == ["budi@example.com", "melati@example.com"]
    assert "Rp 1.500.000,00" in mailer.sent[0][2]


async def test_tenant_outside_window_is_skipped(db, lease_tenant, mailer):
    await lease_tenant(days=6)

    summary = await run_auto_billing(db, mailer, today=TODAY)

    assert summary.processed == 0
    assert await _payments(db) == []
    assert await _notifications(db) == []
    assert mailer.sent == []


async def test_second_run_creates_no_duplicate(db, lease_tenant, mailer):
    await lease_tenant(days=5)

    await run_auto_billing(db, mailer, today=TODAY)
    summary = await run_auto_billing(db, mailer, today=TODAY + timedelta(days=1))

    assert summary.processed == 0
    assert len(await _payments(db)) == 1
    assert len(await _notifications(db)) == 1
    assert len(mailer.sent) == 2


async def test_failed_email_is_retried_next_run(db, lease_tenant, mailer):
    await lease_tenant(days=3)
    mailer.fail = True

    first = await run_auto_billing(db, mailer, today=TODAY)

    assert first.processed == 1
    assert len(first.errors) == 1
    assert (await _payments(db))[0].reminder_sent_at is None

    mailer.fail = False
    second = await run_auto_billing(db, mailer, today=TODAY)

    assert second.processed == 0
    assert second.errors == []
    assert len(mailer.sent) == 2
    payments = await _payments(db)
    assert len(payments) == 1
    assert payments[0].reminder_sent_at is not None


async def test_owner_email_failure_resends_tenant_email(db, lease_tenant, mailer):
    await lease_tenant(days=3)
    mailer.fail_for = {"melati@example.com"}

    first = await run_auto_billing(db, mailer, today=TODAY)

    assert len(first.errors) == 1
    assert (await _payments(db))[0].reminder_sent_at is None

    mailer.fail_for = set()
    await run_auto_billing(db, mailer, today=TODAY)

    recipients = [to for to, _, _ in mailer.sent]
    assert recipients == ["budi@example.com", "budi@example.com", "melati@example.com"]
    assert (await _payments(db))[0].reminder_sent_at is not None


def test_billing_today_uses_billing_timezone():
    # 20:00 UTC is already the next morning in Jakarta
    now = datetime(2026, 10, 18, 20, 0, tzinfo=timezone.utc)

    assert billing_today("Asia/Jakarta", now) == date(2026, 10, 19)
    assert billing_today("UTC", now) == date(2026, 10, 18)


async def test_owner_with_reminders_off_is_skipped(db, owner, lease_tenant, mailer):
    await lease_tenant(days=2)
    prefs = await create_default_settings(db, owner.id)
    prefs.payment_reminders = False
    await db.commit()

    summary = await run_auto_billing(db, mailer, today=TODAY)

    assert summary.processed == 0
    assert await _payments(db) == []


async def test_owner_reminder_days_widen_window(db, owner, lease_tenant, mailer):
    await lease_tenant(days=10)
    prefs = await create_default_settings(db, owner.id)
    prefs.payment_reminder_days = 10
    await db.commit()

    summary = await run_auto_billing(db, mailer, today=TODAY)

    assert summary.processed == 1


async def test_portal_tenant_receives_notification(
    db, make_user, lease_tenant, mailer
):
    portal_user = await make_user("budi@example.com", role=RoleSlug.TENANT)
    tenant = await lease_tenant(days=1)
    assert tenant.user_id == portal_user.id

    await run_auto_billing(db, mailer, today=TODAY)

    notifications = await _notifications(db)
    assert [n.target_user_id for n in notifications] == [portal_user.id]


async def test_no_active_tenants(db, owner, mailer):
    summary = await run_auto_billing(db, mailer, today=TODAY)

    assert summary.success is True
    assert summary.processed == 0
    assert summary.message == "No active tenants found to process"


async def test_trigger_requires_credentials(client):
    response = await client.post("/api/billing/auto-billing")

    assert response.status_code == 401
    assert response.json()["success"] is False


async def test_trigger_rejects_owner_token(client, owner, login):
    headers = await login(owner.email)

    response = await client.post("/api/billing/auto-billing", headers=headers)

    assert response.status_code == 401


async def test_trigger_with_cron_token(client, lease_tenant, mailer):
    await lease_tenant(days=4)

    response = await client.post(
        "/api/billing/auto-billing",
        params={"today": TODAY.isoformat()},
        headers={"Authorization": "Bearer test-billing-token"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["processed"] == 1
    assert body["message"] == "Processed 1 tenants with 0 errors"
    assert len(mailer.sent) == 2


async def test_trigger_with_admin_token(client, make_user, login):
    await make_user("admin@example.com", role=RoleSlug.ADMIN)
    headers = await login("admin@example.com")

    response = await client.post("/api/billing/auto-billing", headers=headers)

    assert response.status_code == 200
