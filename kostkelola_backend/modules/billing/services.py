"""Auto-billing job.

For every active tenant whose lease ends within the owner's reminder window
the job records one pending payment plus an in-app notification, then emails
the tenant and the property contact. The payment's ``billing_key`` makes the
job idempotent per tenant and lease end, so it can run any number of times a
day.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...core.exceptions import ExternalServiceError
from ...core.logging import get_logger
from ...core.utils import format_currency_idr, format_long_date_id, utc_now
from ..notifications.models import Notification
from ..notifications.services import create_payment_reminder, publish_notification
from ..payments.crud import payment_crud
from ..payments.models import Payment, PaymentStatus
from ..property_management.models import Property, Room
from ..realtime import ChangeEventType, ChangeFeedBroker, Channel
from ..settings import DEFAULT_PAYMENT_REMINDER_DAYS
from ..settings.crud import get_settings_for_users
from ..tenant_management.models import Tenant, TenantStatus
from .mailer import Mailer
from .schemas import BilledTenant, BillingError, BillingSummary

logger = get_logger(__name__)

REMINDER_TITLE = "Pengingat Pembayaran"
NO_TENANTS_MESSAGE = "No active tenants found to process"


@dataclass
class BillingCandidate:
    tenant: Tenant
    room: Room | None
    property: Property


@dataclass
class PendingReminder:
    candidate: BillingCandidate
    payment: Payment


def billing_key(tenant_id: int, due_date: date) -> str:
    return f"{tenant_id}:{due_date.isoformat()}"


def billing_today(timezone_name: str, now: datetime | None = None) -> date:
    """The calendar date in the timezone the billing cron runs in."""
    now = now or datetime.now(ZoneInfo(timezone_name))
    return now.astimezone(ZoneInfo(timezone_name)).date()


def in_reminder_window(due_date: date, reminder_days: int, today: date) -> bool:
    """``due_date - reminder_days <= today < due_date``."""
    return due_date - timedelta(days=reminder_days) <= today < due_date


def reminder_message(room_name: str, due_date: date) -> str:
    return (
        f"Pembayaran untuk Kamar {room_name} akan jatuh tempo pada "
        f"{format_long_date_id(due_date)}"
    )


def tenant_email_body(tenant_name: str, room_name: str, amount, due_date: date) -> str:
    return (
        f"Yth. {tenant_name},\n\n"
        f"Ini adalah pengingat pembayaran untuk Kamar {room_name}.\n"
        f"Pembayaran sebesar {format_currency_idr(amount)} akan jatuh tempo pada "
        f"{format_long_date_id(due_date)}.\n\n"
        "Mohon segera lakukan pembayaran sebelum tanggal jatuh tempo.\n\n"
        "Terima kasih.\n"
    )


def owner_email_body(tenant_name: str, room_name: str, amount, due_date: date) -> str:
    return (
        f"Pembayaran untuk Kamar {room_name} akan jatuh tempo pada "
        f"{format_long_date_id(due_date)}.\n"
        f"Penyewa: {tenant_name}\n"
        f"Jumlah: {format_currency_idr(amount)}\n"
    )


async def _load_candidates(db: AsyncSession) -> list[BillingCandidate]:
    result = await db.execute(
        select(Tenant, Room, Property)
        .join(Property, Property.id == Tenant.property_id)
        .outerjoin(Room, Room.id == Tenant.room_id)
        .where(Tenant.status == TenantStatus.ACTIVE)
        .order_by(Tenant.id)
    )
    return [BillingCandidate(tenant, room, prop) for tenant, room, prop in result.all()]


async def _record_reminder(
    db: AsyncSession, candidate: BillingCandidate, key: str
) -> tuple[Payment, Notification]:
    """Insert the payment and its notification inside one savepoint."""
    tenant, room, prop = candidate.tenant, candidate.room, candidate.property
    async with db.begin_nested():
        payment = await payment_crud.create(
            db,
            {
                "tenant_id": tenant.id,
                "room_id": room.id,
                "property_id": prop.id,
                "amount": room.price,
                "paid_date": None,
                "due_date": tenant.end_date,
                "status": PaymentStatus.PENDING,
                "billing_key": key,
            },
        )
        # Tenants without a portal account are reported to the owner instead
        notification = await create_payment_reminder(
            db,
            user_id=tenant.user_id or prop.owner_id,
            property_id=prop.id,
            title=REMINDER_TITLE,
            message=reminder_message(room.name, tenant.end_date),
        )
    return payment, notification


async def _send_reminder_emails(mailer: Mailer, reminder: PendingReminder) -> None:
    tenant = reminder.candidate.tenant
    prop = reminder.candidate.property
    room_name = reminder.candidate.room.name
    payment = reminder.payment
    subject = f"{REMINDER_TITLE} - Kamar {room_name}"

    if tenant.email:
        await mailer.send(
            tenant.email,
            subject,
            tenant_email_body(tenant.name, room_name, payment.amount, payment.due_date),
        )
    if prop.email:
        await mailer.send(
            prop.email,
            subject,
            owner_email_body(tenant.name, room_name, payment.amount, payment.due_date),
        )


async def run_auto_billing(
    db: AsyncSession,
    mailer: Mailer,
    broker: ChangeFeedBroker | None = None,
    today: date | None = None,
) -> BillingSummary:
    """Create due-soon payments and send their reminders.

    Per-tenant failures are collected in ``errors``; they never abort the
    batch. Emails go out only after the rows commit, and an existing payment
    whose reminder was never delivered is retried on the next run.

    ``reminder_sent_at`` covers both emails of a payment. It is stamped only
    when the tenant and the property contact were both mailed, so a retry after
    a failed owner email sends the tenant email again.

    ``today`` defaults to the current date in ``billing_timezone``.
    """
    today = today or billing_today(settings.billing_timezone)
    candidates = await _load_candidates(db)
    if not candidates:
        return BillingSummary(processed=0, message=NO_TENANTS_MESSAGE)

    owner_settings = await get_settings_for_users(
        db, {c.property.owner_id for c in candidates}
    )

    summary = BillingSummary()
    created: list[tuple[Payment, Notification, int]] = []
    reminders: list[PendingReminder] = []

    for candidate in candidates:
        tenant, room = candidate.tenant, candidate.room
        prefs = owner_settings.get(candidate.property.owner_id)
        if prefs is not None and not prefs.payment_reminders:
            continue
        if tenant.end_date is None or room is None or not room.price:
            continue

        reminder_days = (
            prefs.payment_reminder_days if prefs else DEFAULT_PAYMENT_REMINDER_DAYS
        )
        if not in_reminder_window(tenant.end_date, reminder_days, today):
            continue

        key = billing_key(tenant.id, tenant.end_date)
        try:
            existing = await payment_crud.get_by_billing_key(db, key)
            if existing is not None:
                if existing.reminder_sent_at is None:
                    reminders.append(PendingReminder(candidate, existing))
                continue

            payment, notification = await _record_reminder(db, candidate, key)
        except SQLAlchemyError as e:
            logger.warning(
                "Auto billing failed for tenant",
                extra={"tenant_id": tenant.id, "error": str(e)},
            )
            summary.errors.append(BillingError(tenant_id=tenant.id, error=str(e)))
            continue

        created.append((payment, notification, candidate.property.owner_id))
        reminders.append(PendingReminder(candidate, payment))
        summary.tenants.append(
            BilledTenant(tenant_id=tenant.id, email=tenant.email, due_date=tenant.end_date)
        )

    await db.commit()

    if broker is not None:
        for payment, notification, owner_id in created:
            await broker.publish_row(
                Channel.PROPERTIES, ChangeEventType.INSERT, payment, audience=[owner_id]
            )
            await publish_notification(broker, ChangeEventType.INSERT, notification)

    for reminder in reminders:
        try:
            await _send_reminder_emails(mailer, reminder)
        except ExternalServiceError as e:
            summary.errors.append(
                BillingError(tenant_id=reminder.candidate.tenant.id, error=e.message)
            )
            continue
        reminder.payment.reminder_sent_at = utc_now()

    await db.commit()

    summary.processed = len(summary.tenants)
    summary.message = (
        f"Processed {summary.processed} tenants with {len(summary.errors)} errors"
    )
    logger.info(
        "Auto billing finished",
        extra={
            "processed": summary.processed,
            "errors": len(summary.errors),
            "emails_attempted": len(reminders),
        },
    )
    return summary
