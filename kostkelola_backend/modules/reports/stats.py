"""Pure statistics over loaded rows."""

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from ...core.utils import INDONESIAN_MONTHS, months_between
from ..maintenance.models import MaintenancePriority, MaintenanceRequest, MaintenanceStatus
from ..payments.models import Payment, PaymentStatus
from ..property_management.models import Room, RoomStatus
from ..tenant_management.models import Tenant, TenantStatus
from .schemas import DetailedStats, MonthlyStats, OccupancyStats, RevenueStats

MAINTENANCE_COST_ESTIMATES = {
    MaintenancePriority.HIGH: Decimal("1000000"),
    MaintenancePriority.MEDIUM: Decimal("500000"),
    MaintenancePriority.LOW: Decimal("250000"),
}

ZERO = Decimal("0")


def _sum_amounts(payments: Iterable[Payment], status: PaymentStatus) -> Decimal:
    return sum((p.amount for p in payments if p.status == status), ZERO)


def occupancy_rate(rooms: Sequence[Room]) -> int:
    if not rooms:
        return 0
    occupied = sum(1 for r in rooms if r.status == RoomStatus.OCCUPIED)
    return round(occupied / len(rooms) * 100)


def revenue_stats(payments: Sequence[Payment], today: date) -> RevenueStats:
    """Revenue counts paid payments by their paid date."""
    month_start = today.replace(day=1)
    year_start = today.replace(month=1, day=1)
    this_month = [p for p in payments if p.paid_date and p.paid_date >= month_start]
    this_year = [p for p in payments if p.paid_date and p.paid_date >= year_start]
    return RevenueStats(
        total_revenue=_sum_amounts(payments, PaymentStatus.PAID),
        monthly_revenue=_sum_amounts(this_month, PaymentStatus.PAID),
        yearly_revenue=_sum_amounts(this_year, PaymentStatus.PAID),
        pending_payments=_sum_amounts(payments, PaymentStatus.PENDING),
        overdue_payments=_sum_amounts(payments, PaymentStatus.OVERDUE),
    )


def occupancy_stats(rooms: Sequence[Room], tenants: Sequence[Tenant]) -> OccupancyStats:
    return OccupancyStats(
        total_rooms=len(rooms),
        occupied_rooms=sum(1 for r in rooms if r.status == RoomStatus.OCCUPIED),
        occupancy_rate=occupancy_rate(rooms),
        total_tenants=sum(1 for t in tenants if t.status == TenantStatus.ACTIVE),
    )


def detailed_stats(
    rooms: Sequence[Room],
    tenants: Sequence[Tenant],
    payments: Sequence[Payment],
    requests: Sequence[MaintenanceRequest],
) -> DetailedStats:
    active = [t for t in tenants if t.status == TenantStatus.ACTIVE]
    inactive = [t for t in tenants if t.status == TenantStatus.INACTIVE]

    avg_room_price = (
        sum((r.price for r in rooms), ZERO) / len(rooms) if rooms else ZERO
    ).quantize(Decimal("0.01"))

    stays = [
        months_between(t.start_date, t.end_date)
        for t in active
        if t.start_date and t.end_date
    ]
    avg_stay = round(sum(stays) / len(active)) if active else 0

    turnover = round(len(inactive) / len(tenants) * 100) if tenants else 0

    paid = sum(1 for p in payments if p.status == PaymentStatus.PAID)
    collection_rate = round(paid / len(payments) * 100, 2) if payments else 0.0

    open_requests = sum(
        1
        for r in requests
        if r.status in (MaintenanceStatus.PENDING, MaintenanceStatus.IN_PROGRESS)
    )
    return DetailedStats(
        avg_room_price=avg_room_price,
        payment_collection_rate=collection_rate,
        avg_tenant_stay=avg_stay,
        tenant_turnover_rate=turnover,
        maintenance_requests_open=open_requests,
        maintenance_requests_total=len(requests),
        maintenance_costs=sum(
            (MAINTENANCE_COST_ESTIMATES[r.priority] for r in requests), ZERO
        ),
    )


def monthly_stats(
    payments: Sequence[Payment], rooms: Sequence[Room], start: date, end: date
) -> list[MonthlyStats]:
    """One row per calendar month from ``start`` to ``end`` inclusive."""
    rate = occupancy_rate(rooms)
    rows = []
    for offset in range(months_between(start, end) + 1):
        year, month = divmod(start.year * 12 + start.month - 1 + offset, 12)
        month_start = date(year, month + 1, 1)
        in_month = [
            p
            for p in payments
            if p.paid_date
            and (p.paid_date.year, p.paid_date.month) == (month_start.year, month_start.month)
        ]
        rows.append(
            MonthlyStats(
                month=month_start,
                label=f"{INDONESIAN_MONTHS[month_start.month - 1][:3]} {month_start.year}",
                revenue=_sum_amounts(in_month, PaymentStatus.PAID),
                pending=_sum_amounts(in_month, PaymentStatus.PENDING),
                overdue=_sum_amounts(in_month, PaymentStatus.OVERDUE),
                occupancy_rate=rate,
            )
        )
    return rows
