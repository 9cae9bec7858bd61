"""Report services.

The ``financial_reports`` feature value picks the tier: ``basic`` (or
``True``) gets revenue and occupancy, ``advanced`` and ``predictive`` add the
detailed block.
"""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import ValidationError
from ...core.utils import months_between
from ..maintenance.crud import maintenance_crud
from ..payments.crud import payment_crud
from ..property_management.crud import room_crud
from ..property_management.services import get_owned_property
from ..subscriptions.features import FeatureSet
from ..tenant_management.crud import tenant_crud
from . import stats
from .schemas import MonthlyStats, PropertyReport

REPORT_FEATURE = "financial_reports"
BASIC_TIER = "basic"
DETAILED_TIERS = {"advanced", "predictive"}

MAX_REPORT_MONTHS = 36


def report_tier(features: FeatureSet) -> str:
    value = features.get_feature_value(REPORT_FEATURE)
    if isinstance(value, str) and value in DETAILED_TIERS:
        return value
    return BASIC_TIER


async def get_property_report(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    features: FeatureSet,
    today: date | None = None,
) -> PropertyReport:
    await get_owned_property(db, property_id, owner_id)
    today = today or date.today()
    tier = report_tier(features)

    rooms = await room_crud.get_by_property_id(db, property_id)
    tenants = await tenant_crud.get_by_property_id(db, property_id)
    payments = await payment_crud.get_by_property_id(db, property_id)

    report = PropertyReport(
        property_id=property_id,
        tier=tier,
        revenue=stats.revenue_stats(payments, today),
        occupancy=stats.occupancy_stats(rooms, tenants),
    )
    if tier in DETAILED_TIERS:
        requests = await maintenance_crud.get_by_property_id(db, property_id)
        report.details = stats.detailed_stats(rooms, tenants, payments, requests)
    return report


async def get_monthly_report(
    db: AsyncSession, property_id: int, owner_id: int, start: date, end: date
) -> list[MonthlyStats]:
    await get_owned_property(db, property_id, owner_id)
    if end < start:
        raise ValidationError("End date must not be before start date", field="end")
    if months_between(start, end) >= MAX_REPORT_MONTHS:
        raise ValidationError(
            f"Reports cover at most {MAX_REPORT_MONTHS} months", field="end"
        )

    rooms = await room_crud.get_by_property_id(db, property_id)
    payments = await payment_crud.get_by_property_id(db, property_id)
    return stats.monthly_stats(payments, rooms, start, end)
