"""Seed data for subscriptions module.

Contains the default Basic, Pro and Premium plans.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SubscriptionPlan

PLAN_SEED_DATA = [
    {
        "name": "Basic",
        "description": "Satu kost dengan pencatatan penyewa",
        "price": Decimal("0"),
        "max_properties": 1,
        "max_rooms_per_property": 10,
        "features": {
            "tenant_data": True,
            "auto_billing": False,
            "billing_notifications": False,
            "financial_reports": "basic",
            "data_backup": False,
            "multi_user": False,
            "analytics": False,
            "support": "basic",
            "marketplace_listing": False,
        },
    },
    {
        "name": "Pro",
        "description": "Tagihan otomatis, laporan lengkap dan marketplace",
        "price": Decimal("149000"),
        "max_properties": 3,
        "max_rooms_per_property": 30,
        "features": {
            "tenant_data": True,
            "auto_billing": True,
            "billing_notifications": True,
            "financial_reports": "advanced",
            "data_backup": "weekly",
            "multi_user": False,
            "analytics": True,
            "support": "priority",
            "marketplace_listing": True,
        },
    },
    {
        "name": "Premium",
        "description": "Untuk pengelola banyak kost",
        "price": Decimal("299000"),
        "max_properties": 10,
        "max_rooms_per_property": 100,
        "features": {
            "tenant_data": True,
            "auto_billing": True,
            "billing_notifications": True,
            "financial_reports": "predictive",
            "data_backup": "daily",
            "multi_user": True,
            "analytics": "predictive",
            "support": "24/7",
            "marketplace_listing": True,
        },
    },
]


async def seed_subscription_plans(db: AsyncSession) -> int:
    """Seed the default plans into the database.

    Args:
        db: AsyncSession database session

    Returns:
        Number of plans created (0 if already seeded)
    """
    result = await db.execute(select(SubscriptionPlan).limit(1))
    if result.scalar_one_or_none() is not None:
        return 0  # Already seeded

    created_count = 0
    for plan_data in PLAN_SEED_DATA:
        db.add(SubscriptionPlan(**plan_data, is_active=True))
        created_count += 1

    await db.flush()
    return created_count
