"""Feature-flag resolution from the caller's subscription plan."""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import FeatureNotAvailableError
from ...core.logging import get_logger
from ...database import DB
from ..auth.dependencies import CurrentUser
from . import crud

logger = get_logger(__name__)

FEATURES_ERROR = "Failed to load subscription features"

# What a user without an active subscription gets.
BASIC_FEATURES: dict[str, Any] = {
    "tenant_data": True,
    "auto_billing": False,
    "billing_notifications": False,
    "financial_reports": False,
    "data_backup": False,
    "multi_user": False,
    "analytics": False,
    "support": "basic",
    "marketplace_listing": False,
}


@dataclass
class FeatureSet:
    """Resolved features of one user."""

    features: dict[str, Any] = field(default_factory=lambda: dict(BASIC_FEATURES))
    plan_name: str | None = None
    error: str | None = None

    def has_feature(self, name: str) -> bool:
        """True unless the value is False or missing. Tier strings count as on."""
        value = self.features.get(name)
        return value is not False and value is not None

    def get_feature_value(self, name: str) -> Any:
        return self.features.get(name)


async def resolve_features(db: AsyncSession, user_id: int) -> FeatureSet:
    """Load the feature map of the user's newest active subscription.

    Missing plan keys fall back to the basic set; a failed lookup yields the
    basic set with ``error`` filled in.
    """
    try:
        subscription = await crud.get_active_subscription(db, user_id)
    except SQLAlchemyError:
        logger.exception("Feature lookup failed", extra={"user_id": user_id})
        return FeatureSet(error=FEATURES_ERROR)

    if subscription is None or subscription.plan is None:
        return FeatureSet()

    features = dict(BASIC_FEATURES)
    features.update(subscription.plan.features or {})
    return FeatureSet(features=features, plan_name=subscription.plan.name)


def require_feature(name: str):
    """Dependency factory that rejects callers whose plan lacks ``name``.

    Usage:
        @router.get("/stats", dependencies=[Depends(require_feature("financial_reports"))])
    """

    async def feature_checker(current_user: CurrentUser, db: DB) -> FeatureSet:
        feature_set = await resolve_features(db, current_user.id)
        if not feature_set.has_feature(name):
            raise FeatureNotAvailableError(name)
        return feature_set

    return feature_checker


async def get_feature_set(current_user: CurrentUser, db: DB) -> FeatureSet:
    """Dependency returning the caller's features without gating."""
    return await resolve_features(db, current_user.id)
