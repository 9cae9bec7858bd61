"""Subscription plans, feature flags and plan limits."""

from .features import FeatureSet, require_feature, resolve_features
from .limits import SubscriptionLimits, resolve_limits
from .models import Subscription, SubscriptionPlan, SubscriptionStatus

__all__ = [
    "FeatureSet",
    "Subscription",
    "SubscriptionLimits",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "require_feature",
    "resolve_features",
    "resolve_limits",
]
