import pytest

from kostkelola_backend.core.exceptions import LimitExceededError
from kostkelola_backend.modules.property_management.schemas import RoomCreate
from kostkelola_backend.modules.property_management.services import create_room
from kostkelola_backend.modules.subscriptions.features import (
    BASIC_FEATURES,
    FeatureSet,
    resolve_features,
)
from kostkelola_backend.modules.subscriptions.limits import (
    SubscriptionLimits,
    resolve_limits,
)


async def test_no_subscription_gets_basic_features(db, owner):
    features = await resolve_features(db, owner.id)

    assert features.plan_name is None
    assert features.error is None
    assert features.has_feature("marketplace_listing") is False
    assert features.get_feature_value("financial_reports") is False
    assert features.has_feature("tenant_data") is True


def test_tier_string_counts_as_enabled():
    features = FeatureSet(features={**BASIC_FEATURES, "financial_reports": "advanced"})

    assert features.has_feature("financial_reports") is True
    assert features.get_feature_value("financial_reports") == "advanced"
    assert features.has_feature("unknown_feature") is False


async def test_plan_features_override_basic_set(db, owner, subscribe):
    await subscribe(owner.id, "Pro")

    features = await resolve_features(db, owner.id)

    assert features.plan_name == "Pro"
    assert features.has_feature("marketplace_listing") is True
    assert features.get_feature_value("financial_reports") == "advanced"


def test_room_limit_is_exclusive():
    limits = SubscriptionLimits(max_properties=1, max_rooms_per_property=5)

    assert limits.can_add_room(4) is True
    assert limits.can_add_room(5) is False
    assert limits.can_add_property(0) is True
    assert limits.can_add_property(1) is False


async def test_defaults_without_subscription(db, owner):
    limits = await resolve_limits(db, owner.id)

    assert (limits.max_properties, limits.max_rooms_per_property) == (1, 1)


async def test_create_room_enforces_plan_cap(db, owner, kost):
    property_obj, _ = kost

    with pytest.raises(LimitExceededError) as exc_info:
        await create_room(db, property_obj.id, owner.id, RoomCreate(name="A2", price=1))
    assert exc_info.value.details["limit"] == 1


async def test_reassigning_cancels_previous_subscription(db, owner, subscribe):
    first = await subscribe(owner.id, "Basic")
    second = await subscribe(owner.id, "Premium")
    await db.refresh(first)

    assert first.status.value == "cancelled"
    assert second.status.value == "active"
    limits = await resolve_limits(db, owner.id)
    assert limits.max_rooms_per_property == 100


async def test_features_endpoint(client, owner, login, subscribe):
    await subscribe(owner.id, "Premium")
    headers = await login(owner.email)

    response = await client.get("/api/subscriptions/features", headers=headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["plan_name"] == "Premium"
    assert data["features"]["financial_reports"] == "predictive"


async def test_limits_endpoint_reports_usage(client, owner, kost, login):
    headers = await login(owner.email)

    response = await client.get("/api/subscriptions/limits", headers=headers)

    data = response.json()["data"]
    assert data["property_count"] == 1
    assert data["can_add_property"] is False
    assert data["properties"][0]["rooms"] == 1
    assert data["properties"][0]["can_add_room"] is False
