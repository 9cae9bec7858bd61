"""Subscription API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from ...database import DB
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from . import crud, services
from .features import FeatureSet, get_feature_set
from .schemas import (
    FeaturesResponse,
    LimitsResponse,
    PlanResponse,
    SubscriptionResponse,
)

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.get("/plans", response_model=BaseResponse[list[PlanResponse]])
async def list_plans(db: DB):
    """Active plans, cheapest first."""
    plans = await crud.get_plans(db, is_active=True)
    return BaseResponse(
        success=True, data=[PlanResponse.model_validate(p) for p in plans]
    )


@router.get("/me", response_model=BaseResponse[SubscriptionResponse | None])
async def get_my_subscription(current_user: CurrentUser, db: DB):
    """The caller's active subscription, if any."""
    subscription = await crud.get_active_subscription(db, current_user.id)
    return BaseResponse(
        success=True,
        data=SubscriptionResponse.model_validate(subscription) if subscription else None,
    )


@router.get("/features", response_model=BaseResponse[FeaturesResponse])
async def get_features(feature_set: Annotated[FeatureSet, Depends(get_feature_set)]):
    """Resolved feature flags of the caller."""
    return BaseResponse(
        success=feature_set.error is None,
        message=feature_set.error,
        data=FeaturesResponse(
            features=feature_set.features,
            plan_name=feature_set.plan_name,
            error=feature_set.error,
        ),
    )


@router.get("/limits", response_model=BaseResponse[LimitsResponse])
async def get_limits(current_user: CurrentUser, db: DB):
    """Plan caps with current property and room usage."""
    overview = await services.get_limits_overview(db, current_user.id)
    return BaseResponse(success=True, data=overview)
