"""Backoffice API routes.

Support staff can read; plan, subscription and user changes need an admin.
"""

from fastapi import APIRouter, Query

from ...database import DB
from ..auth.dependencies import AdminUser, BackofficeUser
from ..auth.models import RoleSlug
from ..auth.schemas import UserResponse
from ..commons import BaseResponse
from ..notifications import services as notification_services
from ..notifications.schemas import BroadcastCreate, NotificationResponse
from ..realtime import Broker
from ..subscriptions import crud as subscription_crud
from ..subscriptions import services as subscription_services
from ..subscriptions.schemas import (
    PlanCreate,
    PlanResponse,
    PlanUpdate,
    SubscriptionAssign,
    SubscriptionResponse,
)
from . import services
from .schemas import PlatformStats, StaffUserCreate, UserAdminUpdate

router = APIRouter(prefix="/backoffice", tags=["Backoffice"])


@router.get("/stats", response_model=BaseResponse[PlatformStats])
async def get_stats(current_user: BackofficeUser, db: DB):
    """Platform-wide counts and paid revenue."""
    return BaseResponse(success=True, data=await services.get_platform_stats(db))


# ----- Users -----


@router.get("/users", response_model=BaseResponse[list[UserResponse]])
async def list_users(
    current_user: BackofficeUser,
    db: DB,
    search: str | None = Query(None),
    role: RoleSlug | None = Query(None),
):
    users = await services.list_users(db, search, role)
    return BaseResponse(
        success=True, data=[UserResponse.model_validate(u) for u in users]
    )


@router.post("/users", response_model=BaseResponse[UserResponse], status_code=201)
async def create_staff_user(data: StaffUserCreate, current_user: AdminUser, db: DB):
    """Create an account with any role, staff roles included."""
    user = await services.create_staff_user(db, data)
    return BaseResponse(
        success=True,
        message="User created successfully",
        data=UserResponse.model_validate(user),
    )


@router.patch("/users/{user_id}", response_model=BaseResponse[UserResponse])
async def update_user(
    user_id: int, data: UserAdminUpdate, current_user: AdminUser, db: DB
):
    user = await services.update_user(db, user_id, data, current_user.id)
    return BaseResponse(
        success=True,
        message="User updated successfully",
        data=UserResponse.model_validate(user),
    )


@router.post(
    "/users/{user_id}/subscription",
    response_model=BaseResponse[SubscriptionResponse],
    status_code=201,
)
async def assign_subscription(
    user_id: int, data: SubscriptionAssign, current_user: AdminUser, db: DB
):
    """Put a user on a plan; the previous active subscription is cancelled."""
    subscription = await subscription_services.assign_subscription(db, user_id, data)
    return BaseResponse(
        success=True,
        message="Subscription assigned",
        data=SubscriptionResponse.model_validate(subscription),
    )


# ----- Plans -----


@router.get("/plans", response_model=BaseResponse[list[PlanResponse]])
async def list_all_plans(current_user: BackofficeUser, db: DB):
    """All plans, inactive ones included."""
    plans = await subscription_crud.get_plans(db)
    return BaseResponse(success=True, data=[PlanResponse.model_validate(p) for p in plans])


@router.post("/plans", response_model=BaseResponse[PlanResponse], status_code=201)
async def create_plan(data: PlanCreate, current_user: AdminUser, db: DB):
    plan = await subscription_services.create_plan(db, data)
    return BaseResponse(
        success=True,
        message="Plan created successfully",
        data=PlanResponse.model_validate(plan),
    )


@router.put("/plans/{plan_id}", response_model=BaseResponse[PlanResponse])
async def update_plan(plan_id: int, data: PlanUpdate, current_user: AdminUser, db: DB):
    plan = await subscription_services.update_plan(db, plan_id, data)
    return BaseResponse(
        success=True,
        message="Plan updated successfully",
        data=PlanResponse.model_validate(plan),
    )


@router.delete("/plans/{plan_id}", response_model=BaseResponse[None])
async def delete_plan(plan_id: int, current_user: AdminUser, db: DB):
    await subscription_services.delete_plan(db, plan_id)
    return BaseResponse(success=True, message="Plan deleted successfully")


# ----- Notifications -----


@router.post(
    "/notifications",
    response_model=BaseResponse[NotificationResponse],
    status_code=201,
)
async def broadcast_notification(
    data: BroadcastCreate, current_user: BackofficeUser, db: DB, broker: Broker
):
    """Send a notification to one user or, without a target, to everyone."""
    notification = await notification_services.broadcast_notification(db, data, broker)
    return BaseResponse(
        success=True,
        message="Notification sent",
        data=NotificationResponse.model_validate(notification),
    )
