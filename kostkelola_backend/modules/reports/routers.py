"""Report API routes."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ...database import DB
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from ..subscriptions.features import FeatureSet, require_feature
from . import services
from .schemas import MonthlyStats, PropertyReport

router = APIRouter(prefix="/properties/{property_id}/reports", tags=["Reports"])

ReportFeatures = Annotated[FeatureSet, Depends(require_feature(services.REPORT_FEATURE))]


@router.get("", response_model=BaseResponse[PropertyReport])
async def get_property_report(
    property_id: int, current_user: CurrentUser, features: ReportFeatures, db: DB
):
    """Get property statistics at the caller's report tier."""
    report = await services.get_property_report(
        db, property_id, current_user.id, features
    )
    return BaseResponse(success=True, data=report)


@router.get("/monthly", response_model=BaseResponse[list[MonthlyStats]])
async def get_monthly_report(
    property_id: int,
    current_user: CurrentUser,
    features: ReportFeatures,
    db: DB,
    start: date = Query(...),
    end: date = Query(...),
):
    """Revenue, pending and overdue amounts per month of the range."""
    rows = await services.get_monthly_report(db, property_id, current_user.id, start, end)
    return BaseResponse(success=True, data=rows)
