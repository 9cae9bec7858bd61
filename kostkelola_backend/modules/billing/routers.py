"""Auto-billing trigger route."""

from datetime import date

from fastapi import APIRouter, Query

from ...core.logging import get_logger
from ...database import DB
from ..realtime import Broker
from . import services
from .dependencies import BillingMailer, BillingTrigger
from .schemas import BillingSummary

logger = get_logger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing"])


@router.post("/auto-billing", response_model=BillingSummary)
async def trigger_auto_billing(
    caller: BillingTrigger,
    db: DB,
    mailer: BillingMailer,
    broker: Broker,
    today: date | None = Query(None, description="Run as of this date"),
):
    """Run the auto-billing job now.

    Authenticate with ``Authorization: Bearer <billing cron token>`` or an
    admin access token.
    """
    logger.info("Auto billing triggered", extra={"caller": caller})
    return await services.run_auto_billing(db, mailer, broker, today)
