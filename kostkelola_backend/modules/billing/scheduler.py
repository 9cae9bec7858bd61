"""In-process cron for the auto-billing job."""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...config import Settings
from ...core.logging import get_logger, set_transaction_id
from ...core.logging.context import generate_transaction_id
from ..realtime import ChangeFeedBroker
from .mailer import Mailer
from .services import billing_today, run_auto_billing

logger = get_logger(__name__)

JOB_ID = "auto_billing"


def create_billing_scheduler(
    config: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    mailer: Mailer,
    broker: ChangeFeedBroker,
) -> AsyncIOScheduler:
    """Scheduler running the job on ``config.billing_cron``; not started."""

    async def billing_job() -> None:
        set_transaction_id(generate_transaction_id())
        async with session_factory() as session:
            summary = await run_auto_billing(
                session, mailer, broker, today=billing_today(config.billing_timezone)
            )
        logger.info(
            "Scheduled auto billing done",
            extra={"processed": summary.processed, "errors": len(summary.errors)},
        )

    scheduler = AsyncIOScheduler(timezone=config.billing_timezone)
    scheduler.add_job(
        billing_job,
        CronTrigger.from_crontab(config.billing_cron, timezone=config.billing_timezone),
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    return scheduler
