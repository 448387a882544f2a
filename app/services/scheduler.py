import logging

import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from app.config import settings
from app.db import SessionLocal
from app.errors import RefreshFetchError, RemoteWriteError
from app.services.exchange_rates import refresh_exchange_rates
from app.store import RecordStore

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def process_exchange_rate_refresh():
    """
    Scheduled exchange rate refresh.

    Failures are logged and the previous rates stay in place until the next run.
    """
    logger.info("Starting exchange rate refresh job")
    db = SessionLocal()

    try:
        rows = refresh_exchange_rates(RecordStore(db))
        logger.info(f"Exchange rate refresh job completed, {len(rows)} rates written")
    except RefreshFetchError as e:
        logger.error(f"Exchange rate fetch failed, keeping previous rates: {e}")
    except RemoteWriteError as e:
        logger.error(f"Exchange rate upsert failed, keeping previous rates: {e}")
    finally:
        db.close()


def start_scheduler():
    """Start the background scheduler."""
    if not settings.enable_scheduler:
        logger.info("Scheduler is disabled via configuration")
        return

    if scheduler.running:
        logger.info("Scheduler is already running")
        return

    trigger = CronTrigger(
        hour=settings.exchange_rate_refresh_hour,
        minute=0,
        timezone=pytz.UTC,
    )
    scheduler.add_job(
        process_exchange_rate_refresh,
        trigger=trigger,
        id="exchange_rate_refresh",
        name="Daily Exchange Rate Refresh",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(
        f"Scheduler started. Exchange rate refresh scheduled for "
        f"{settings.exchange_rate_refresh_hour}:00 UTC daily"
    )


def stop_scheduler():
    """Stop the background scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")


def run_refresh_job_now():
    """
    Run the refresh immediately for an operator.

    Unlike the scheduled job, errors propagate to the caller.
    """
    logger.info("Manually triggering exchange rate refresh")
    db = SessionLocal()
    try:
        return refresh_exchange_rates(RecordStore(db))
    finally:
        db.close()
