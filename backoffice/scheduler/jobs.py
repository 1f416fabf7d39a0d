"""Backoffice — Scheduler Jobs.

APScheduler interval job that pulls the exchange's daily quote snapshot.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from backoffice.config import settings
from backoffice.database import get_session
from backoffice.connectors.twse.client import TwseClient
from backoffice.ingestion.stock_day_ingester import run_stock_day_ingestion
from backoffice.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


async def stock_day_ingestion_job():
    """Fetch and upsert the latest STOCK_DAY_ALL snapshot."""
    logger.info("Scheduled stock ingestion starting...")
    sessions = get_session()
    session = next(sessions)
    client = TwseClient()
    try:
        result = await run_stock_day_ingestion(session=session, client=client)
        logger.info(
            f"Scheduled stock ingestion finished: {result.status}",
            extra={
                "trade_date": result.trade_date,
                "inserted": result.inserted,
                "updated": result.updated,
            },
        )
    except Exception as e:
        logger.error(f"Scheduled stock ingestion failed: {e}", exc_info=True)
    finally:
        await client.close()
        sessions.close()


def start_scheduler():
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler.add_job(
        stock_day_ingestion_job,
        "interval",
        minutes=settings.stock_fetch_interval_minutes,
        id="stock_day_ingestion",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=600,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started. Stock ingestion every {settings.stock_fetch_interval_minutes} min"
    )


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
