"""Backoffice — Daily Quote Ingestion.

One run:
  fetch snapshot → pick partition date → load partition → reconcile → commit

Load, reconcile and commit share one session transaction, so a failed commit
leaves the partition exactly as it was. A feed failure aborts before any
write. Rows that disappear from the feed are left alone; nothing is deleted.
"""

import asyncio
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from backoffice.connectors.twse.client import TwseAPIError, TwseClient
from backoffice.connectors.twse.transformer import apply_record, new_row
from backoffice.models.stock_models import (
    ExchangeReportStockDayAll,
    IngestionResult,
    StockDayRecord,
)
from backoffice.core.logging import get_logger

logger = get_logger("ingestion.stock_day")

# At most one run at a time per process
_run_lock = asyncio.Lock()


def resolve_partition_date(records: List[StockDayRecord]) -> Optional[str]:
    """Date of the first record carrying one; the whole snapshot shares it."""
    for record in records:
        if record.date and record.date.strip():
            return record.date.strip()
    return None


def load_partition(
    session: Session, trade_date: str
) -> Dict[str, ExchangeReportStockDayAll]:
    """Stored rows of one trade date, keyed by security code."""
    rows = session.exec(
        select(ExchangeReportStockDayAll).where(
            ExchangeReportStockDayAll.trade_date == trade_date
        )
    ).all()
    return {row.code: row for row in rows}


def reconcile_partition(
    session: Session,
    trade_date: str,
    records: List[StockDayRecord],
) -> Tuple[int, int]:
    """Stage inserts and updates for one partition. Does not commit.

    Returns (inserted, updated).
    """
    existing = load_partition(session, trade_date)
    inserted = 0
    updated = 0

    for record in records:
        code = (record.code or "").strip()
        if not code:
            logger.warning(f"Skipping feed record without a code: {record.name!r}")
            continue

        row = existing.get(code)
        if row is not None:
            apply_record(row, record)
            session.add(row)
            updated += 1
        else:
            row = new_row(trade_date, record)
            session.add(row)
            existing[code] = row
            inserted += 1

    return inserted, updated


async def run_stock_day_ingestion(
    session: Session,
    client: TwseClient,
) -> IngestionResult:
    """Fetch the exchange snapshot and upsert it into its date partition."""
    if _run_lock.locked():
        logger.warning("Stock ingestion already running, skipping this trigger")
        return IngestionResult(status="skipped", message="A run is already in progress")

    async with _run_lock:
        logger.info("Stock day ingestion starting...")

        # ── Step 1: Fetch ──
        try:
            records = await client.fetch_stock_day_all()
        except TwseAPIError as e:
            logger.error(f"Stock feed fetch failed: {e}", extra={"status_code": e.status_code})
            return IngestionResult(status="fetch_failed", message=str(e))

        if not records:
            logger.warning("Stock feed returned no records")
            return IngestionResult(status="no_data", message="Feed returned no records")

        # ── Step 2: Partition ──
        trade_date = resolve_partition_date(records)
        if not trade_date:
            logger.error("Could not determine the trade date of the snapshot, nothing written")
            return IngestionResult(
                status="no_partition_date", message="No record carries a trade date"
            )

        # ── Step 3-5: Reconcile & Commit ──
        try:
            inserted, updated = reconcile_partition(session, trade_date, records)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(
                f"Stock ingestion commit failed for {trade_date}: {e}",
                extra={"trade_date": trade_date},
            )
            return IngestionResult(
                status="commit_failed", trade_date=trade_date, message=str(e)
            )

        logger.info(
            f"Stock ingestion complete. Date: {trade_date}, inserted: {inserted}, updated: {updated}",
            extra={"trade_date": trade_date, "inserted": inserted, "updated": updated},
        )
        return IngestionResult(
            status="success", trade_date=trade_date, inserted=inserted, updated=updated
        )
