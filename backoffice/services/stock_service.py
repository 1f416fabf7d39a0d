"""Backoffice — Stock Chart Statistics."""

from typing import Any, Dict

from sqlmodel import Session, select

from backoffice.models.stock_models import ExchangeReportStockDayAll


def get_stock_statistics(session: Session, top_n: int = 10) -> Dict[str, Any]:
    """Top movers of the most recent trade date.

    ``topVolume`` ranks by shares traded, ``topChange`` by price change
    (rows without a change are left out). Ties resolve by code.
    """
    last_date = session.exec(
        select(ExchangeReportStockDayAll.trade_date)
        .order_by(ExchangeReportStockDayAll.trade_date.desc())  # type: ignore
        .limit(1)
    ).first()

    if last_date is None:
        return {"date": None, "topVolume": [], "topChange": []}

    top_volume = session.exec(
        select(ExchangeReportStockDayAll)
        .where(ExchangeReportStockDayAll.trade_date == last_date)
        .order_by(
            ExchangeReportStockDayAll.trade_volume.desc(),  # type: ignore
            ExchangeReportStockDayAll.code,
        )
        .limit(top_n)
    ).all()

    top_change = session.exec(
        select(ExchangeReportStockDayAll)
        .where(
            ExchangeReportStockDayAll.trade_date == last_date,
            ExchangeReportStockDayAll.change.is_not(None),  # type: ignore
        )
        .order_by(
            ExchangeReportStockDayAll.change.desc(),  # type: ignore
            ExchangeReportStockDayAll.code,
        )
        .limit(top_n)
    ).all()

    return {
        "date": last_date,
        "topVolume": [{"label": r.name, "value": r.trade_volume} for r in top_volume],
        "topChange": [{"label": r.name, "value": r.change} for r in top_change],
    }
