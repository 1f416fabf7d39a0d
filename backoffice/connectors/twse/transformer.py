"""Backoffice — Exchange Feed → Stored Row Transformer.

The feed sends every number as a string, often with thousands separators
("1,234,567"). Unparseable or empty values become zero instead of failing the
row.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from backoffice.models.stock_models import ExchangeReportStockDayAll, StockDayRecord


def _clean(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).replace(",", "").strip()


def parse_int(value: Optional[str]) -> int:
    """Parse an integer field; "1,234" → 1234, "" → 0, "--" → 0."""
    cleaned = _clean(value)
    if not cleaned:
        return 0
    try:
        return int(cleaned)
    except ValueError:
        return 0


def parse_decimal(value: Optional[str]) -> Decimal:
    """Parse a price field; "1,234.50" → Decimal("1234.50"), "" → 0."""
    cleaned = _clean(value)
    if not cleaned:
        return Decimal("0")
    try:
        parsed = Decimal(cleaned)
    except InvalidOperation:
        return Decimal("0")
    if not parsed.is_finite():
        return Decimal("0")
    return parsed


def apply_record(row: ExchangeReportStockDayAll, record: StockDayRecord) -> None:
    """Overwrite every mutable field of `row` from `record`."""
    row.name = (record.name or "").strip()
    row.trade_volume = parse_int(record.trade_volume)
    row.trade_value = parse_int(record.trade_value)
    row.opening_price = parse_decimal(record.opening_price)
    row.highest_price = parse_decimal(record.highest_price)
    row.lowest_price = parse_decimal(record.lowest_price)
    row.closing_price = parse_decimal(record.closing_price)
    row.change = parse_decimal(record.change)
    row.transaction_count = parse_int(record.transaction)


def new_row(trade_date: str, record: StockDayRecord) -> ExchangeReportStockDayAll:
    """Build a fresh row for a code not yet stored in this partition."""
    row = ExchangeReportStockDayAll(trade_date=trade_date, code=(record.code or "").strip())
    apply_record(row, record)
    return row
