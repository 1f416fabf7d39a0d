"""Backoffice — Exchange Daily Quote Models.

`StockDayRecord` mirrors one line of the exchange's STOCK_DAY_ALL feed as it
arrives (every field a string). `ExchangeReportStockDayAll` is the stored,
normalized row.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field as PydanticField
from sqlmodel import SQLModel, Field, UniqueConstraint


class ExchangeReportStockDayAll(SQLModel, table=True):
    """One listed security's trading summary for one trade date.

    Unique constraint on (trade_date, code) is the reconciliation key:
    re-running the fetch for the same day updates rows instead of duplicating.
    """

    __tablename__ = "exchange_report_stock_day_all"
    __table_args__ = (
        UniqueConstraint("trade_date", "code", name="uq_stock_day_trade_date_code"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    trade_date: str = Field(index=True, description="ROC calendar yyyMMdd, e.g. 1141126")
    code: str = Field(index=True, description="Security code, e.g. 0050")
    name: str = Field(default="")
    trade_volume: int = Field(default=0, description="Shares traded")
    trade_value: int = Field(default=0, description="Turnover in TWD")
    opening_price: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=4)
    highest_price: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=4)
    lowest_price: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=4)
    closing_price: Decimal = Field(default=Decimal("0"), max_digits=18, decimal_places=4)
    change: Optional[Decimal] = Field(default=None, max_digits=18, decimal_places=4)
    transaction_count: int = Field(default=0, description="Matched trades")


class StockDayRecord(BaseModel):
    """Raw feed line. Field names follow the upstream JSON."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date: Optional[str] = PydanticField(default=None, alias="Date")
    code: Optional[str] = PydanticField(default=None, alias="Code")
    name: Optional[str] = PydanticField(default=None, alias="Name")
    trade_volume: Optional[str] = PydanticField(default=None, alias="TradeVolume")
    trade_value: Optional[str] = PydanticField(default=None, alias="TradeValue")
    opening_price: Optional[str] = PydanticField(default=None, alias="OpeningPrice")
    highest_price: Optional[str] = PydanticField(default=None, alias="HighestPrice")
    lowest_price: Optional[str] = PydanticField(default=None, alias="LowestPrice")
    closing_price: Optional[str] = PydanticField(default=None, alias="ClosingPrice")
    change: Optional[str] = PydanticField(default=None, alias="Change")
    transaction: Optional[str] = PydanticField(default=None, alias="Transaction")


class IngestionResult(BaseModel):
    """Outcome of one ingestion run."""

    status: str  # success | fetch_failed | no_data | no_partition_date | commit_failed | skipped
    trade_date: Optional[str] = None
    inserted: int = 0
    updated: int = 0
    message: str = ""
