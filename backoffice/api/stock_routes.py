"""Backoffice — Stock Routes."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session

from backoffice.database import get_session
from backoffice.connectors.twse.client import TwseClient
from backoffice.ingestion.stock_day_ingester import run_stock_day_ingestion
from backoffice.models.stock_models import IngestionResult
from backoffice.query.datatables import parse_query_request
from backoffice.query.descriptors import STOCKS_TABLE
from backoffice.query.tabular_engine import execute
from backoffice.services.stock_service import get_stock_statistics
from backoffice.core.logging import get_logger

logger = get_logger("api.stocks")

router = APIRouter(prefix="/stocks", tags=["Stocks"])


def get_twse_client() -> TwseClient:
    return TwseClient()


@router.post("/data")
async def get_stocks(request: Request, session: Session = Depends(get_session)):
    """Server-side grid source over the stored daily quotes."""
    form = await request.form()
    query = parse_query_request(form)
    return execute(session, query, STOCKS_TABLE).to_wire()


@router.get("/statistics")
async def get_statistics(session: Session = Depends(get_session)):
    """Top ten by volume and by change for the latest trade date."""
    try:
        return get_stock_statistics(session)
    except Exception as e:
        logger.error(f"Stock statistics failed: {e}", exc_info=True)
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/ingest", response_model=IngestionResult)
async def trigger_ingestion(
    session: Session = Depends(get_session),
    client: TwseClient = Depends(get_twse_client),
):
    """Run the daily quote ingestion now instead of waiting for the scheduler."""
    try:
        return await run_stock_day_ingestion(session=session, client=client)
    finally:
        await client.close()
