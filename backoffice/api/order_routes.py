"""Backoffice — Order Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session

from backoffice.database import get_session
from backoffice.models.order_models import OrderPayload
from backoffice.models.table_models import SortDirection
from backoffice.query.datatables import parse_query_request
from backoffice.query.descriptors import ORDERS_TABLE
from backoffice.query.tabular_engine import collect_rows, execute
from backoffice.services import order_service
from backoffice.core.logging import get_logger

logger = get_logger("api.orders")

router = APIRouter(prefix="/orders", tags=["Orders"])


def _validation_failed(errors) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Validation failed",
            "errors": [e.model_dump() for e in errors],
        },
    )


@router.post("/data")
async def get_orders(request: Request, session: Session = Depends(get_session)):
    """Server-side grid source.

    Always answers 200; a failed query comes back as ``{"error": ...}``.
    """
    form = await request.form()
    query = parse_query_request(form)
    return execute(session, query, ORDERS_TABLE).to_wire()


@router.get("/export-rows")
async def export_rows(
    search_value: Optional[str] = Query(None, description="Same free-text filter as the grid"),
    session: Session = Depends(get_session),
):
    """Fully-resolved rows for the spreadsheet exporter, newest first."""
    rows = collect_rows(
        session,
        ORDERS_TABLE,
        search_term=search_value,
        sort_column="orderID",
        sort_direction=SortDirection.DESC,
    )
    return {"count": len(rows), "data": rows}


@router.get("/{order_id}")
async def get_order(order_id: int, session: Session = Depends(get_session)):
    detail = order_service.get_order_detail(session, order_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return detail


@router.post("")
async def create_order(payload: OrderPayload, session: Session = Depends(get_session)):
    errors = order_service.validate_order(payload)
    if errors:
        return _validation_failed(errors)
    try:
        order = order_service.create_order(session, payload)
    except Exception as e:
        logger.error(f"Order create failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=500, content={"success": False, "message": f"Save failed: {e}"}
        )
    return {"success": True, "message": "Order created", "id": order.order_id}


@router.put("/{order_id}")
async def update_order(
    order_id: int, payload: OrderPayload, session: Session = Depends(get_session)
):
    errors = order_service.validate_order(payload)
    if errors:
        return _validation_failed(errors)
    try:
        order = order_service.update_order(session, order_id, payload)
    except Exception as e:
        logger.error(f"Order {order_id} update failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=500, content={"success": False, "message": f"Update failed: {e}"}
        )
    if order is None:
        return JSONResponse(
            status_code=404, content={"success": False, "message": "Order not found"}
        )
    return {"success": True, "message": "Order updated"}


@router.delete("/{order_id}")
async def delete_order(order_id: int, session: Session = Depends(get_session)):
    try:
        deleted = order_service.delete_order(session, order_id)
    except Exception as e:
        logger.error(f"Order {order_id} delete failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=500, content={"success": False, "message": f"Delete failed: {e}"}
        )
    if not deleted:
        return JSONResponse(
            status_code=404, content={"success": False, "message": "Order not found"}
        )
    return {"success": True, "message": "Order deleted"}
