"""Backoffice — Product Routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session

from backoffice.database import get_session
from backoffice.models.order_models import ProductPayload
from backoffice.query.descriptors import PRODUCTS_TABLE
from backoffice.query.tabular_engine import collect_rows
from backoffice.services import product_service
from backoffice.core.logging import get_logger

logger = get_logger("api.products")

router = APIRouter(prefix="/products", tags=["Products"])


def _validation_failed(errors) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "errors": [e.model_dump() for e in errors]},
    )


@router.get("/data")
async def get_products_json(session: Session = Depends(get_session)):
    """Every product with category and supplier names, for client-side grids."""
    return {"data": collect_rows(session, PRODUCTS_TABLE)}


@router.post("")
async def create_product(payload: ProductPayload, session: Session = Depends(get_session)):
    errors = product_service.validate_product(payload)
    if errors:
        return _validation_failed(errors)
    try:
        product = product_service.create_product(session, payload)
    except Exception as e:
        logger.error(f"Product create failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=500, content={"success": False, "message": f"Save failed: {e}"}
        )
    return {"success": True, "id": product.product_id}


@router.put("/{product_id}")
async def update_product(
    product_id: int, payload: ProductPayload, session: Session = Depends(get_session)
):
    errors = product_service.validate_product(payload)
    if errors:
        return _validation_failed(errors)
    try:
        product = product_service.update_product(session, product_id, payload)
    except Exception as e:
        logger.error(f"Product {product_id} update failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=500, content={"success": False, "message": f"Update failed: {e}"}
        )
    if product is None:
        return JSONResponse(
            status_code=404, content={"success": False, "message": "Product not found"}
        )
    return {"success": True, "id": product.product_id}
