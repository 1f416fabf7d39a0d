"""Backoffice — Product Writes."""

from typing import List, Optional

from sqlmodel import Session

from backoffice.models.northwind_models import Product
from backoffice.models.order_models import FieldError, ProductPayload
from backoffice.core.logging import get_logger

logger = get_logger("services.products")

PRODUCT_NAME_MAX = 40


def validate_product(payload: ProductPayload) -> List[FieldError]:
    errors: List[FieldError] = []
    name = (payload.product_name or "").strip()
    if not name:
        errors.append(FieldError(field="product_name", message="Product name is required"))
    elif len(name) > PRODUCT_NAME_MAX:
        errors.append(
            FieldError(
                field="product_name",
                message=f"Product name cannot exceed {PRODUCT_NAME_MAX} characters",
            )
        )
    if payload.unit_price is not None and payload.unit_price < 0:
        errors.append(FieldError(field="unit_price", message="Unit price cannot be negative"))
    if payload.units_in_stock is not None and payload.units_in_stock < 0:
        errors.append(
            FieldError(field="units_in_stock", message="Units in stock cannot be negative")
        )
    return errors


def _apply(product: Product, payload: ProductPayload) -> None:
    product.product_name = (payload.product_name or "").strip()
    product.category_id = payload.category_id
    product.supplier_id = payload.supplier_id
    product.unit_price = payload.unit_price
    product.units_in_stock = payload.units_in_stock
    product.discontinued = payload.discontinued


def create_product(session: Session, payload: ProductPayload) -> Product:
    """Insert a product. Rolls back and re-raises on failure."""
    product = Product(product_name="")
    _apply(product, payload)
    try:
        session.add(product)
        session.commit()
    except Exception:
        session.rollback()
        raise
    session.refresh(product)
    logger.info(f"Product {product.product_id} created", extra={"entity_id": product.product_id})
    return product


def update_product(
    session: Session, product_id: int, payload: ProductPayload
) -> Optional[Product]:
    """Overwrite a product's editable fields. None if missing."""
    try:
        product = session.get(Product, product_id)
        if product is None:
            return None
        _apply(product, payload)
        session.add(product)
        session.commit()
    except Exception:
        session.rollback()
        raise
    session.refresh(product)
    logger.info(f"Product {product_id} updated", extra={"entity_id": product_id})
    return product
