"""Backoffice — Order Master-Detail Writes.

Every write runs in one transaction: the header and all of its lines are
committed together or not at all. Editing replaces the full set of lines.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from backoffice.models.northwind_models import Order, OrderDetail, order_total
from backoffice.models.order_models import FieldError, OrderPayload
from backoffice.query.descriptors import employee_full_name
from backoffice.core.logging import get_logger

logger = get_logger("services.orders")

SHIP_NAME_MAX = 40
SHIP_ADDRESS_MAX = 60
QUANTITY_MAX = 32767


def validate_order(payload: OrderPayload) -> List[FieldError]:
    """Field-level problems with an order payload; empty when valid."""
    errors: List[FieldError] = []

    if not (payload.customer_id or "").strip():
        errors.append(FieldError(field="customer_id", message="Customer is required"))
    if payload.employee_id is None:
        errors.append(FieldError(field="employee_id", message="Employee is required"))
    if payload.order_date is None:
        errors.append(FieldError(field="order_date", message="Order date is required"))
    if payload.freight is not None and payload.freight < 0:
        errors.append(FieldError(field="freight", message="Freight cannot be negative"))
    if payload.ship_name and len(payload.ship_name) > SHIP_NAME_MAX:
        errors.append(
            FieldError(
                field="ship_name",
                message=f"Ship name cannot exceed {SHIP_NAME_MAX} characters",
            )
        )
    if payload.ship_address and len(payload.ship_address) > SHIP_ADDRESS_MAX:
        errors.append(
            FieldError(
                field="ship_address",
                message=f"Ship address cannot exceed {SHIP_ADDRESS_MAX} characters",
            )
        )

    seen_products = set()
    for i, line in enumerate(payload.order_details):
        prefix = f"order_details[{i}]"
        if line.product_id is None:
            errors.append(FieldError(field=f"{prefix}.product_id", message="Product is required"))
        elif line.product_id in seen_products:
            errors.append(
                FieldError(field=f"{prefix}.product_id", message="Product appears twice")
            )
        else:
            seen_products.add(line.product_id)
        if line.unit_price < 0:
            errors.append(
                FieldError(field=f"{prefix}.unit_price", message="Unit price cannot be negative")
            )
        if not 1 <= line.quantity <= QUANTITY_MAX:
            errors.append(
                FieldError(
                    field=f"{prefix}.quantity",
                    message=f"Quantity must be between 1 and {QUANTITY_MAX}",
                )
            )
        if not 0 <= line.discount <= 1:
            errors.append(
                FieldError(field=f"{prefix}.discount", message="Discount must be between 0 and 1")
            )

    return errors


def _apply_header(order: Order, payload: OrderPayload) -> None:
    order.customer_id = payload.customer_id
    order.employee_id = payload.employee_id
    order.order_date = payload.order_date
    order.required_date = payload.required_date
    order.freight = payload.freight
    order.ship_name = payload.ship_name
    order.ship_address = payload.ship_address


def _add_lines(session: Session, order_id: int, payload: OrderPayload) -> None:
    for line in payload.order_details:
        session.add(
            OrderDetail(
                order_id=order_id,
                product_id=line.product_id,
                unit_price=line.unit_price,
                quantity=line.quantity,
                discount=line.discount,
            )
        )


def create_order(session: Session, payload: OrderPayload) -> Order:
    """Insert a header and its lines in one transaction."""
    order = Order()
    _apply_header(order, payload)
    try:
        session.add(order)
        session.flush()  # assigns order_id
        _add_lines(session, order.order_id, payload)
        session.commit()
    except Exception:
        session.rollback()
        raise
    session.refresh(order)
    logger.info(f"Order {order.order_id} created", extra={"entity_id": order.order_id})
    return order


def _load_with_lines(session: Session, order_id: int) -> Optional[Order]:
    return session.exec(
        select(Order)
        .where(Order.order_id == order_id)
        .options(selectinload(Order.details))
    ).first()


def update_order(session: Session, order_id: int, payload: OrderPayload) -> Optional[Order]:
    """Overwrite a header and replace all of its lines. None if missing."""
    try:
        order = _load_with_lines(session, order_id)
        if order is None:
            return None
        _apply_header(order, payload)
        session.add(order)
        for line in list(order.details):
            session.delete(line)
        session.flush()  # old lines gone before new keys are inserted
        _add_lines(session, order_id, payload)
        session.commit()
    except Exception:
        session.rollback()
        raise
    session.refresh(order)
    logger.info(f"Order {order_id} updated", extra={"entity_id": order_id})
    return order


def delete_order(session: Session, order_id: int) -> bool:
    """Remove an order and its lines. False if missing."""
    try:
        order = _load_with_lines(session, order_id)
        if order is None:
            return False
        for line in list(order.details):
            session.delete(line)
        session.delete(order)
        session.commit()
    except Exception:
        session.rollback()
        raise
    logger.info(f"Order {order_id} deleted", extra={"entity_id": order_id})
    return True


def get_order_detail(session: Session, order_id: int) -> Optional[Dict[str, Any]]:
    """Header with resolved customer/employee names and priced lines."""
    order = session.exec(
        select(Order)
        .where(Order.order_id == order_id)
        .options(
            selectinload(Order.customer),
            selectinload(Order.employee),
            selectinload(Order.details).selectinload(OrderDetail.product),
        )
    ).first()
    if order is None:
        return None

    return {
        "order_id": order.order_id,
        "customer_id": order.customer_id,
        "customer_name": order.customer.company_name if order.customer else "",
        "employee_id": order.employee_id,
        "employee_name": employee_full_name(order.employee) if order.employee else "",
        "order_date": order.order_date,
        "required_date": order.required_date,
        "freight": order.freight,
        "ship_name": order.ship_name,
        "ship_address": order.ship_address,
        "order_details": [
            {
                "product_id": line.product_id,
                "product_name": line.product.product_name if line.product else "",
                "unit_price": line.unit_price,
                "quantity": line.quantity,
                "discount": line.discount,
                "subtotal": round(line.subtotal, 2),
            }
            for line in sorted(order.details, key=lambda d: d.product_id)
        ],
        "total_amount": round(order_total(order), 2),
    }
