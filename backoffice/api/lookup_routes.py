"""Backoffice — Selector Lookup Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from backoffice.database import get_session
from backoffice.query.descriptors import (
    CUSTOMER_LOOKUP,
    EMPLOYEE_LOOKUP,
    PRODUCT_LOOKUP,
)
from backoffice.query.lookup_engine import lookup
from backoffice.services.label_service import customer_label, employee_label

router = APIRouter(prefix="/lookups", tags=["Lookups"])

# keeps (page - 1) * page_size inside a 64-bit OFFSET
MAX_PAGE = 100_000


@router.get("/customers")
async def get_customers(
    term: Optional[str] = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    page_size: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_session),
):
    return lookup(session, CUSTOMER_LOOKUP, term, page, page_size).to_wire()


@router.get("/employees")
async def get_employees(
    term: Optional[str] = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    page_size: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_session),
):
    return lookup(session, EMPLOYEE_LOOKUP, term, page, page_size).to_wire()


@router.get("/products")
async def get_products(
    term: Optional[str] = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    page_size: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_session),
):
    """Products with their unit price, for auto-filling order lines."""
    return lookup(session, PRODUCT_LOOKUP, term, page, page_size).to_wire()


@router.get("/labels")
async def get_labels(
    customer_id: Optional[str] = None,
    employee_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    """Display text for pre-selected values of an edit form."""
    return {
        "customer": customer_label(session, customer_id),
        "employee": employee_label(session, employee_id),
    }
