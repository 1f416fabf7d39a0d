"""Backoffice — Display labels for selector pre-fill."""

from typing import Optional

from sqlmodel import Session

from backoffice.models.northwind_models import Customer, Employee
from backoffice.query.descriptors import employee_full_name


def customer_label(session: Session, customer_id: Optional[str]) -> str:
    """``"Company (ID)"``, or empty when unknown."""
    if not customer_id:
        return ""
    customer = session.get(Customer, customer_id)
    if customer is None:
        return ""
    return f"{customer.company_name} ({customer.customer_id})"


def employee_label(session: Session, employee_id: Optional[int]) -> str:
    if employee_id is None:
        return ""
    employee = session.get(Employee, employee_id)
    return employee_full_name(employee) if employee else ""
