"""Backoffice — Write Payloads & Validation Results.

Payloads only carry shape; business rules live in the explicit
`validate_*` functions of the services, which return `FieldError` lists.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class FieldError(BaseModel):
    field: str
    message: str


class OrderDetailPayload(BaseModel):
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    """Display only; never written back."""
    unit_price: float = 0.0
    quantity: int = 1
    discount: float = 0.0

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity * (1 - self.discount)


class OrderPayload(BaseModel):
    """Order header plus its complete set of lines."""

    order_id: int = 0
    customer_id: Optional[str] = None
    employee_id: Optional[int] = None
    order_date: Optional[datetime] = None
    required_date: Optional[datetime] = None
    freight: Optional[float] = None
    ship_name: Optional[str] = None
    ship_address: Optional[str] = None
    order_details: List[OrderDetailPayload] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "ALFKI",
                    "employee_id": 1,
                    "order_date": "2026-10-19T00:00:00",
                    "freight": 12.5,
                    "ship_name": "Alfreds Futterkiste",
                    "order_details": [
                        {"product_id": 11, "unit_price": 14.0, "quantity": 12, "discount": 0}
                    ],
                }
            ]
        }
    }


class ProductPayload(BaseModel):
    product_name: Optional[str] = None
    category_id: Optional[int] = None
    supplier_id: Optional[int] = None
    unit_price: Optional[float] = 0.0
    units_in_stock: Optional[int] = 0
    discontinued: bool = False
