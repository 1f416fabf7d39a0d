"""Backoffice — Northwind Sales Schema.

Orders with their line items, plus the reference tables orders and products
point at. Order totals are never stored; they are folded from the line items
whenever a screen needs them.
"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship


class Customer(SQLModel, table=True):
    __tablename__ = "customers"

    customer_id: str = Field(primary_key=True, max_length=5)
    company_name: str = Field(index=True, max_length=40)
    contact_name: Optional[str] = Field(default=None, max_length=30)
    city: Optional[str] = Field(default=None, max_length=15)
    country: Optional[str] = Field(default=None, max_length=15)

    orders: List["Order"] = Relationship(back_populates="customer")


class Employee(SQLModel, table=True):
    __tablename__ = "employees"

    employee_id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=10)
    last_name: str = Field(index=True, max_length=20)
    title: Optional[str] = Field(default=None, max_length=30)

    orders: List["Order"] = Relationship(back_populates="employee")


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    category_id: Optional[int] = Field(default=None, primary_key=True)
    category_name: str = Field(index=True, max_length=15)
    description: Optional[str] = None

    products: List["Product"] = Relationship(back_populates="category")


class Supplier(SQLModel, table=True):
    __tablename__ = "suppliers"

    supplier_id: Optional[int] = Field(default=None, primary_key=True)
    company_name: str = Field(index=True, max_length=40)
    country: Optional[str] = Field(default=None, max_length=15)

    products: List["Product"] = Relationship(back_populates="supplier")


class Product(SQLModel, table=True):
    __tablename__ = "products"

    product_id: Optional[int] = Field(default=None, primary_key=True)
    product_name: str = Field(index=True, max_length=40)
    category_id: Optional[int] = Field(
        default=None, foreign_key="categories.category_id"
    )
    supplier_id: Optional[int] = Field(default=None, foreign_key="suppliers.supplier_id")
    unit_price: Optional[float] = Field(default=0.0)
    units_in_stock: Optional[int] = Field(default=0)
    discontinued: bool = Field(default=False)

    category: Optional[Category] = Relationship(back_populates="products")
    supplier: Optional[Supplier] = Relationship(back_populates="products")


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    order_id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: Optional[str] = Field(
        default=None, foreign_key="customers.customer_id", index=True
    )
    employee_id: Optional[int] = Field(
        default=None, foreign_key="employees.employee_id", index=True
    )
    order_date: Optional[datetime] = None
    required_date: Optional[datetime] = None
    freight: Optional[float] = Field(default=0.0)
    ship_name: Optional[str] = Field(default=None, max_length=40)
    ship_address: Optional[str] = Field(default=None, max_length=60)

    customer: Optional[Customer] = Relationship(back_populates="orders")
    employee: Optional[Employee] = Relationship(back_populates="orders")
    details: List["OrderDetail"] = Relationship(back_populates="order")


class OrderDetail(SQLModel, table=True):
    """One order line. Keyed by (order, product)."""

    __tablename__ = "order_details"

    order_id: int = Field(foreign_key="orders.order_id", primary_key=True)
    product_id: int = Field(foreign_key="products.product_id", primary_key=True)
    unit_price: float = Field(default=0.0)
    quantity: int = Field(default=1)
    discount: float = Field(default=0.0)

    order: Optional[Order] = Relationship(back_populates="details")
    product: Optional[Product] = Relationship()

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity * (1 - self.discount)


def order_total(order: Order) -> float:
    """Sum of line subtotals for an order whose details are loaded."""
    return sum(detail.subtotal for detail in order.details)
