"""
Pytest configuration for the Backoffice service.

Provides fixtures for:
- An isolated in-memory SQLite database per test
- Seeded Northwind and exchange quote data
- A FastAPI TestClient bound to the test session
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import backoffice.models.northwind_models  # noqa: F401
import backoffice.models.stock_models  # noqa: F401
from backoffice.database import get_session
from backoffice.models.northwind_models import (
    Category,
    Customer,
    Employee,
    Order,
    OrderDetail,
    Product,
    Supplier,
)
from backoffice.models.stock_models import ExchangeReportStockDayAll


@pytest.fixture()
def engine():
    """
    Fresh in-memory database for each test.

    StaticPool keeps the single connection alive so every session sees the
    same tables.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture()
def northwind(session: Session) -> Session:
    """
    Seed a small Northwind dataset.

    Order totals (unit_price * quantity * (1 - discount)):
      10248 → 266.0, 10249 → 156.6, 10250 → 0 (no lines, no customer/employee),
      10251 → 10.0, 10252 → 20.0
    """
    session.add_all(
        [
            Customer(customer_id="ALFKI", company_name="Alfreds Futterkiste", country="Germany"),
            Customer(customer_id="ANATR", company_name="Ana Trujillo Emparedados", country="Mexico"),
            Customer(customer_id="BONAP", company_name="Bon app'", country="France"),
            Employee(employee_id=1, first_name="Nancy", last_name="Davolio"),
            Employee(employee_id=2, first_name="Andrew", last_name="Fuller"),
            Category(category_id=1, category_name="Dairy Products"),
            Category(category_id=2, category_name="Grains/Cereals"),
            Supplier(supplier_id=1, company_name="Cooperativa de Quesos"),
        ]
    )
    session.add_all(
        [
            Product(product_id=11, product_name="Queso Cabrales", category_id=1, supplier_id=1, unit_price=21.0, units_in_stock=22),
            Product(product_id=42, product_name="Singaporean Hokkien Fried Mee", category_id=2, unit_price=14.0, units_in_stock=26),
            Product(product_id=72, product_name="Mozzarella di Giovanni", unit_price=34.8, units_in_stock=14),
        ]
    )
    session.add_all(
        [
            Order(order_id=10248, customer_id="ALFKI", employee_id=1, order_date=datetime(1996, 7, 4), freight=32.38),
            Order(order_id=10249, customer_id="ANATR", employee_id=2, order_date=datetime(1996, 7, 5), freight=11.61),
            Order(order_id=10250, order_date=datetime(1996, 7, 8), freight=65.83),
            Order(order_id=10251, customer_id="BONAP", employee_id=1, order_date=datetime(1996, 7, 8), freight=41.34),
            Order(order_id=10252, customer_id="ALFKI", employee_id=2, order_date=datetime(1996, 7, 9), freight=51.30),
        ]
    )
    session.flush()
    session.add_all(
        [
            OrderDetail(order_id=10248, product_id=11, unit_price=14.0, quantity=12, discount=0.0),
            OrderDetail(order_id=10248, product_id=42, unit_price=9.8, quantity=10, discount=0.0),
            OrderDetail(order_id=10249, product_id=72, unit_price=34.8, quantity=5, discount=0.1),
            OrderDetail(order_id=10251, product_id=11, unit_price=10.0, quantity=2, discount=0.5),
            OrderDetail(order_id=10252, product_id=72, unit_price=20.0, quantity=1, discount=0.0),
        ]
    )
    session.commit()
    return session


@pytest.fixture()
def stocks(session: Session) -> Session:
    """Seed two trade dates of quotes; 1141126 is the latest."""
    rows = [
        ("1141126", "0050", "元大台灣50", 75793554, Decimal("1.0000")),
        ("1141126", "2330", "台積電", 30123456, Decimal("-5.0000")),
        ("1141126", "2350", "環電", 120000, Decimal("0.3000")),
        ("1141126", "006208", "富邦台50", 2500000, None),
        ("1141125", "0050", "元大台灣50", 60000000, Decimal("2.0000")),
    ]
    for trade_date, code, name, volume, change in rows:
        session.add(
            ExchangeReportStockDayAll(
                trade_date=trade_date,
                code=code,
                name=name,
                trade_volume=volume,
                closing_price=Decimal("100.5"),
                change=change,
            )
        )
    session.commit()
    return session


@pytest.fixture()
def client(session: Session) -> Generator[TestClient, None, None]:
    """
    TestClient with the DB dependency bound to the test session.

    Used without a context manager so the lifespan (real DB, scheduler)
    never runs.
    """
    from backoffice.main import app

    def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
