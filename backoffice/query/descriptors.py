"""Backoffice — Per-screen Table & Lookup Descriptors.

Each grid or selector declares its searchable fields, sortable columns and
row projection here; the engines do the rest. Sort keys are the widget's
``columns[n][data]`` names.
"""

from typing import Any, Dict

from backoffice.models.northwind_models import (
    Category,
    Customer,
    Employee,
    Order,
    Product,
    Supplier,
    order_total,
)
from backoffice.models.stock_models import ExchangeReportStockDayAll
from backoffice.query.lookup_engine import LookupDescriptor
from backoffice.query.tabular_engine import TableDescriptor


def employee_full_name(employee: Employee) -> str:
    return f"{employee.first_name} {employee.last_name}"


# ─────────────────────────────────────────────
# ORDERS
# ─────────────────────────────────────────────


def _project_order(order: Order, placeholder: str) -> Dict[str, Any]:
    return {
        "orderID": order.order_id,
        "customerName": order.customer.company_name if order.customer else placeholder,
        "employeeName": (
            employee_full_name(order.employee) if order.employee else placeholder
        ),
        "orderDate": order.order_date,
        "freight": order.freight,
        "totalAmount": round(order_total(order), 2),
    }


ORDERS_TABLE = TableDescriptor(
    name="orders",
    model=Order,
    id_column=Order.order_id,
    projection=_project_order,
    searchable=(
        Order.order_id,
        Customer.company_name,
        Employee.first_name + " " + Employee.last_name,
    ),
    sort_columns={
        "orderID": Order.order_id,
        "customerName": Customer.company_name,
        "employeeName": Employee.first_name,
        "orderDate": Order.order_date,
        "freight": Order.freight,
        # totalAmount is derived; it falls back to identifier order
    },
    joins=(Order.customer, Order.employee),
    collections=(Order.details,),
)


# ─────────────────────────────────────────────
# PRODUCTS
# ─────────────────────────────────────────────


def _project_product(product: Product, placeholder: str) -> Dict[str, Any]:
    return {
        "productID": product.product_id,
        "productName": product.product_name,
        "categoryName": product.category.category_name if product.category else placeholder,
        "supplierName": product.supplier.company_name if product.supplier else placeholder,
        "unitPrice": product.unit_price,
        "unitsInStock": product.units_in_stock,
        "discontinued": product.discontinued,
    }


PRODUCTS_TABLE = TableDescriptor(
    name="products",
    model=Product,
    id_column=Product.product_id,
    projection=_project_product,
    searchable=(
        Product.product_id,
        Product.product_name,
        Category.category_name,
        Supplier.company_name,
    ),
    sort_columns={
        "productID": Product.product_id,
        "productName": Product.product_name,
        "categoryName": Category.category_name,
        "supplierName": Supplier.company_name,
        "unitPrice": Product.unit_price,
        "unitsInStock": Product.units_in_stock,
    },
    joins=(Product.category, Product.supplier),
    placeholder="",
)


# ─────────────────────────────────────────────
# STOCKS
# ─────────────────────────────────────────────


def _project_stock(row: ExchangeReportStockDayAll, placeholder: str) -> Dict[str, Any]:
    return {
        "id": row.id,
        "tradeDate": row.trade_date,
        "code": row.code,
        "name": row.name,
        "tradeVolume": row.trade_volume,
        "tradeValue": row.trade_value,
        "openingPrice": row.opening_price,
        "highestPrice": row.highest_price,
        "lowestPrice": row.lowest_price,
        "closingPrice": row.closing_price,
        "change": row.change,
        "transactionCount": row.transaction_count,
    }


STOCKS_TABLE = TableDescriptor(
    name="stocks",
    model=ExchangeReportStockDayAll,
    id_column=ExchangeReportStockDayAll.id,
    projection=_project_stock,
    searchable=(
        ExchangeReportStockDayAll.code,
        ExchangeReportStockDayAll.name,
        ExchangeReportStockDayAll.trade_date,
    ),
    sort_columns={
        "tradeDate": ExchangeReportStockDayAll.trade_date,
        "code": ExchangeReportStockDayAll.code,
        "name": ExchangeReportStockDayAll.name,
        "tradeVolume": ExchangeReportStockDayAll.trade_volume,
        "closingPrice": ExchangeReportStockDayAll.closing_price,
        "change": ExchangeReportStockDayAll.change,
    },
)


# ─────────────────────────────────────────────
# LOOKUPS
# ─────────────────────────────────────────────

CUSTOMER_LOOKUP = LookupDescriptor(
    name="customers",
    model=Customer,
    id_of=lambda c: c.customer_id,
    label_of=lambda c: f"{c.company_name} ({c.customer_id})",
    order_by=(Customer.customer_id,),
    searchable=(Customer.company_name, Customer.customer_id),
)

EMPLOYEE_LOOKUP = LookupDescriptor(
    name="employees",
    model=Employee,
    id_of=lambda e: e.employee_id,
    label_of=employee_full_name,
    order_by=(Employee.employee_id,),
    searchable=(Employee.first_name, Employee.last_name),
)

PRODUCT_LOOKUP = LookupDescriptor(
    name="products",
    model=Product,
    id_of=lambda p: p.product_id,
    label_of=lambda p: p.product_name,
    order_by=(Product.product_name, Product.product_id),
    searchable=(Product.product_name,),
    extra_of=lambda p: {"price": p.unit_price},
)
