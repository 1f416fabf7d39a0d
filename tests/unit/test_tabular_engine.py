from __future__ import annotations

import pytest

from backoffice.models.northwind_models import Customer, Order
from backoffice.models.table_models import (
    QueryError,
    QueryRequest,
    QueryResponse,
    SortDirection,
)
from backoffice.query.descriptors import ORDERS_TABLE, PRODUCTS_TABLE, STOCKS_TABLE
from backoffice.query.tabular_engine import TableDescriptor, collect_rows, execute

ALL_ORDER_IDS = [10248, 10249, 10250, 10251, 10252]


def _ids(response: QueryResponse) -> list[int]:
    return [row["orderID"] for row in response.data]


def test_unfiltered_page_uses_identifier_order(northwind):
    response = execute(northwind, QueryRequest(draw=7, start=0, length=10), ORDERS_TABLE)

    assert isinstance(response, QueryResponse)
    assert response.draw == 7
    assert response.records_total == 5
    assert response.records_filtered == 5
    assert _ids(response) == ALL_ORDER_IDS


def test_offset_and_limit(northwind):
    response = execute(northwind, QueryRequest(start=3, length=2), ORDERS_TABLE)
    assert _ids(response) == [10251, 10252]

    tail = execute(northwind, QueryRequest(start=4, length=2), ORDERS_TABLE)
    assert _ids(tail) == [10252]

    beyond = execute(northwind, QueryRequest(start=50, length=2), ORDERS_TABLE)
    assert beyond.data == []
    assert beyond.records_filtered == 5


def test_search_matches_joined_customer_case_insensitively(northwind):
    response = execute(
        northwind, QueryRequest(length=10, search_term="  ALFREDS "), ORDERS_TABLE
    )
    assert response.records_total == 5
    assert response.records_filtered == 2
    assert _ids(response) == [10248, 10252]


def test_search_matches_non_ascii_name_typed_as_stored(northwind):
    northwind.add(Customer(customer_id="OTTIK", company_name="Österreich Handel", country="Austria"))
    northwind.add(Order(order_id=10253, customer_id="OTTIK", employee_id=1))
    northwind.commit()

    for term in ("Österreich", "ÖSTERREICH", "Österreich HANDEL"):
        response = execute(northwind, QueryRequest(length=10, search_term=term), ORDERS_TABLE)
        assert response.records_filtered == 1, term
        assert _ids(response) == [10253]


def test_search_matches_numeric_identifier_as_text(northwind):
    response = execute(northwind, QueryRequest(length=10, search_term="1025"), ORDERS_TABLE)
    assert _ids(response) == [10250, 10251, 10252]


def test_search_matches_employee_full_name(northwind):
    response = execute(
        northwind, QueryRequest(length=10, search_term="nancy dav"), ORDERS_TABLE
    )
    assert _ids(response) == [10248, 10251]


def test_search_wildcards_are_literal(northwind):
    response = execute(northwind, QueryRequest(length=10, search_term="%"), ORDERS_TABLE)
    assert response.records_filtered == 0
    assert response.data == []


def test_unknown_sort_column_falls_back_to_identifier(northwind):
    response = execute(
        northwind,
        QueryRequest(length=10, sort_column="noSuchColumn", sort_direction=SortDirection.DESC),
        ORDERS_TABLE,
    )
    assert isinstance(response, QueryResponse)
    assert _ids(response) == list(reversed(ALL_ORDER_IDS))


def test_derived_column_sort_falls_back_to_identifier(northwind):
    response = execute(
        northwind, QueryRequest(length=10, sort_column="totalAmount"), ORDERS_TABLE
    )
    assert _ids(response) == ALL_ORDER_IDS


@pytest.mark.parametrize("direction", [SortDirection.ASC, SortDirection.DESC])
def test_ties_are_broken_by_identifier_ascending(northwind, direction):
    response = execute(
        northwind,
        QueryRequest(length=10, sort_column="customerName", sort_direction=direction),
        ORDERS_TABLE,
    )
    ids = _ids(response)
    alfki = [i for i in ids if i in (10248, 10252)]
    assert alfki == [10248, 10252]
    assert abs(ids.index(10248) - ids.index(10252)) == 1


def test_projection_substitutes_placeholder_and_folds_totals(northwind):
    response = execute(northwind, QueryRequest(length=10), ORDERS_TABLE)
    rows = {row["orderID"]: row for row in response.data}

    assert rows[10250]["customerName"] == "unknown"
    assert rows[10250]["employeeName"] == "unknown"
    assert rows[10250]["totalAmount"] == 0
    assert rows[10248]["customerName"] == "Alfreds Futterkiste"
    assert rows[10248]["employeeName"] == "Nancy Davolio"
    assert rows[10248]["totalAmount"] == pytest.approx(266.0)
    assert rows[10249]["totalAmount"] == pytest.approx(156.6)


def test_pages_cover_every_row_exactly_once(northwind):
    seen: list[int] = []
    start = 0
    while True:
        page = execute(
            northwind,
            QueryRequest(
                start=start,
                length=2,
                sort_column="customerName",
                sort_direction=SortDirection.DESC,
            ),
            ORDERS_TABLE,
        )
        assert len(page.data) <= 2
        if not page.data:
            break
        seen.extend(_ids(page))
        start += 2

    assert sorted(seen) == ALL_ORDER_IDS
    assert len(seen) == len(set(seen)) == page.records_filtered


def test_identical_requests_yield_identical_rows(northwind):
    request = QueryRequest(length=3, sort_column="orderDate", sort_direction=SortDirection.DESC)
    first = execute(northwind, request, ORDERS_TABLE)
    second = execute(northwind, request, ORDERS_TABLE)
    assert first.data == second.data


def test_stock_search_matches_code_and_name(stocks):
    response = execute(stocks, QueryRequest(length=10, search_term="50"), STOCKS_TABLE)
    codes = sorted(row["code"] for row in response.data)

    assert response.records_total == 5
    assert response.records_filtered == 4
    # 0050 appears on both trade dates; 2350 matches by code, 006208 by name
    assert codes == ["0050", "0050", "006208", "2350"]


def test_product_placeholder_is_empty_string(northwind):
    rows = collect_rows(northwind, PRODUCTS_TABLE)
    by_id = {row["productID"]: row for row in rows}

    assert [row["productID"] for row in rows] == [11, 42, 72]
    assert by_id[11]["categoryName"] == "Dairy Products"
    assert by_id[11]["supplierName"] == "Cooperativa de Quesos"
    assert by_id[72]["categoryName"] == ""
    assert by_id[42]["supplierName"] == ""


def test_collect_rows_honours_search_and_sort(northwind):
    rows = collect_rows(
        northwind,
        ORDERS_TABLE,
        search_term="alfreds",
        sort_column="orderID",
        sort_direction=SortDirection.DESC,
    )
    assert [row["orderID"] for row in rows] == [10252, 10248]


def test_failures_come_back_as_error_payload(northwind):
    def _broken_projection(row, placeholder):
        raise RuntimeError("projection exploded")

    broken = TableDescriptor(
        name="broken",
        model=ORDERS_TABLE.model,
        id_column=ORDERS_TABLE.id_column,
        projection=_broken_projection,
    )
    response = execute(northwind, QueryRequest(length=5), broken)

    assert isinstance(response, QueryError)
    assert response.to_wire() == {"error": "projection exploded"}
