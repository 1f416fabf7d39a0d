from __future__ import annotations

import httpx
import pytest

from backoffice.connectors.twse.client import STOCK_DAY_ALL_PATH, TwseAPIError, TwseClient

BASE_URL = "https://feed.test/v1"


def _client(handler) -> TwseClient:
    return TwseClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_parses_records():
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(
            200,
            json=[
                {"Date": "1141126", "Code": "0050", "Name": "元大台灣50", "TradeVolume": "1,000"},
                {"Date": "1141126", "Code": "2330", "Name": "台積電", "Extra": "ignored"},
            ],
        )

    client = _client(handler)
    try:
        records = await client.fetch_stock_day_all()
    finally:
        await client.close()

    assert requested == [f"{BASE_URL}{STOCK_DAY_ALL_PATH}"]
    assert [r.code for r in records] == ["0050", "2330"]
    assert records[0].trade_volume == "1,000"
    assert records[1].trade_volume is None


@pytest.mark.asyncio
async def test_non_success_status_raises():
    client = _client(lambda request: httpx.Response(503, text="maintenance"))
    with pytest.raises(TwseAPIError) as excinfo:
        await client.fetch_stock_day_all()
    await client.close()

    assert excinfo.value.status_code == 503


@pytest.mark.asyncio
async def test_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(TwseAPIError):
        await client.fetch_stock_day_all()
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"stat": "OK"}),
        httpx.Response(200, json=["not an object"]),
    ],
)
async def test_malformed_body_raises(response):
    client = _client(lambda request: response)
    with pytest.raises(TwseAPIError):
        await client.fetch_stock_day_all()
    await client.close()
