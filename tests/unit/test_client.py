import json

import httpx
import pytest

from netsuite_rest import NetSuiteRestClient, ProtocolError, SALES_ORDER_PATH

BASE = "https://1234567.suitetalk.api.netsuite.com/services/rest"


def paged_handler(calls):
    pages = {
        "0": {
            "items": [{"id": "1"}, {"id": "2"}],
            "hasMore": True,
            "offset": 0,
            "totalResults": 3,
            "links": [{"rel": "next", "href": f"{BASE}/query/v1/suiteql?limit=2&offset=2"}],
        },
        "2": {"items": [{"id": "3"}], "hasMore": False, "offset": 2, "totalResults": 3, "links": []},
    }

    def handler(request: httpx.Request):
        calls.append(request)
        return httpx.Response(200, json=pages[request.url.params["offset"]])

    return handler


@pytest.mark.asyncio
async def test_search_end_to_end(creds):
    calls = []
    totals = []
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(paged_handler(calls)))

    async with NetSuiteRestClient(http_client=http_client) as client:
        stream = client.suiteql_search(creds, query="SELECT id FROM item", on_total_results=totals.append)
        items = [item async for item in stream]

    assert items == [{"id": "1"}, {"id": "2"}, {"id": "3"}]
    assert totals == [3]
    assert [c.method for c in calls] == ["POST", "POST"]
    assert json.loads(calls[0].content) == {"q": "SELECT id FROM item"}
    for call in calls:
        assert call.headers["Authorization"].startswith('OAuth realm="1234567"')
        assert call.headers["Prefer"] == "transient"
    await http_client.aclose()


@pytest.mark.asyncio
async def test_search_error_end_to_end(creds):
    def handler(request):
        return httpx.Response(400, json={"o:errorDetails": [{"detail": "Invalid search query."}]})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    async with NetSuiteRestClient(http_client=http_client) as client:
        with pytest.raises(ProtocolError, match="Invalid search query."):
            await client.suiteql_search(creds, query="SELEC").collect()
    await http_client.aclose()


@pytest.mark.asyncio
async def test_update_and_get_record(creds):
    calls = []

    def handler(request):
        calls.append(request)
        if request.method == "PATCH":
            return httpx.Response(204)
        return httpx.Response(200, json={"id": "42", "item": {"items": []}})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    async with NetSuiteRestClient(http_client=http_client) as client:
        updated = await client.update(creds, id="42", update_values={"memo": "m"}, path=SALES_ORDER_PATH)
        fetched = await client.get_record(creds, SALES_ORDER_PATH, "42", expand_sub_resources=True)

    assert updated.status_code == 204
    assert updated.body is None
    assert fetched.body["id"] == "42"
    assert str(calls[0].url) == f"{BASE}/record/v1/salesOrder/42"
    assert json.loads(calls[0].content) == {"memo": "m"}
    assert str(calls[1].url) == f"{BASE}/record/v1/salesOrder/42?expandSubResources=true"
    await http_client.aclose()


@pytest.mark.asyncio
async def test_close_closes_transport(fake_transport):
    async with NetSuiteRestClient(transport=fake_transport):
        pass
    assert fake_transport.closed
