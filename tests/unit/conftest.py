import pytest

from netsuite_rest.config import Credentials
from netsuite_rest.transport import Transport, TransportResponse

CREDS = {
    "api_host": "1234567.suitetalk.api.netsuite.com",
    "consumer_key": "ck",
    "consumer_secret": "cs",
    "account_id": "1234567",
    "token_key": "tk",
    "token_secret": "ts",
}


class FakeTransport(Transport):
    """Replays queued responses (or raises queued exceptions) and records every request."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.requests = []
        self.timeouts = []
        self.closed = False

    async def send(self, request, timeout=None):
        self.requests.append(request)
        self.timeouts.append(timeout)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self):
        self.closed = True


def page(items, has_more, offset, total, next_url=None):
    links = [{"rel": "self", "href": f"https://host/self?offset={offset}"}]
    if next_url:
        links.append({"rel": "next", "href": next_url})
    return TransportResponse(
        status_code=200,
        body={
            "links": links,
            "count": len(items),
            "hasMore": has_more,
            "items": items,
            "offset": offset,
            "totalResults": total,
        },
    )


@pytest.fixture
def creds():
    return Credentials.from_mapping(CREDS)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def make_page():
    return page


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def creds_mapping():
    return dict(CREDS)
