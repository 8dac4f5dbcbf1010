from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from .builder import SignedRequest

logger = logging.getLogger(__name__)


@dataclass
class TransportResponse:
    status_code: int
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400


class Transport(ABC):
    """
    Executes one HTTP request.
    Must return error statuses as data rather than raising on them.
    """

    @abstractmethod
    async def send(self, request: SignedRequest, timeout: Optional[float] = None) -> TransportResponse:
        ...

    async def close(self) -> None:
        return None

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        logger.debug(f"Non-JSON response body ({response.status_code})")
        return None


class HttpTransport(Transport):
    """
    httpx based transport. HTTP/2 is on by default.

    Network and timeout failures (httpx.TransportError) propagate to the caller.
    A client passed in by the caller is left open on close().
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, http2: bool = True):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(http2=http2, timeout=None)

    async def close(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def send(self, request: SignedRequest, timeout: Optional[float] = None) -> TransportResponse:
        # None means no limit, overriding any client default
        kwargs: Dict[str, Any] = {"headers": request.headers, "timeout": timeout}
        if request.body is not None:
            kwargs["json"] = request.body

        response = await self._client.request(request.method, request.url, **kwargs)
        logger.debug(f"{request.method} {request.url} -> {response.status_code}")
        return TransportResponse(
            status_code=response.status_code,
            body=parse_body(response),
            headers=dict(response.headers),
        )
