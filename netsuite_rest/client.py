from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

import httpx

from . import records
from .builder import OperationDescriptor
from .config import Credentials
from .search import SearchStream, suiteql_search
from .transport import HttpTransport, Transport, TransportResponse


class NetSuiteRestClient:
    """
    Entry point for the NetSuite REST API.

    Holds only the transport; credentials are passed to every call and are
    not kept between calls.
    """

    def __init__(self, transport: Optional[Transport] = None, http_client: Optional[httpx.AsyncClient] = None):
        self.transport = transport or HttpTransport(client=http_client)

    async def __aenter__(self) -> "NetSuiteRestClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    async def make_request(
        self,
        credentials: Union[Credentials, Mapping[str, Any]],
        descriptor: OperationDescriptor,
        next_url: Optional[str] = None,
    ) -> TransportResponse:
        return await records.make_request(self.transport, credentials, descriptor, next_url=next_url)

    def suiteql_search(
        self,
        credentials: Union[Credentials, Mapping[str, Any]],
        query: Optional[str] = None,
        workbook: Optional[str] = None,
        dataset: Optional[str] = None,
        on_total_results: Optional[Callable[[Optional[int]], Any]] = None,
    ) -> SearchStream:
        return suiteql_search(
            self.transport,
            credentials,
            query=query,
            workbook=workbook,
            dataset=dataset,
            on_total_results=on_total_results,
        )

    async def update(
        self,
        credentials: Union[Credentials, Mapping[str, Any]],
        id: Any = None,
        update_values: Optional[Any] = None,
        path: Optional[str] = None,
    ) -> TransportResponse:
        return await records.update(self.transport, credentials, id=id, update_values=update_values, path=path)

    async def get_record(
        self,
        credentials: Union[Credentials, Mapping[str, Any]],
        path: str,
        id: Any,
        expand_sub_resources: bool = False,
    ) -> TransportResponse:
        return await records.get_record(
            self.transport, credentials, path, id, expand_sub_resources=expand_sub_resources
        )
