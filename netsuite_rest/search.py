"""
Paginated SuiteQL / workbook / dataset search.

All three query kinds return the same envelope
({items, hasMore, offset, totalResults, links}) and share one pagination
loop. Pages are fetched strictly one at a time, following the server's
"next" link, and items are handed to the caller as each page arrives.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, AsyncIterator, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .auth import sign
from .builder import (
    DatasetQuery,
    OperationDescriptor,
    SqlQuery,
    WorkbookQuery,
    build_request,
    signed_request,
)
from .config import Credentials, resolve_credentials
from .errors import UNKNOWN_ERROR_MESSAGE, ConfigurationError, ProtocolError, get_error_message
from .transport import Transport

logger = logging.getLogger(__name__)


class Link(BaseModel):
    model_config = ConfigDict(extra="ignore")

    rel: str = ""
    href: str = ""


class Page(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    items: List[Any] = Field(default_factory=list)
    has_more: bool = Field(default=False, alias="hasMore")
    offset: Optional[int] = None
    count: Optional[int] = None
    total_results: Optional[int] = Field(default=None, alias="totalResults")
    links: List[Link] = Field(default_factory=list)

    @field_validator("items", "links", mode="before")
    @classmethod
    def _null_to_empty(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []

    @property
    def next_link(self) -> Optional[str]:
        for link in self.links:
            if link.rel == "next":
                return link.href or None
        return None

    @classmethod
    def from_body(cls, body: Any) -> "Page":
        if not isinstance(body, dict):
            raise ProtocolError(f"Expected a JSON object page, got {type(body).__name__}", body=body)
        try:
            return cls.model_validate(body)
        except ValidationError as e:
            raise ProtocolError(f"Malformed result page: {e}", body=body) from e


class SearchState(str, Enum):
    INIT = "init"
    FETCHING = "fetching"
    CONTINUING = "continuing"
    DONE = "done"
    ERRORED = "errored"


def select_operation(
    query: Optional[str] = None,
    workbook: Optional[str] = None,
    dataset: Optional[str] = None,
) -> OperationDescriptor:
    if workbook and dataset:
        raise ConfigurationError("workbook and dataset cannot be used together")
    if workbook:
        return WorkbookQuery(workbook)
    if dataset:
        return DatasetQuery(dataset)
    if not query:
        raise ConfigurationError("query, workbook or dataset required")
    return SqlQuery(query)


class SearchStream:
    """
    Lazy async sequence over every item of a search.

        async with SearchStream(transport, creds, query="SELECT id FROM customer") as stream:
            async for item in stream:
                ...

    on_total_results is called with totalResults from the first page before
    any of its items are yielded; stream.total_results holds the same value.
    A failed page raises from the iterator and ends the stream. Closing the
    stream (or leaving the async with block) stops further page fetches.
    """

    def __init__(
        self,
        transport: Transport,
        credentials: Union[Credentials, Mapping[str, Any]],
        query: Optional[str] = None,
        workbook: Optional[str] = None,
        dataset: Optional[str] = None,
        on_total_results: Optional[Callable[[Optional[int]], Any]] = None,
        signer: Callable[..., Dict[str, str]] = sign,
    ):
        # Configuration errors raise here, before any request
        self.credentials = resolve_credentials(credentials)
        self.descriptor = select_operation(query, workbook, dataset)
        self.state = SearchState.INIT
        self.error: Optional[BaseException] = None
        self.transport = transport
        self.on_total_results = on_total_results
        self.signer = signer
        self.next_url: str = build_request(self.descriptor, self.credentials).url
        self.offset = 0
        self.total_results: Optional[int] = None
        self.pages_fetched = 0
        self._closed = False
        self._started = False
        self._items: Optional[AsyncIterator[Any]] = None

    def _fail(self, error: BaseException) -> None:
        self.state = SearchState.ERRORED
        self.error = error

    @property
    def done(self) -> bool:
        return self.state in (SearchState.DONE, SearchState.ERRORED)

    async def _fetch_page(self) -> Page:
        request = signed_request(self.descriptor, self.credentials, next_url=self.next_url, signer=self.signer)
        response = await self.transport.send(request, timeout=self.credentials.timeout)
        self.pages_fetched += 1

        if not response.ok:
            message = get_error_message(response.body) or UNKNOWN_ERROR_MESSAGE
            logger.warning(f"Search page failed ({response.status_code}): {message}")
            raise ProtocolError(message, status_code=response.status_code, body=response.body)

        page = Page.from_body(response.body)
        logger.debug(f"Page at offset {page.offset}: {len(page.items)} items, hasMore={page.has_more}")
        if page.offset is not None:
            self.offset = page.offset
        return page

    def _signal_total(self, total: Optional[int]) -> None:
        logger.debug(f"Total results: {total}")
        self.total_results = total
        if self.on_total_results is not None:
            self.on_total_results(total)

    async def pages(self) -> AsyncIterator[Page]:
        """Yields each result page in order. A stream can only be consumed once."""
        if self._started:
            raise RuntimeError("SearchStream has already been consumed")
        self._started = True

        has_more = True
        signalled = False
        while has_more and not self._closed:
            self.state = SearchState.FETCHING
            try:
                page = await self._fetch_page()
                if page.offset == 0 and not signalled:
                    signalled = True
                    self._signal_total(page.total_results)
            except Exception as e:
                self._fail(e)
                raise

            yield page

            has_more = page.has_more
            if has_more:
                next_url = page.next_link
                if not next_url:
                    error = ProtocolError("hasMore is set but the page has no next link", body=page.model_dump())
                    self._fail(error)
                    raise error
                logger.debug(f"Next URL: {next_url}")
                self.next_url = next_url
                self.state = SearchState.CONTINUING

        if not has_more:
            self.state = SearchState.DONE

    async def _iter_items(self) -> AsyncIterator[Any]:
        pages = self.pages()
        try:
            async for page in pages:
                for item in page.items:
                    yield item
        finally:
            await pages.aclose()

    def __aiter__(self) -> "SearchStream":
        return self

    async def __anext__(self) -> Any:
        if self._items is None:
            self._items = self._iter_items()
        return await self._items.__anext__()

    async def collect(self) -> List[Any]:
        """Reads the whole result set into memory."""
        return [item async for item in self]

    async def aclose(self) -> None:
        self._closed = True
        if self._items is not None:
            await self._items.aclose()
        if self.state is not SearchState.ERRORED:
            self.state = SearchState.DONE

    async def __aenter__(self) -> "SearchStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def suiteql_search(
    transport: Transport,
    credentials: Union[Credentials, Mapping[str, Any]],
    query: Optional[str] = None,
    workbook: Optional[str] = None,
    dataset: Optional[str] = None,
    on_total_results: Optional[Callable[[Optional[int]], Any]] = None,
) -> SearchStream:
    """Starts a search. Configuration errors raise here, before any request."""
    return SearchStream(
        transport,
        credentials,
        query=query,
        workbook=workbook,
        dataset=dataset,
        on_total_results=on_total_results,
    )
