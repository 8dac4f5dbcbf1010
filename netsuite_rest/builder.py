from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

from .auth import sign
from .config import Credentials
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

REST_PATH = "services/rest"
SUITEQL_PATH = f"{REST_PATH}/query/v1/suiteql"
WORKBOOK_PATH = f"{REST_PATH}/query/v1/workbook"
DATASET_PATH = f"{REST_PATH}/query/v1/dataset"
RECORD_PATH = f"{REST_PATH}/record/v1"
SALES_ORDER_PATH = f"{RECORD_PATH}/salesOrder"
PURCHASE_ORDER_PATH = f"{RECORD_PATH}/purchaseOrder"
CASH_SALE_PATH = f"{RECORD_PATH}/cashSale"
EXPAND_SUB_RESOURCES_PARAM = "expandSubResources=true"

DEFAULT_HEADERS = {
    "Accept-Language": "en",
    "Content-Language": "en",
    "Content-Type": "application/json; charset=utf-8",
    # Don't keep server-side state for queries
    "Prefer": "transient",
}


@dataclass(frozen=True)
class SqlQuery:
    text: str


@dataclass(frozen=True)
class WorkbookQuery:
    workbook_id: str


@dataclass(frozen=True)
class DatasetQuery:
    dataset_id: str


@dataclass(frozen=True)
class RecordOp:
    method: str
    resource_path: str
    body: Optional[Any] = None


OperationDescriptor = Union[SqlQuery, WorkbookQuery, DatasetQuery, RecordOp]


@dataclass(frozen=True)
class PreparedRequest:
    url: str
    method: str
    body: Optional[Any] = None


@dataclass
class SignedRequest:
    url: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[Any] = None


def base_url(credentials: Credentials) -> str:
    return f"{credentials.scheme}://{credentials.api_host}"


def _query_url(credentials: Credentials, path: str) -> str:
    return f"{base_url(credentials)}/{path}?limit={credentials.query_limit}&offset=0"


def _record_url(credentials: Credentials, resource_path: str) -> str:
    path = resource_path.lstrip("/")
    # Exported record path constants are already rooted at services/rest
    if not path.startswith(f"{REST_PATH}/"):
        path = f"{RECORD_PATH}/{path}"
    return f"{base_url(credentials)}/{path}"


def build_request(
    descriptor: OperationDescriptor,
    credentials: Credentials,
    next_url: Optional[str] = None,
) -> PreparedRequest:
    """
    Resolves url, method and JSON body for one operation.
    For the query kinds a continuation url replaces the templated first-page url.
    """
    if descriptor is None:
        raise ConfigurationError("Request type required")

    if isinstance(descriptor, SqlQuery):
        url = next_url or _query_url(credentials, SUITEQL_PATH)
        return PreparedRequest(url=url, method="POST", body={"q": descriptor.text})

    if isinstance(descriptor, WorkbookQuery):
        url = next_url or _query_url(credentials, f"{WORKBOOK_PATH}/{descriptor.workbook_id}/result")
        return PreparedRequest(url=url, method="GET")

    if isinstance(descriptor, DatasetQuery):
        url = next_url or _query_url(credentials, f"{DATASET_PATH}/{descriptor.dataset_id}/result")
        return PreparedRequest(url=url, method="GET")

    if isinstance(descriptor, RecordOp):
        if not descriptor.method:
            raise ConfigurationError("Request method required")
        return PreparedRequest(
            url=_record_url(credentials, descriptor.resource_path),
            method=descriptor.method.upper(),
            body=descriptor.body,
        )

    raise ConfigurationError(f"Unrecognized request type: {type(descriptor).__name__}")


def signed_request(
    descriptor: OperationDescriptor,
    credentials: Credentials,
    next_url: Optional[str] = None,
    signer: Callable[..., Dict[str, str]] = sign,
) -> SignedRequest:
    prepared = build_request(descriptor, credentials, next_url=next_url)
    logger.debug(f"Request data: {prepared.method} {prepared.url}")
    headers = {**signer(prepared.url, prepared.method, credentials), **DEFAULT_HEADERS}
    return SignedRequest(url=prepared.url, method=prepared.method, headers=headers, body=prepared.body)
