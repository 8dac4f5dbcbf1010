from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .auth import sign
from .builder import EXPAND_SUB_RESOURCES_PARAM, OperationDescriptor, RecordOp, signed_request
from .config import Credentials, resolve_credentials
from .errors import ConfigurationError
from .transport import Transport, TransportResponse

logger = logging.getLogger(__name__)


async def make_request(
    transport: Transport,
    credentials: Union[Credentials, Mapping[str, Any]],
    descriptor: OperationDescriptor,
    next_url: Optional[str] = None,
    signer: Callable[..., Dict[str, str]] = sign,
) -> TransportResponse:
    """Sends one signed request and returns the raw response."""
    creds = resolve_credentials(credentials)
    request = signed_request(descriptor, creds, next_url=next_url, signer=signer)
    return await transport.send(request, timeout=creds.timeout)


async def update(
    transport: Transport,
    credentials: Union[Credentials, Mapping[str, Any]],
    id: Any = None,
    update_values: Optional[Any] = None,
    path: Optional[str] = None,
) -> TransportResponse:
    """
    PATCHes update_values onto the record at <path>/<id>.
    The response is returned as-is; callers check status_code themselves.
    """
    if not id:
        logger.debug("Missing id")
        raise ConfigurationError("id required to update")
    if not update_values:
        logger.debug("Missing update parameters")
        raise ConfigurationError("updateValues required to update")
    if not path:
        logger.debug("Missing path")
        raise ConfigurationError("path required to update")

    return await make_request(
        transport,
        credentials,
        RecordOp("PATCH", f"{path.rstrip('/')}/{id}", body=update_values),
    )


async def get_record(
    transport: Transport,
    credentials: Union[Credentials, Mapping[str, Any]],
    path: str,
    id: Any,
    expand_sub_resources: bool = False,
) -> TransportResponse:
    if not path or not id:
        raise ConfigurationError("path and id required to get a record")
    resource = f"{path.rstrip('/')}/{id}"
    if expand_sub_resources:
        resource = f"{resource}?{EXPAND_SUB_RESOURCES_PARAM}"
    return await make_request(transport, credentials, RecordOp("GET", resource))
