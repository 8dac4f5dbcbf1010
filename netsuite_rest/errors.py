from __future__ import annotations

from typing import Any, Optional

import httpx

# Network and timeout failures are raised by httpx and propagate unmodified.
TransportError = httpx.TransportError

UNKNOWN_ERROR_MESSAGE = "unknown error returned from NetSuite"


class NetSuiteError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(NetSuiteError, ValueError):
    """
    Invalid credentials, parameters, or operation selectors.
    Always raised before any request is sent.
    """


class ProtocolError(NetSuiteError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


def get_error_message(body: Any) -> Optional[str]:
    """Returns o:errorDetails[0].detail from a NetSuite error body, if present."""
    if not isinstance(body, dict):
        return None
    details = body.get("o:errorDetails")
    if not isinstance(details, list) or not details:
        return None
    first = details[0]
    if not isinstance(first, dict):
        return None
    return first.get("detail") or None
