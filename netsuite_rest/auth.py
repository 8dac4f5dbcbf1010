"""
Token-based authentication (TBA) for the NetSuite REST API.

NetSuite signs every request with one-legged OAuth 1.0 using HMAC-SHA256,
the consumer + token secrets as the key, and the account id as the realm.
Signatures are bound to url, method, timestamp and nonce, so headers are
built fresh for every request.
"""
from __future__ import annotations

import logging
import time
from typing import Dict, Optional

from oauthlib.common import generate_token
from oauthlib.oauth1 import SIGNATURE_HMAC_SHA256, Client

from .config import Credentials

logger = logging.getLogger(__name__)

NONCE_LENGTH = 20


def generate_nonce() -> str:
    return generate_token(NONCE_LENGTH)


def generate_timestamp() -> str:
    return str(int(time.time()))


def oauth_client(
    credentials: Credentials,
    nonce: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> Client:
    return Client(
        credentials.consumer_key,
        client_secret=credentials.consumer_secret,
        resource_owner_key=credentials.token_key,
        resource_owner_secret=credentials.token_secret,
        signature_method=SIGNATURE_HMAC_SHA256,
        realm=credentials.account_id,
        nonce=nonce or generate_nonce(),
        timestamp=timestamp or generate_timestamp(),
    )


def sign(
    url: str,
    method: str,
    credentials: Credentials,
    *,
    nonce: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> Dict[str, str]:
    """
    Returns the Authorization header for one request.
    Pass nonce/timestamp only to get deterministic signatures in tests.
    """
    client = oauth_client(credentials, nonce=nonce, timestamp=timestamp)
    _, headers, _ = client.sign(url, http_method=method.upper())
    return {"Authorization": headers["Authorization"]}
