"""
Signature Functions
===================
Pure HMAC helpers for SNAP request signing and callback verification.

Two schemes are in use and must stay distinct:

- API requests:  HMAC-SHA512 over
  ``METHOD:path:accessToken:sha256(minifiedBody):timestamp``
- Callbacks:     HMAC-SHA512 over ``rawBody + timestamp`` (no delimiter)

Both are base64-encoded and keyed by the client secret.
"""

import base64
import hashlib
import hmac
import json
from typing import Union

from ..exceptions import MalformedBodyError

SIGNATURE_ALGORITHM = "sha512"


def _to_bytes(value: Union[str, bytes]) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def minify_json(body: Union[str, bytes, None]) -> str:
    """
    Re-serialize a JSON document without extraneous whitespace.

    Key order is preserved, so minifying an already minified document is a
    no-op. An empty body stays empty.

    Raises:
        MalformedBodyError: If the body is non-empty and not valid JSON
    """
    if not body:
        return ""
    try:
        decoded = json.loads(body)
    except (TypeError, ValueError) as e:
        raise MalformedBodyError("Invalid JSON in request body", details=str(e))
    return dump_json(decoded)


def dump_json(data) -> str:
    """Serialize data the way it is transmitted and signed."""
    return json.dumps(data, separators=(",", ":"))


def hash_body(body: Union[str, bytes]) -> str:
    """
    Compute SHA-256 hash of a request body.

    Returns:
        Lowercase hex digest
    """
    return hashlib.sha256(_to_bytes(body)).hexdigest().lower()


def compute_symmetric_signature(
    secret: str,
    method: str,
    path: str,
    access_token: str,
    body_hash: str,
    timestamp: str,
) -> str:
    """
    Compute the HMAC-SHA512 signature for an authenticated API call.

    Args:
        secret: Client secret
        method: HTTP method (upper-cased here)
        path: Endpoint path including any query string
        access_token: B2B bearer token
        body_hash: Lowercase hex SHA-256 of the minified body
        timestamp: X-TIMESTAMP header value

    Returns:
        Base64-encoded signature
    """
    string_to_sign = f"{method.upper()}:{path}:{access_token}:{body_hash}:{timestamp}"
    digest = hmac.new(
        _to_bytes(secret),
        string_to_sign.encode("utf-8"),
        hashlib.sha512,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def compute_callback_signature(
    secret: str,
    raw_body: Union[str, bytes],
    timestamp: str,
) -> str:
    """Compute the signature PakaiLink attaches to callbacks."""
    message = _to_bytes(raw_body) + _to_bytes(timestamp)
    digest = hmac.new(_to_bytes(secret), message, hashlib.sha512).digest()
    return base64.b64encode(digest).decode("ascii")


def compare_signatures(expected: str, provided: str) -> bool:
    """Constant-time comparison of two base64 signatures."""
    return hmac.compare_digest(_to_bytes(expected), _to_bytes(provided))
