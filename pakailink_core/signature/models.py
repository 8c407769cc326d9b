"""
Signature Models
================
Value objects for signed requests and inbound callbacks.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SignedRequest:
    """An outgoing API call with its symmetric signature. Never persisted."""
    method: str
    path: str
    access_token: str
    body: str
    body_hash: str
    timestamp: str
    signature: str


@dataclass(frozen=True)
class CallbackEnvelope:
    """An inbound webhook exactly as received."""
    raw_body: bytes
    signature: str
    timestamp: str
