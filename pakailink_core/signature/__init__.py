"""
Signature Module
================
SNAP request signing and callback signature verification.
"""

from .models import SignedRequest, CallbackEnvelope
from .signature import (
    minify_json,
    dump_json,
    hash_body,
    compute_symmetric_signature,
    compute_callback_signature,
    compare_signatures,
    SIGNATURE_ALGORITHM,
)
from .engine import SignatureEngine
from .headers import (
    snap_timestamp,
    ExternalIdGenerator,
    create_api_headers,
    create_token_headers,
    JAKARTA_TZ,
    REQUIRED_API_HEADERS,
)

__all__ = [
    # Models
    "SignedRequest",
    "CallbackEnvelope",
    # Signature
    "minify_json",
    "dump_json",
    "hash_body",
    "compute_symmetric_signature",
    "compute_callback_signature",
    "compare_signatures",
    "SIGNATURE_ALGORITHM",
    # Engine
    "SignatureEngine",
    # Headers
    "snap_timestamp",
    "ExternalIdGenerator",
    "create_api_headers",
    "create_token_headers",
    "JAKARTA_TZ",
    "REQUIRED_API_HEADERS",
]
