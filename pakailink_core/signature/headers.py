"""
Header Functions
================
SNAP timestamps, external ids and request header assembly.
"""

import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Dict, Mapping, Optional

import structlog

from .models import SignedRequest

logger = structlog.get_logger(__name__)

# Asia/Jakarta has no DST, a fixed offset is exact
JAKARTA_TZ = timezone(timedelta(hours=7), "WIB")

REQUIRED_API_HEADERS = (
    "Authorization",
    "Content-Type",
    "X-TIMESTAMP",
    "X-PARTNER-ID",
    "X-EXTERNAL-ID",
    "CHANNEL-ID",
    "X-SIGNATURE",
)


def snap_timestamp(now: Optional[datetime] = None) -> str:
    """
    Format a timestamp as SNAP expects: ``YYYY-MM-DDThh:mm:ss+07:00``.

    Args:
        now: Aware datetime to format (defaults to the current time)
    """
    now = now or datetime.now(timezone.utc)
    return now.astimezone(JAKARTA_TZ).isoformat(timespec="seconds")


class ExternalIdGenerator:
    """
    Numeric X-EXTERNAL-ID values, strictly increasing within a process.

    Each id is the current epoch milliseconds followed by a 3-digit
    sequence. When more than 1000 ids are requested in the same
    millisecond the millisecond component is advanced instead, so ids
    never repeat.
    """

    def __init__(self, clock=time.time):
        self._clock = clock
        self._lock = threading.Lock()
        self._last_ms = 0
        self._seq = 0

    def next(self) -> str:
        with self._lock:
            now_ms = int(self._clock() * 1000)
            if now_ms > self._last_ms:
                self._last_ms = now_ms
                self._seq = 0
            else:
                self._seq += 1
                if self._seq > 999:
                    self._last_ms += 1
                    self._seq = 0
            return f"{self._last_ms}{self._seq:03d}"


def create_api_headers(
    signed: SignedRequest,
    partner_id: str,
    channel_id: str,
    external_id: str,
    extra_headers: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Build the header set for a symmetric-signed API call.

    Caller-supplied headers are applied last and win over required ones.
    """
    headers = {
        "Authorization": f"Bearer {signed.access_token}",
        "Content-Type": "application/json",
        "X-TIMESTAMP": signed.timestamp,
        "X-PARTNER-ID": partner_id or "",
        "X-EXTERNAL-ID": external_id,
        "CHANNEL-ID": channel_id or "",
        "X-SIGNATURE": signed.signature,
    }
    if extra_headers:
        # Header names are case-insensitive; an override replaces, never duplicates
        required = {name.lower(): name for name in headers}
        overridden = [name for name in extra_headers if name.lower() in required]
        if overridden:
            logger.warning("Caller headers override required SNAP headers", headers=overridden)
        for name in overridden:
            headers.pop(required[name.lower()], None)
        headers.update(extra_headers)
    return headers


def create_token_headers(client_id: str, timestamp: str, signature: str) -> Dict[str, str]:
    """Headers for the B2B access token request."""
    return {
        "Content-Type": "application/json",
        "X-CLIENT-KEY": client_id,
        "X-TIMESTAMP": timestamp,
        "X-SIGNATURE": signature,
    }
