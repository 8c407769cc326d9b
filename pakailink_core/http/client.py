"""
PakaiLink API Client
====================
Signed, retrying async HTTP client for the SNAP API.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

import httpx
from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_fixed

from ..auth import AuthClient
from ..config import PakaiLinkConfig
from ..exceptions import (
    ApiError,
    AuthenticationError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)
from ..logs import redact_headers
from ..signature import (
    ExternalIdGenerator,
    SignatureEngine,
    create_api_headers,
    dump_json,
    minify_json,
    snap_timestamp,
)

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429}

Body = Union[Mapping[str, Any], list, str, bytes, None]


class _RetryableResponse(Exception):
    """Carries a 5xx/429 response through the retry loop."""
    def __init__(self, response: httpx.Response):
        self.response = response
        super().__init__(f"HTTP {response.status_code}")


def _is_retryable_status(status: int) -> bool:
    return status >= 500 or status in RETRYABLE_STATUS_CODES


class ApiClient:
    """
    Signed async HTTP client for the PakaiLink SNAP API.

    Features:
    - Symmetric signature over the exact bytes transmitted.
    - Retries on connection errors, 5xx and 429 (fixed delay, bounded attempts).
    - One token refresh and one extra attempt when the provider answers 401.
    - Provider error mapping to ApiError / AuthenticationError.
    """

    def __init__(
        self,
        config: PakaiLinkConfig,
        auth: AuthClient,
        signature_engine: SignatureEngine,
        http_client: Optional[httpx.AsyncClient] = None,
        external_ids: Optional[ExternalIdGenerator] = None,
    ):
        self.config = config
        self.auth = auth
        self.signature_engine = signature_engine
        self.external_ids = external_ids or ExternalIdGenerator()
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"),
            timeout=config.timeout,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self):
        """Close the underlying HTTP clients."""
        if self._owns_client:
            await self.client.aclose()
        await self.auth.aclose()

    @staticmethod
    def _encode_body(body: Body) -> str:
        """Serialize the outgoing body once; these are the bytes signed and sent."""
        if body is None:
            return ""
        if isinstance(body, (str, bytes)):
            return minify_json(body)
        if not body:
            return ""
        return dump_json(body)

    def _map_transport_error(self, exc: httpx.TransportError) -> Exception:
        if isinstance(exc, httpx.TimeoutException):
            return ServiceTimeoutError("Request timed out", details=str(exc))
        return ServiceUnavailableError(f"Failed to connect: {exc}", details=str(exc))

    async def _send(
        self,
        method: str,
        path: str,
        payload: str,
        access_token: str,
        timestamp: str,
        external_id: str,
        extra_headers: Optional[Mapping[str, str]],
    ) -> httpx.Response:
        signed = self.signature_engine.build_signed_request(method, path, access_token, payload, timestamp)
        headers = create_api_headers(
            signed,
            partner_id=self.config.partner_id,
            channel_id=self.config.channel_id,
            external_id=external_id,
            extra_headers=extra_headers,
        )
        logger.debug(f"Making API request {method} {path} headers={redact_headers(headers)}")
        return await self.client.request(
            method,
            path,
            content=signed.body.encode("utf-8") if signed.body else None,
            headers=headers,
        )

    async def _send_with_retry(self, *args) -> httpx.Response:
        """Send with the configured retry policy. Returns the last response."""
        retrying = AsyncRetrying(
            retry=retry_if_exception_type((httpx.TransportError, _RetryableResponse)),
            stop=stop_after_attempt(max(self.config.retry_times, 1)),
            wait=wait_fixed(self.config.retry_delay),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._send(*args)
                    if _is_retryable_status(response.status_code):
                        raise _RetryableResponse(response)
        except _RetryableResponse as e:
            return e.response
        except httpx.TransportError as e:
            logger.error(f"PakaiLink request failed after retries: {e}")
            raise self._map_transport_error(e)
        return response

    async def request(
        self,
        method: str,
        path: str,
        body: Body = None,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Make an authenticated, signed API request.

        Args:
            method: HTTP method
            path: Endpoint path, including any query string
            body: JSON-serializable body, or an already-encoded JSON string
            extra_headers: Additional headers; applied last (last write wins)

        Returns:
            Parsed JSON response body

        Raises:
            AuthenticationError: Token could not be obtained, or 401 after refresh
            ApiError: Non-2xx provider response
            ServiceUnavailableError: Connection failures after all retries
        """
        method = method.upper()
        payload = self._encode_body(body)
        timestamp = snap_timestamp()
        external_id = self.external_ids.next()

        # Attempt 1 (with retry policy) -> on 401: refresh -> Attempt 2 (single) -> done
        access_token = await self.auth.get_access_token()
        response = await self._send_with_retry(
            method, path, payload, access_token, timestamp, external_id, extra_headers
        )

        if response.status_code == 401:
            logger.warning(f"Token rejected for {method} {path}, refreshing and retrying once")
            access_token = await self.auth.refresh_token(stale_token=access_token)
            try:
                response = await self._send(
                    method, path, payload, access_token, timestamp, external_id, extra_headers
                )
            except httpx.TransportError as e:
                raise self._map_transport_error(e)

            if response.status_code == 401:
                code, message, body_data = self._extract_error(response)
                logger.error(f"Authentication failed after token refresh [{code}]: {message}")
                raise AuthenticationError(
                    f"Authentication failed: {message}",
                    status_code=401,
                    details=body_data,
                )

        return self._handle_response(response)

    @staticmethod
    def _parse_json(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return None

    def _extract_error(self, response: httpx.Response):
        body = self._parse_json(response)
        body = body if isinstance(body, dict) else {}
        code = str(body.get("responseCode") or body.get("code") or "UNKNOWN")
        message = str(body.get("responseMessage") or body.get("message") or "Unknown error")
        return code, message, body

    def _handle_response(self, response: httpx.Response) -> Dict[str, Any]:
        status = response.status_code

        if response.is_success:
            body = self._parse_json(response)
            if not isinstance(body, dict):
                raise ApiError(
                    "PakaiLink API returned a non-JSON response",
                    status_code=status,
                    provider_code="INVALID_RESPONSE",
                    provider_message="Response body is not a JSON object",
                    details=response.text,
                )
            logger.debug(f"API response received status={status}")
            return body

        code, message, body = self._extract_error(response)
        logger.error(f"API error response status={status} code={code} message={message}")
        raise ApiError(
            f"PakaiLink API error [{code}]: {message}",
            status_code=status,
            provider_code=code,
            provider_message=message,
            details=body,
        )

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if params:
            path = f"{path}?{urlencode(params)}"
        return await self.request("GET", path)

    async def post(self, path: str, json: Body = None) -> Dict[str, Any]:
        return await self.request("POST", path, json)

    async def put(self, path: str, json: Body = None) -> Dict[str, Any]:
        return await self.request("PUT", path, json)

    async def delete(self, path: str, json: Body = None) -> Dict[str, Any]:
        return await self.request("DELETE", path, json)
