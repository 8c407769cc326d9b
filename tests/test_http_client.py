"""
Unit Tests for the Signed API Client
====================================
"""

import hashlib

import httpx
import pytest

from pakailink_core.exceptions import (
    ApiError,
    AuthenticationError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)
from pakailink_core.signature import compute_symmetric_signature

PATH = "/snap/v1.0/qr/qr-mpm-generate"
BODY = {"partnerReferenceNo": "REF-1", "amount": {"value": "10000.00", "currency": "IDR"}}


class TestSignedRequests:
    """Tests for what goes over the wire."""

    @pytest.mark.asyncio
    async def test_signature_covers_transmitted_bytes(self, api_client, provider):
        """The signature must verify against exactly the body that was sent."""
        await api_client.post(PATH, BODY)

        request = provider.api_requests[0]
        body_hash = hashlib.sha256(request.content).hexdigest()
        expected = compute_symmetric_signature(
            "secret-abc", "POST", PATH, "token-1", body_hash, request.headers["X-TIMESTAMP"]
        )
        assert request.headers["X-SIGNATURE"] == expected
        assert request.content == b'{"partnerReferenceNo":"REF-1","amount":{"value":"10000.00","currency":"IDR"}}'

    @pytest.mark.asyncio
    async def test_required_headers(self, api_client, provider):
        await api_client.post(PATH, BODY)

        headers = provider.api_requests[0].headers
        assert headers["Authorization"] == "Bearer token-1"
        assert headers["Content-Type"] == "application/json"
        assert headers["X-PARTNER-ID"] == "partner-1"
        assert headers["CHANNEL-ID"] == "95221"
        assert headers["X-EXTERNAL-ID"].isdigit()
        assert headers["X-TIMESTAMP"].endswith("+07:00")

    @pytest.mark.asyncio
    async def test_pre_encoded_body_is_minified(self, api_client, provider):
        await api_client.post(PATH, '{\n  "a": 1,\n  "b": 2\n}')

        assert provider.api_requests[0].content == b'{"a":1,"b":2}'

    @pytest.mark.asyncio
    async def test_get_signs_query_string(self, api_client, provider):
        await api_client.get("/snap/v1.0/balance", params={"page": 2})

        request = provider.api_requests[0]
        expected = compute_symmetric_signature(
            "secret-abc",
            "GET",
            "/snap/v1.0/balance?page=2",
            "token-1",
            hashlib.sha256(b"").hexdigest(),
            request.headers["X-TIMESTAMP"],
        )
        assert request.url.query == b"page=2"
        assert request.content == b""
        assert request.headers["X-SIGNATURE"] == expected

    @pytest.mark.asyncio
    async def test_extra_headers_win(self, api_client, provider):
        await api_client.request("POST", PATH, BODY, extra_headers={"X-PARTNER-ID": "other", "X-DEVICE-ID": "d-1"})

        headers = provider.api_requests[0].headers
        assert headers["X-PARTNER-ID"] == "other"
        assert headers["X-DEVICE-ID"] == "d-1"

    @pytest.mark.asyncio
    async def test_lowercase_override_sends_single_header(self, api_client, provider):
        """Should transmit one X-SIGNATURE carrying the override, not two."""
        await api_client.request("POST", PATH, BODY, extra_headers={"x-signature": "override"})

        headers = provider.api_requests[0].headers
        assert headers.get_list("X-SIGNATURE") == ["override"]

    @pytest.mark.asyncio
    async def test_external_ids_differ_between_calls(self, api_client, provider):
        await api_client.post(PATH, BODY)
        await api_client.post(PATH, BODY)

        ids = [request.headers["X-EXTERNAL-ID"] for request in provider.api_requests]
        assert ids[0] != ids[1]


class TestRetryPolicy:
    """Tests for 5xx/429/connection retries."""

    @pytest.mark.asyncio
    async def test_persistent_503_exhausts_attempts(self, api_client, provider):
        """Should try exactly retry_times times then raise ApiError(503)."""
        provider.api_responses = [(503, {"responseCode": "5030000", "responseMessage": "Service Unavailable"})]

        with pytest.raises(ApiError) as exc_info:
            await api_client.post(PATH, BODY)

        assert exc_info.value.status_code == 503
        assert exc_info.value.provider_code == "5030000"
        assert len(provider.api_requests) == 3
        assert len(provider.token_requests) == 1

    @pytest.mark.asyncio
    async def test_recovers_after_transient_errors(self, api_client, provider):
        provider.api_responses = [
            (502, None),
            (429, {"responseCode": "4290000", "responseMessage": "Too Many Requests"}),
            (200, {"responseCode": "2000000", "referenceNo": "R-9"}),
        ]

        result = await api_client.post(PATH, BODY)

        assert result["referenceNo"] == "R-9"
        assert len(provider.api_requests) == 3

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self, api_client, provider):
        provider.api_responses = [(400, {"responseCode": "4004701", "responseMessage": "Invalid Field Format"})]

        with pytest.raises(ApiError) as exc_info:
            await api_client.post(PATH, BODY)

        assert len(provider.api_requests) == 1
        assert exc_info.value.provider_code == "4004701"
        assert exc_info.value.provider_message == "Invalid Field Format"

    @pytest.mark.asyncio
    async def test_connection_errors_map_to_service_unavailable(self, api_client, provider):
        provider.api_responses = [httpx.ConnectError("connection refused")]

        with pytest.raises(ServiceUnavailableError):
            await api_client.post(PATH, BODY)

        assert len(provider.api_requests) == 3

    @pytest.mark.asyncio
    async def test_timeouts_map_to_service_timeout(self, api_client, provider):
        provider.api_responses = [httpx.ReadTimeout("timed out")]

        with pytest.raises(ServiceTimeoutError) as exc_info:
            await api_client.post(PATH, BODY)

        assert isinstance(exc_info.value, ApiError)


class TestUnauthorizedHandling:
    """Tests for the single refresh-and-retry on 401."""

    @pytest.mark.asyncio
    async def test_refreshes_once_and_retries(self, api_client, provider):
        provider.api_responses = [
            (401, {"responseCode": "4010001", "responseMessage": "Invalid Token (B2B)"}),
            (200, {"responseCode": "2000000"}),
        ]

        result = await api_client.post(PATH, BODY)

        assert result["responseCode"] == "2000000"
        assert len(provider.token_requests) == 2
        assert len(provider.api_requests) == 2
        assert provider.api_requests[1].headers["Authorization"] == "Bearer token-2"

    @pytest.mark.asyncio
    async def test_retry_reuses_timestamp_and_external_id(self, api_client, provider):
        provider.api_responses = [(401, {"responseCode": "4010001"}), (200, {"responseCode": "2000000"})]

        await api_client.post(PATH, BODY)

        first, second = provider.api_requests
        assert first.headers["X-EXTERNAL-ID"] == second.headers["X-EXTERNAL-ID"]
        assert first.headers["X-TIMESTAMP"] == second.headers["X-TIMESTAMP"]
        assert first.headers["X-SIGNATURE"] != second.headers["X-SIGNATURE"]

    @pytest.mark.asyncio
    async def test_second_401_raises_authentication_error(self, api_client, provider):
        provider.api_responses = [(401, {"responseCode": "4010001", "responseMessage": "Invalid Token (B2B)"})]

        with pytest.raises(AuthenticationError) as exc_info:
            await api_client.post(PATH, BODY)

        assert exc_info.value.status_code == 401
        assert len(provider.token_requests) == 2
        assert len(provider.api_requests) == 2


class TestResponseMapping:
    """Tests for provider error mapping."""

    @pytest.mark.asyncio
    async def test_fallback_code_and_message_keys(self, api_client, provider):
        provider.api_responses = [(404, {"code": "NOT_FOUND", "message": "No such transaction"})]

        with pytest.raises(ApiError) as exc_info:
            await api_client.post(PATH, BODY)

        assert exc_info.value.provider_code == "NOT_FOUND"
        assert exc_info.value.provider_message == "No such transaction"

    @pytest.mark.asyncio
    async def test_unknown_error_body(self, api_client, provider):
        provider.api_responses = [(409, None)]

        with pytest.raises(ApiError) as exc_info:
            await api_client.post(PATH, BODY)

        assert exc_info.value.status_code == 409
        assert exc_info.value.provider_code == "UNKNOWN"
        assert exc_info.value.provider_message == "Unknown error"

    @pytest.mark.asyncio
    async def test_non_object_success_body(self, api_client, provider):
        provider.api_responses = [(200, ["not", "an", "object"])]

        with pytest.raises(ApiError) as exc_info:
            await api_client.post(PATH, BODY)

        assert exc_info.value.provider_code == "INVALID_RESPONSE"
