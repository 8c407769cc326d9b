"""
Shared fixtures: RSA key pair, configuration and a fake PakaiLink provider.
"""

import json

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from pakailink_core.auth import AuthClient, InMemoryTokenStore
from pakailink_core.config import PakaiLinkConfig
from pakailink_core.http import ApiClient
from pakailink_core.signature import SignatureEngine

BASE_URL = "https://pakailink.test"
TOKEN_PATH = "/snap/v1.0/access-token/b2b"


class FakeProvider:
    """
    Scripted stand-in for the PakaiLink API, served through httpx.MockTransport.

    Token requests are answered with ``token-1``, ``token-2``... API requests
    consume ``api_responses`` in order; the last entry repeats. An entry is
    either ``(status, body)`` or an exception instance to raise.
    """

    def __init__(self):
        self.token_requests = []
        self.api_requests = []
        self.api_responses = []
        self.token_status = 200
        self.token_body = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            self.token_requests.append(request)
            body = self.token_body
            if body is None:
                body = {
                    "responseCode": "2007300",
                    "responseMessage": "Successful",
                    "accessToken": f"token-{len(self.token_requests)}",
                    "tokenType": "Bearer",
                    "expiresIn": "900",
                }
            return httpx.Response(self.token_status, json=body)

        self.api_requests.append(request)
        if not self.api_responses:
            return httpx.Response(200, json={"responseCode": "2000000", "responseMessage": "Successful"})

        entry = self.api_responses.pop(0) if len(self.api_responses) > 1 else self.api_responses[0]
        if isinstance(entry, Exception):
            raise entry
        status, body = entry
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def last_json(self):
        return json.loads(self.api_requests[-1].content)


@pytest.fixture
def rsa_key_files(tmp_path):
    """Write a fresh 2048-bit RSA key pair as PEM files."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    private_path = tmp_path / "pakailink_private.pem"
    private_path.write_bytes(key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ))

    public_path = tmp_path / "pakailink_public.pem"
    public_path.write_bytes(key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ))
    return private_path, public_path


@pytest.fixture
def config(rsa_key_files):
    private_path, public_path = rsa_key_files
    return PakaiLinkConfig(
        base_url=BASE_URL,
        client_id="client-123",
        client_secret="secret-abc",
        partner_id="partner-1",
        merchant_id="merchant-1",
        channel_id="95221",
        account_no="1234567890",
        private_key_path=str(private_path),
        public_key_path=str(public_path),
        timeout=5,
        retry_times=3,
        retry_delay_ms=0,
        token_ttl=840,
        callback_base_url="https://merchant.test/api/pakailink/callbacks",
    )


@pytest.fixture
def signature_engine(config):
    return SignatureEngine.from_config(config)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def http_client(provider):
    return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(provider.handler))


@pytest.fixture
def token_store():
    return InMemoryTokenStore()


@pytest.fixture
def auth_client(config, signature_engine, token_store, http_client):
    return AuthClient(config, signature_engine, token_store=token_store, http_client=http_client)


@pytest.fixture
def api_client(config, auth_client, signature_engine, http_client):
    return ApiClient(config, auth_client, signature_engine, http_client=http_client)
