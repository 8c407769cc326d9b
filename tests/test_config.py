"""
Unit Tests for Configuration and the Gateway Facade
===================================================
"""

import pytest

from pakailink_core import PakaiLink
from pakailink_core.auth import InMemoryTokenStore
from pakailink_core.config import PakaiLinkConfig


class TestConfig:

    def test_from_env(self, monkeypatch):
        """Should read credentials and tuning from PAKAILINK_* variables."""
        monkeypatch.setenv("PAKAILINK_CLIENT_ID", "env-client")
        monkeypatch.setenv("PAKAILINK_RETRY_TIMES", "5")
        monkeypatch.setenv("PAKAILINK_RETRY_DELAY", "250")
        monkeypatch.setenv("PAKAILINK_ENDPOINT_QRIS_GENERATE", "/custom/qris")

        config = PakaiLinkConfig.from_env()

        assert config.client_id == "env-client"
        assert config.retry_times == 5
        assert config.retry_delay == 0.25
        assert config.endpoints.qris_generate == "/custom/qris"

    def test_defaults(self, monkeypatch):
        for name in ("PAKAILINK_TOKEN_TTL", "PAKAILINK_TIMEOUT", "PAKAILINK_TOKEN_CACHE_KEY"):
            monkeypatch.delenv(name, raising=False)

        config = PakaiLinkConfig()

        assert config.token_ttl == 840
        assert config.timeout == 30
        assert config.token_cache_key == "pakailink:access_token"

    def test_callback_url(self):
        config = PakaiLinkConfig(callback_base_url="https://merchant.test/hooks/")

        assert config.callback_url("/qris") == "https://merchant.test/hooks/qris"

    def test_immutable(self, config):
        with pytest.raises(AttributeError):
            config.client_id = "other"


class TestGateway:

    @pytest.mark.asyncio
    async def test_services_share_one_client(self, config, http_client, provider):
        async with PakaiLink(config, token_store=InMemoryTokenStore(), http_client=http_client) as pakailink:
            await pakailink.get_balance()
            await pakailink.qris.inquiry_status("REF-1")

            assert pakailink.qris.client is pakailink.balance.client
            assert len(provider.token_requests) == 1
            assert len(provider.api_requests) == 2

    @pytest.mark.asyncio
    async def test_balance_history_and_merchant_registration(self, config, http_client, provider):
        async with PakaiLink(config, token_store=InMemoryTokenStore(), http_client=http_client) as pakailink:
            await pakailink.get_balance_history(
                "2026-10-01T00:00:00+07:00", "2026-10-19T00:00:00+07:00", page_number=3, page_size=25
            )
            history_body = provider.last_json
            await pakailink.merchant.register_dana_merchant({"merchantName": "Toko"}, {"ownerName": "Budi"})

            assert pakailink.merchant.client is pakailink.balance.client
            assert provider.api_requests[0].url.path == config.endpoints.balance_history
            assert history_body["pageNumber"] == "3"
            assert history_body["pageSize"] == "25"
            assert provider.api_requests[1].url.path == config.endpoints.registration_dana

    def test_registration_endpoints_from_env(self, monkeypatch):
        monkeypatch.setenv("PAKAILINK_ENDPOINT_REGISTRATION_QRIS", "/custom/registration/qris")

        config = PakaiLinkConfig.from_env()

        assert config.endpoints.registration_qris == "/custom/registration/qris"
        assert config.endpoints.registration_dana == "/snap/v1.0/registration/dana"


class TestLogging:

    def test_redact_headers(self):
        """Should drop credentials from loggable headers."""
        from pakailink_core.logs import redact_headers

        headers = {"Authorization": "Bearer secret", "X-SIGNATURE": "sig", "X-TIMESTAMP": "t"}

        assert redact_headers(headers) == {"X-TIMESTAMP": "t"}

    def test_token_preview(self):
        from pakailink_core.logs import token_preview

        assert token_preview("a" * 40) == "a" * 20 + "..."
        assert token_preview("") == ""

    def test_setup_logging(self):
        import logging

        import structlog

        from pakailink_core.logs import setup_logging

        root = logging.getLogger()
        saved_level, saved_handlers = root.level, list(root.handlers)
        try:
            setup_logging(level="DEBUG", json_output=False)

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            structlog.get_logger("pakailink_core.tests").info("configured", check=True)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
            structlog.reset_defaults()
