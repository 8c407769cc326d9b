"""
PakaiLink Gateway
=================
One object that wires the signing, auth, HTTP and product layers together.

Usage:
    async with PakaiLink.from_env() as pakailink:
        va = await pakailink.virtual_account.create(
            CreateVirtualAccount(amount=10000, customer_name="Budi", bank_code=BankCode.BRI)
        )
"""

from typing import Any, Dict, Optional

import httpx

from .auth import AuthClient, InMemoryTokenStore, RedisTokenStore, TokenStore
from .callbacks import CallbackDispatcher, EventBus
from .config import PakaiLinkConfig
from .http import ApiClient
from .services import (
    BalanceService,
    EmoneyService,
    MerchantService,
    QrisService,
    RetailService,
    TopupService,
    TransferService,
    VirtualAccountService,
)
from .signature import SignatureEngine


class PakaiLink:
    """
    Entry point for merchant code.

    Attributes:
        virtual_account, qris, emoney, transfer, retail, topup, balance, merchant:
            Product services sharing one ApiClient
        callbacks: Dispatcher for inbound webhooks
    """

    def __init__(
        self,
        config: Optional[PakaiLinkConfig] = None,
        token_store: Optional[TokenStore] = None,
        event_bus: Optional[EventBus] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or PakaiLinkConfig()
        self.signature_engine = SignatureEngine.from_config(self.config)
        self.auth = AuthClient(
            self.config,
            self.signature_engine,
            token_store=token_store or self._default_token_store(self.config),
            http_client=http_client,
        )
        self.client = ApiClient(self.config, self.auth, self.signature_engine, http_client=http_client)
        self.callbacks = CallbackDispatcher(self.signature_engine, event_bus)

        self.virtual_account = VirtualAccountService(self.client)
        self.qris = QrisService(self.client)
        self.emoney = EmoneyService(self.client)
        self.transfer = TransferService(self.client)
        self.retail = RetailService(self.client)
        self.topup = TopupService(self.client)
        self.balance = BalanceService(self.client)
        self.merchant = MerchantService(self.client)

    @staticmethod
    def _default_token_store(config: PakaiLinkConfig) -> TokenStore:
        if config.redis_url:
            return RedisTokenStore.from_url(config.redis_url)
        return InMemoryTokenStore()

    @classmethod
    def from_env(cls, **kwargs) -> "PakaiLink":
        return cls(PakaiLinkConfig.from_env(), **kwargs)

    @property
    def event_bus(self) -> EventBus:
        return self.callbacks.event_bus

    async def get_balance(self) -> Dict[str, Any]:
        return await self.balance.inquiry()

    async def get_balance_history(
        self,
        from_date_time: str,
        to_date_time: str,
        page_number: int = 1,
        page_size: int = 100,
    ) -> Dict[str, Any]:
        return await self.balance.history(from_date_time, to_date_time, page_size=page_size, page_number=page_number)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self):
        await self.client.aclose()
