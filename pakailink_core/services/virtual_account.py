"""
Virtual Account Service
=======================
"""

from typing import Any, Dict

import structlog

from .base import BaseService
from .models import CreateVirtualAccount

logger = structlog.get_logger(__name__)


class VirtualAccountService(BaseService):

    async def create(self, data: CreateVirtualAccount) -> Dict[str, Any]:
        """
        Create a virtual account.

        Returns:
            Provider response with the ``virtualAccountData`` fields also
            merged at the top level.

        Raises:
            TransactionError: Creation failed for any reason
        """
        logger.info("Creating Virtual Account", amount=data.amount, bank_code=data.bank_code)
        payload = data.to_api_payload(self.config)

        response = await self._transact("create Virtual Account", self.endpoints.va_create, payload)

        va_data = response.get("virtualAccountData") or {}
        logger.info(
            "Virtual Account created successfully",
            va_number=va_data.get("virtualAccountNo"),
            partner_reference_no=va_data.get("partnerReferenceNo"),
        )
        return {**response, **va_data}

    async def inquiry_status(self, original_partner_reference_no: str) -> Dict[str, Any]:
        return await self._inquiry_status("VA", self.endpoints.va_inquiry, original_partner_reference_no)
