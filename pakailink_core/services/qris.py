"""
QRIS Service
============
Merchant Presented Mode QR generation and status inquiry.
"""

from typing import Any, Dict

import structlog

from .base import BaseService
from .models import GenerateQris

logger = structlog.get_logger(__name__)


class QrisService(BaseService):

    async def generate(self, data: GenerateQris) -> Dict[str, Any]:
        """Generate a dynamic QRIS code. Raises TransactionError on failure."""
        logger.info("Generating QRIS", amount=data.amount, merchant_id=data.merchant_id)
        payload = data.to_api_payload(self.config)

        response = await self._transact("generate QRIS", self.endpoints.qris_generate, payload)

        logger.info(
            "QRIS generated successfully",
            nmid=response.get("nmid"),
            reference_no=response.get("referenceNo"),
        )
        return response

    async def inquiry_status(self, original_partner_reference_no: str) -> Dict[str, Any]:
        return await self._inquiry_status("QRIS", self.endpoints.qris_inquiry, original_partner_reference_no)
