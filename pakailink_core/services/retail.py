"""
Retail Service
==============
Over-the-counter payments at modern retail outlets.
"""

from typing import Any, Dict

import structlog

from .base import BaseService
from .models import CreateRetailPayment

logger = structlog.get_logger(__name__)


class RetailService(BaseService):

    async def create_payment(self, data: CreateRetailPayment) -> Dict[str, Any]:
        logger.info("Creating retail payment", product_code=data.product_code, amount=data.amount)
        payload = data.to_api_payload(self.config)

        response = await self._transact("create retail payment", self.endpoints.retail_create, payload)

        logger.info(
            "Retail payment created successfully",
            reference_no=response.get("referenceNo"),
            payment_code=(response.get("additionalInfo") or {}).get("paymentCode"),
        )
        return response

    async def inquiry_status(self, original_partner_reference_no: str) -> Dict[str, Any]:
        return await self._inquiry_status("Retail", self.endpoints.retail_inquiry, original_partner_reference_no)
