"""
E-money Service
===============
"""

from typing import Any, Dict

import structlog

from .base import BaseService
from .models import CreateEmoneyPayment

logger = structlog.get_logger(__name__)


class EmoneyService(BaseService):

    async def create_payment(self, data: CreateEmoneyPayment) -> Dict[str, Any]:
        logger.info(
            "Creating E-money payment",
            product_code=data.product_code,
            customer_id=data.customer_id,
            amount=data.amount,
        )
        payload = data.to_api_payload(self.config)

        response = await self._transact("create E-money payment", self.endpoints.emoney_create, payload)

        logger.info(
            "E-money payment created successfully",
            reference_no=response.get("referenceNo"),
            web_redirect_url=response.get("webRedirectUrl"),
        )
        return response

    async def inquiry_status(self, original_partner_reference_no: str) -> Dict[str, Any]:
        return await self._inquiry_status("E-money", self.endpoints.emoney_inquiry, original_partner_reference_no)
