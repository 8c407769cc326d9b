"""
Top-up Service
==============
E-wallet customer top-up: customer inquiry, payment and status.
"""

from typing import Any, Dict, Optional

import structlog

from ..exceptions import PakaiLinkError
from .base import BaseService
from .models import TopupPayment, format_amount, generate_reference_no

logger = structlog.get_logger(__name__)


class TopupService(BaseService):

    async def inquiry_customer(
        self,
        customer_number: str,
        product_code: str,
        amount: float,
        partner_reference_no: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Validate the customer account before a top-up.

        Returns:
            Provider response; its ``sessionId`` is required by ``create_topup``
        """
        logger.info("Inquiring top-up customer", product_code=product_code, amount=amount)
        payload = {
            "partnerReferenceNo": partner_reference_no or generate_reference_no(),
            "customerNumber": customer_number,
            "amount": format_amount(amount),
            "additionalInfo": {"productCode": product_code},
        }
        try:
            response = await self.client.post(self.endpoints.topup_inquiry, payload)
        except PakaiLinkError as e:
            logger.error("Failed to inquiry top-up customer", error=e.message)
            raise

        logger.info(
            "Top-up customer inquiry successful",
            customer_name=response.get("customerName"),
            session_id=response.get("sessionId"),
        )
        return response

    async def create_topup(self, data: TopupPayment) -> Dict[str, Any]:
        logger.info("Creating top-up", product_code=data.product_code, amount=data.amount)
        payload = data.to_api_payload(self.config)

        response = await self._transact("create top-up", self.endpoints.topup_payment, payload)

        logger.info(
            "Top-up created successfully",
            reference_no=response.get("referenceNo"),
            partner_reference_no=payload["partnerReferenceNo"],
        )
        return response

    async def inquiry_status(self, original_partner_reference_no: str) -> Dict[str, Any]:
        return await self._inquiry_status("Top-up", self.endpoints.topup_status, original_partner_reference_no)
