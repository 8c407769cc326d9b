"""
Merchant Service
================
Sub-merchant onboarding for QRIS and DANA.
"""

from typing import Any, Dict, Mapping, Optional

import structlog

from ..exceptions import PakaiLinkError
from .base import BaseService
from .models import generate_reference_no

logger = structlog.get_logger(__name__)


class MerchantService(BaseService):

    async def register_qris_merchant(
        self,
        merchant_data: Mapping[str, Any],
        owner_data: Mapping[str, Any],
        partner_reference_no: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Register a merchant for QRIS acceptance.

        Args:
            merchant_data: Provider ``merchantData`` object (merchantName, ...)
            owner_data: Provider ``ownerData`` object
            partner_reference_no: Reference to send (random 40 chars by default)
        """
        return await self._register("QRIS", self.endpoints.registration_qris, merchant_data, owner_data, partner_reference_no)

    async def register_dana_merchant(
        self,
        merchant_data: Mapping[str, Any],
        owner_data: Mapping[str, Any],
        partner_reference_no: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._register("DANA", self.endpoints.registration_dana, merchant_data, owner_data, partner_reference_no)

    async def _register(
        self,
        kind: str,
        path: str,
        merchant_data: Mapping[str, Any],
        owner_data: Mapping[str, Any],
        partner_reference_no: Optional[str],
    ) -> Dict[str, Any]:
        logger.info(f"Registering {kind} merchant", merchant_name=merchant_data.get("merchantName"))
        payload = {
            "partnerReferenceNo": partner_reference_no or generate_reference_no(),
            "merchantData": dict(merchant_data),
            "ownerData": dict(owner_data),
        }
        try:
            response = await self.client.post(path, payload)
        except PakaiLinkError as e:
            logger.error(f"Failed to register {kind} merchant", error=e.message)
            raise

        logger.info(
            f"{kind} merchant registered successfully",
            merchant_name=(response.get("detailData") or {}).get("merchantName"),
        )
        return response
