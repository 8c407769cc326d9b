"""
Transfer Service
================
Disbursement to bank accounts: account inquiry, transfer and status.
"""

from typing import Any, Dict

import structlog

from ..exceptions import PakaiLinkError
from .base import BaseService
from .models import TransferToBank

logger = structlog.get_logger(__name__)


class TransferService(BaseService):

    async def inquiry(self, data: TransferToBank) -> Dict[str, Any]:
        """
        Look up the beneficiary account before transferring.

        The response's ``sessionId`` should be passed to ``transfer_to_bank``.
        """
        logger.info(
            "Inquiring bank transfer",
            bank_code=data.beneficiary_bank_code,
            account_number=data.beneficiary_account_number,
        )
        try:
            response = await self.client.post(self.endpoints.transfer_inquiry, data.to_inquiry_payload())
        except PakaiLinkError as e:
            logger.error("Failed to inquiry transfer", error=e.message)
            raise

        logger.info(
            "Transfer inquiry successful",
            account_name=response.get("beneficiaryAccountName", "unknown"),
        )
        return response

    async def transfer_to_bank(self, data: TransferToBank) -> Dict[str, Any]:
        """Execute the transfer. Raises TransactionError on failure."""
        logger.info(
            "Transferring to bank",
            bank_code=data.beneficiary_bank_code,
            amount=data.amount,
        )
        payload = data.to_api_payload(self.config)

        response = await self._transact("transfer to bank", self.endpoints.transfer_bank, payload)

        logger.info(
            "Bank transfer submitted",
            reference_no=response.get("referenceNo"),
            partner_reference_no=payload["partnerReferenceNo"],
        )
        return response

    async def inquiry_status(self, original_partner_reference_no: str) -> Dict[str, Any]:
        return await self._inquiry_status("Transfer", self.endpoints.transfer_status, original_partner_reference_no)
