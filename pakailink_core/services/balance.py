"""
Balance Service
===============
"""

from typing import Any, Dict, Optional, Sequence

import structlog

from ..exceptions import PakaiLinkError
from .base import BaseService
from .models import generate_reference_no

logger = structlog.get_logger(__name__)


class BalanceService(BaseService):

    async def inquiry(
        self,
        balance_types: Sequence[str] = ("Balance",),
        account_no: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Query the merchant balance.

        Args:
            balance_types: Balance kinds to return
            account_no: Account to query (defaults to the configured account)
        """
        account_no = account_no or self.config.account_no
        logger.info("Inquiring balance", balance_types=list(balance_types), account_no=account_no)

        payload: Dict[str, Any] = {
            "partnerReferenceNo": generate_reference_no(),
            "balanceTypes": list(balance_types),
        }
        if account_no:
            payload["accountNo"] = account_no

        try:
            response = await self.client.post(self.endpoints.balance_inquiry, payload)
        except PakaiLinkError as e:
            logger.error("Failed to inquiry balance", error=e.message)
            raise

        logger.info("Balance inquiry successful", account_no=response.get("accountNo"), name=response.get("name"))
        return response

    async def history(
        self,
        from_date_time: str,
        to_date_time: str,
        page_size: int = 10,
        page_number: int = 1,
    ) -> Dict[str, Any]:
        """Paged balance mutations between two SNAP timestamps."""
        logger.info("Inquiring balance history", start=from_date_time, end=to_date_time, page=page_number)

        payload = {
            "partnerReferenceNo": generate_reference_no(),
            "fromDateTime": from_date_time,
            "toDateTime": to_date_time,
            "pageSize": str(page_size),
            "pageNumber": str(page_number),
        }
        try:
            response = await self.client.post(self.endpoints.balance_history, payload)
        except PakaiLinkError as e:
            logger.error("Failed to inquiry balance history", error=e.message)
            raise

        logger.info("Balance history retrieved", records=len(response.get("detailData") or []))
        return response
