"""
Service Base
============
Shared call patterns for the product services.
"""

from typing import Any, Dict, Optional

import structlog

from ..config import PakaiLinkConfig
from ..exceptions import PakaiLinkError, TransactionError
from ..http import ApiClient

logger = structlog.get_logger(__name__)


class BaseService:
    """
    Thin wrapper over ApiClient.

    Create operations wrap any failure in TransactionError (the original
    error is chained); inquiries let the typed ApiError propagate.
    """

    def __init__(self, client: ApiClient, config: Optional[PakaiLinkConfig] = None):
        self.client = client
        self.config = config or client.config

    @property
    def endpoints(self):
        return self.config.endpoints

    async def _transact(self, operation: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return await self.client.post(path, payload)
        except PakaiLinkError as e:
            logger.error(
                f"Failed to {operation}",
                error=e.message,
                partner_reference_no=payload.get("partnerReferenceNo"),
            )
            raise TransactionError(
                f"Failed to {operation}: {e.message}",
                status_code=e.status_code,
                details=e.details,
            ) from e

    async def _inquiry_status(self, product: str, path: str, original_partner_reference_no: str) -> Dict[str, Any]:
        logger.debug(f"Inquiring {product} status", partner_reference_no=original_partner_reference_no)
        try:
            response = await self.client.post(
                path, {"originalPartnerReferenceNo": original_partner_reference_no}
            )
        except PakaiLinkError as e:
            logger.error(f"Failed to inquiry {product} status", error=e.message)
            raise

        logger.info(
            f"{product} status inquiry successful",
            status=response.get("latestTransactionStatus", "unknown"),
            status_desc=response.get("transactionStatusDesc", ""),
        )
        return response
