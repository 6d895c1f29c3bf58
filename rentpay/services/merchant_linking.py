"""
Merchant Linking Service

Registers a caller's processor merchant account. Verification against the
processor is opportunistic: it runs only when credentials are configured
and its failures are logged, never raised.
"""

from typing import Dict, Optional

import structlog

from ..exceptions import NotFoundError, UnauthenticatedError, ValidationError
from ..models.records import MerchantLink
from ..processor import ProcessorClient, ProcessorError
from ..repositories import AccountDirectory

logger = structlog.get_logger(__name__)

MERCHANT_ACCOUNT_PREFIX = "acm_"


def is_valid_merchant_account_id(merchant_account_id: Optional[str]) -> bool:
    return bool(merchant_account_id) and merchant_account_id.startswith(MERCHANT_ACCOUNT_PREFIX)


class MerchantLinkingService:

    def __init__(self, directory: AccountDirectory, processor: ProcessorClient):
        self.directory = directory
        self.processor = processor

    async def link_merchant_account(
        self, caller_id: Optional[str], merchant_account_id: Optional[str]
    ) -> Dict[str, str]:
        """Validate and upsert the caller's merchant link."""
        logger.info(
            "merchant_link_requested",
            merchant_account_id=merchant_account_id,
            caller_id=caller_id,
        )

        if not isinstance(merchant_account_id, str) or not is_valid_merchant_account_id(merchant_account_id):
            raise ValidationError(
                'Invalid merchant account ID format. Must start with "acm_"'
            )

        if not caller_id:
            raise UnauthenticatedError()

        if self.processor.has_credentials:
            await self._verify(merchant_account_id)

        await self.directory.upsert(
            MerchantLink(caller_id=caller_id, merchant_account_id=merchant_account_id)
        )

        logger.info(
            "merchant_account_linked",
            merchant_account_id=merchant_account_id,
            caller_id=caller_id,
        )
        return {"merchant_account_id": merchant_account_id, "caller_id": caller_id}

    async def _verify(self, merchant_account_id: str) -> None:
        try:
            await self.processor.get_account(merchant_account_id)
        except ProcessorError as e:
            logger.warning(
                "merchant_verification_skipped",
                merchant_account_id=merchant_account_id,
                error=e.message,
                status_code=e.status_code,
            )
            return
        logger.info("merchant_verification_succeeded", merchant_account_id=merchant_account_id)

    async def get_merchant_account(self, caller_id: str) -> MerchantLink:
        link = await self.directory.get(caller_id)
        if link is None or not link.merchant_account_id:
            raise NotFoundError("No merchant account found for user")
        return link
