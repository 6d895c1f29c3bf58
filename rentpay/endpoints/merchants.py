"""
Merchant Account Endpoints (legacy)
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, Depends

from ..config import Settings
from ..dependencies import get_app_settings, get_caller_id
from ..exceptions import UnauthenticatedError
from ..models import LegacyMerchantSetupRequest, LegacyMerchantSetupResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/merchant-accounts", tags=["merchant-accounts"])


@router.get("/test")
async def merchants_test(settings: Settings = Depends(get_app_settings)):
    return {
        "message": "Merchants API is working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
    }


@router.post("/setup", response_model=LegacyMerchantSetupResponse)
async def setup_merchant_account(
    body: LegacyMerchantSetupRequest,
    caller_id: Optional[str] = Depends(get_caller_id),
):
    """Acknowledge a merchant account id without linking it.

    Use POST /api/payments/setup-merchant to link an account."""
    if not caller_id:
        raise UnauthenticatedError()

    logger.info("legacy_merchant_account_saved", account_id=body.account_id, caller_id=caller_id)
    return LegacyMerchantSetupResponse(account_id=body.account_id)
