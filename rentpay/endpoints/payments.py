"""
Payment Endpoints

Merchant linking, payment submission, history and the legacy
processor pass-through.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import Settings
from ..dependencies import (
    get_app_settings,
    get_caller_id,
    get_history_service,
    get_merchant_linking_service,
    get_payment_submission_service,
    get_processor,
)
from ..exceptions import UnauthenticatedError
from ..models import (
    APIError,
    LegacyPaymentRequest,
    MerchantAccountResponse,
    MerchantSetupRequest,
    MerchantSetupResponse,
    PaymentHistoryResponse,
    PaymentResponse,
    PaymentSubmission,
    PaymentView,
)
from ..processor import ProcessorClient, ProcessorError
from ..services import HistoryQueryService, MerchantLinkingService, PaymentSubmissionService
from ..services.payment_submission import PaymentFields

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post(
    "/setup-merchant",
    response_model=MerchantSetupResponse,
    responses={400: {"model": APIError}, 401: {"model": APIError}},
)
async def setup_merchant(
    body: MerchantSetupRequest,
    caller_id: Optional[str] = Depends(get_caller_id),
    service: MerchantLinkingService = Depends(get_merchant_linking_service),
):
    """Link a processor merchant account to the caller"""
    result = await service.link_merchant_account(caller_id, body.merchant_account_id)
    return MerchantSetupResponse(
        merchant_account_id=result["merchant_account_id"],
        user_id=result["caller_id"],
    )


@router.get(
    "/merchant/{user_id}",
    response_model=MerchantAccountResponse,
    responses={404: {"model": APIError}},
)
async def get_merchant_account(
    user_id: str,
    caller_id: Optional[str] = Depends(get_caller_id),
    service: MerchantLinkingService = Depends(get_merchant_linking_service),
):
    if not caller_id:
        raise UnauthenticatedError()
    link = await service.get_merchant_account(user_id)
    return MerchantAccountResponse.from_link(link)


@router.post(
    "/process",
    response_model=PaymentResponse,
    responses={400: {"model": APIError}, 401: {"model": APIError}},
)
async def process_payment(
    body: PaymentSubmission,
    caller_id: Optional[str] = Depends(get_caller_id),
    service: PaymentSubmissionService = Depends(get_payment_submission_service),
):
    """Submit a rent payment"""
    record = await service.submit_payment(
        caller_id,
        PaymentFields(
            tenant_id=body.tenant_id,
            property_id=body.property_id,
            amount=body.amount,
            payment_method=body.payment_method,
            description=body.description,
            due_date=body.due_date,
            payment_date=body.payment_date,
            payment_token=body.payment_token,
        ),
    )
    return PaymentResponse(payment=PaymentView.from_record(record))


@router.get("/history/{user_id}", response_model=PaymentHistoryResponse)
async def get_payment_history(
    user_id: str,
    caller_id: Optional[str] = Depends(get_caller_id),
    service: HistoryQueryService = Depends(get_history_service),
):
    if not caller_id:
        raise UnauthenticatedError()
    history = await service.get_history(user_id)
    return PaymentHistoryResponse(
        payments=[PaymentView.from_record(p) for p in history.payments],
        count=history.count,
        sample=history.sample,
    )


@router.post("/v1/payment-requests")
async def legacy_payment_request(
    body: LegacyPaymentRequest,
    caller_id: Optional[str] = Depends(get_caller_id),
    processor: ProcessorClient = Depends(get_processor),
):
    """Forward a payment request to the processor and return its raw body."""
    if not caller_id:
        raise UnauthenticatedError()

    try:
        return await processor.create_payment_request(
            {
                "amount": body.amount,
                "currency": body.currency,
                "paymentToken": body.payment_token,
            },
            on_behalf_of=body.on_behalf_of,
        )
    except ProcessorError as e:
        logger.error(
            "legacy_payment_request_failed",
            status_code=e.status_code,
            error=e.message,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Payment processing failed",
                "details": e.payload if e.payload is not None else e.message,
            },
        )


@router.get("/test")
async def payments_test(settings: Settings = Depends(get_app_settings)):
    return {
        "message": "Payments API is working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
    }
