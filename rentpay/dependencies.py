"""FastAPI dependency providers backed by the collaborators on ``app.state``."""

from typing import Optional

from fastapi import Request

from .config import Settings
from .processor import ProcessorClient
from .services import HistoryQueryService, MerchantLinkingService, PaymentSubmissionService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_caller_id(request: Request) -> Optional[str]:
    """Caller id from the configured resolver; None means unauthenticated."""
    return request.app.state.identity_resolver.resolve(request)


def get_processor(request: Request) -> ProcessorClient:
    return request.app.state.processor


def get_merchant_linking_service(request: Request) -> MerchantLinkingService:
    state = request.app.state
    return MerchantLinkingService(state.account_directory, state.processor)


def get_payment_submission_service(request: Request) -> PaymentSubmissionService:
    state = request.app.state
    return PaymentSubmissionService(
        state.account_directory,
        state.payment_ledger,
        state.processor,
        default_merchant_account_id=state.settings.default_merchant_account_id,
    )


def get_history_service(request: Request) -> HistoryQueryService:
    state = request.app.state
    return HistoryQueryService(
        state.payment_ledger, sample_fallback=state.settings.history_sample_fallback
    )
