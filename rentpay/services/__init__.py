from .history import HistoryQueryService
from .merchant_linking import MerchantLinkingService
from .payment_submission import PaymentSubmissionService

__all__ = ["HistoryQueryService", "MerchantLinkingService", "PaymentSubmissionService"]
