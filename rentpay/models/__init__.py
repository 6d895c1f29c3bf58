"""
RentPay Data Models

Domain records and Pydantic schemas for the payments backend.
"""

from .api import (
    APIError, HealthResponse, MerchantSetupRequest, MerchantSetupResponse,
    MerchantAccountResponse, LegacyMerchantSetupRequest, LegacyMerchantSetupResponse,
    PaymentSubmission, PaymentView, PaymentResponse, PaymentHistoryResponse,
    LegacyPaymentRequest
)
from .records import (
    MerchantLink, PaymentRecord, PaymentStatus, PaymentMethod, minor_to_major
)

__all__ = [
    # Domain records
    "MerchantLink",
    "PaymentRecord",
    "PaymentStatus",
    "PaymentMethod",
    "minor_to_major",
    # API models
    "APIError",
    "HealthResponse",
    "MerchantSetupRequest",
    "MerchantSetupResponse",
    "MerchantAccountResponse",
    "LegacyMerchantSetupRequest",
    "LegacyMerchantSetupResponse",
    "PaymentSubmission",
    "PaymentView",
    "PaymentResponse",
    "PaymentHistoryResponse",
    "LegacyPaymentRequest",
]
