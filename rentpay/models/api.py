"""
RentPay API Models

Pydantic request/response schemas. Field names are snake_case in Python
and camelCase on the wire.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from .records import MerchantLink, PaymentRecord


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "OK"
    timestamp: datetime
    environment: str


class MerchantSetupRequest(CamelModel):
    """Link a processor merchant account to the caller"""
    merchant_account_id: Optional[str] = Field(None, description="Processor merchant account (acm_...)")


class MerchantSetupResponse(CamelModel):
    success: bool = True
    message: str = "Merchant account linked successfully"
    merchant_account_id: str
    user_id: str


class MerchantAccountResponse(CamelModel):
    success: bool = True
    merchant_account_id: str
    setup_at: datetime

    @classmethod
    def from_link(cls, link: MerchantLink) -> "MerchantAccountResponse":
        return cls(merchant_account_id=link.merchant_account_id, setup_at=link.linked_at)


class LegacyMerchantSetupRequest(CamelModel):
    account_id: Optional[str] = None


class LegacyMerchantSetupResponse(CamelModel):
    success: bool = True
    message: str = "Merchant account saved successfully"
    account_id: Optional[str] = None


class PaymentSubmission(CamelModel):
    """Rent payment submission"""
    tenant_id: str = Field(..., description="Tenant identifier")
    property_id: str = Field(..., description="Property identifier")
    amount: int = Field(..., gt=0, description="Amount in minor currency units (cents)")
    payment_method: str = Field(..., min_length=1, description="card, ach, or an offline method")
    description: Optional[str] = Field(None, max_length=255)
    due_date: Optional[str] = None
    payment_date: Optional[str] = None
    payment_token: Optional[str] = Field(None, description="Processor payment token for card/ach")


class PaymentView(CamelModel):
    """Payment record as returned to clients"""
    id: str
    user_id: str
    tenant_id: Optional[str] = None
    property_id: Optional[str] = None
    amount: Decimal = Field(..., description="Amount in major currency units")
    amount_minor: int
    payment_method: str
    description: Optional[str] = None
    due_date: Optional[str] = None
    payment_date: Optional[str] = None
    status: str
    external_payment_id: Optional[str] = None
    merchant_account_id: Optional[str] = None
    merchant_fallback: bool = False
    created_at: datetime
    sample: bool = False

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)

    @classmethod
    def from_record(cls, record: PaymentRecord) -> "PaymentView":
        return cls(
            id=record.id,
            user_id=record.caller_id,
            tenant_id=record.tenant_id,
            property_id=record.property_id,
            amount=record.amount_major_units,
            amount_minor=record.amount_minor_units,
            payment_method=record.payment_method,
            description=record.description,
            due_date=record.due_date,
            payment_date=record.payment_date,
            status=record.status.value,
            external_payment_id=record.external_payment_id,
            merchant_account_id=record.merchant_account_id,
            merchant_fallback=record.merchant_fallback,
            created_at=record.created_at,
            sample=record.sample,
        )


class PaymentResponse(CamelModel):
    success: bool = True
    message: str = "Payment processed successfully"
    payment: PaymentView


class PaymentHistoryResponse(CamelModel):
    success: bool = True
    payments: List[PaymentView]
    count: int
    sample: bool = Field(False, description="True when payments are placeholder examples, not ledger data")


class LegacyPaymentRequest(BaseModel):
    """Legacy pass-through body (snake_case on the wire)"""
    amount: Optional[int] = None
    currency: Optional[str] = None
    payment_token: Optional[str] = None
    on_behalf_of: Optional[str] = None


class APIError(BaseModel):
    """Standard API error response"""
    error: str = Field(..., description="Human readable error message")
    details: Optional[Any] = Field(None, description="Additional error details")


__all__ = [
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
