"""
Domain records for merchant links and the payment ledger.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    """Payment methods the processor handles electronically."""
    CARD = "card"
    ACH = "ach"

    @classmethod
    def is_electronic(cls, value: Optional[str]) -> bool:
        return value in {member.value for member in cls}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MerchantLink:
    """A caller's linked processor merchant account (one per caller)."""
    caller_id: str
    merchant_account_id: str
    linked_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class PaymentRecord:
    """Immutable ledger entry created once per accepted payment submission."""
    id: str
    caller_id: str
    tenant_id: Optional[str]
    property_id: Optional[str]
    amount_minor_units: int
    amount_major_units: Decimal
    payment_method: str
    status: PaymentStatus
    merchant_account_id: str
    description: Optional[str] = None
    due_date: Optional[str] = None
    payment_date: Optional[str] = None
    external_payment_id: Optional[str] = None
    merchant_fallback: bool = False
    created_at: datetime = field(default_factory=utcnow)
    sample: bool = False

    def __post_init__(self):
        # externalPaymentId is set exactly when the processor completed the payment
        if (self.external_payment_id is not None) != (self.status is PaymentStatus.COMPLETED):
            raise ValueError("external_payment_id must be set iff status is completed")


def minor_to_major(amount_minor_units: int) -> Decimal:
    """Convert processor minor units (cents) to the stored major-unit amount."""
    return (Decimal(amount_minor_units) / Decimal(100)).quantize(Decimal("0.01"))
