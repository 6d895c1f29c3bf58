"""
History Query Service

Returns a caller's ledger entries newest first. When the ledger has none
and the sample fallback is enabled, returns fixed example records, each
flagged ``sample=True`` so callers can tell them from real data.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional

import structlog

from ..models.records import PaymentRecord, PaymentStatus, minor_to_major, utcnow
from ..repositories import PaymentLedger

logger = structlog.get_logger(__name__)

SAMPLE_PAYMENT_IDS = ("payment_demo_1", "payment_demo_2")


@dataclass
class PaymentHistory:
    payments: List[PaymentRecord]
    sample: bool = False

    @property
    def count(self) -> int:
        return len(self.payments)


def sample_payments(caller_id: str, now: Optional[datetime] = None) -> List[PaymentRecord]:
    """The documented placeholder history: a completed card payment 5 days ago
    and a pending ACH payment 10 days ago."""
    now = now or utcnow()
    return [
        PaymentRecord(
            id=SAMPLE_PAYMENT_IDS[0],
            caller_id=caller_id,
            tenant_id="tenant_demo_1",
            property_id="property_demo_1",
            amount_minor_units=120000,
            amount_major_units=minor_to_major(120000),
            payment_method="card",
            status=PaymentStatus.COMPLETED,
            external_payment_id="px_demo_1",
            merchant_account_id="acm_demo",
            created_at=now - timedelta(days=5),
            sample=True,
        ),
        PaymentRecord(
            id=SAMPLE_PAYMENT_IDS[1],
            caller_id=caller_id,
            tenant_id="tenant_demo_2",
            property_id="property_demo_2",
            amount_minor_units=95000,
            amount_major_units=minor_to_major(95000),
            payment_method="ach",
            status=PaymentStatus.PENDING,
            merchant_account_id="acm_demo",
            created_at=now - timedelta(days=10),
            sample=True,
        ),
    ]


class HistoryQueryService:

    def __init__(
        self,
        ledger: PaymentLedger,
        sample_fallback: bool = True,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.ledger = ledger
        self.sample_fallback = sample_fallback
        self.clock = clock

    async def get_history(self, caller_id: str) -> PaymentHistory:
        payments = await self.ledger.list_for_caller(caller_id)
        if payments or not self.sample_fallback:
            return PaymentHistory(payments=payments)

        logger.info("history_sample_fallback", caller_id=caller_id)
        return PaymentHistory(payments=sample_payments(caller_id, self.clock()), sample=True)
