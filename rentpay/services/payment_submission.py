"""
Payment Submission Service

Resolves the caller's merchant account, sends card/ACH payments to the
processor and records the outcome in the payment ledger. Offline methods
(cash, check, ...) are recorded as pending without a processor call.
"""

import secrets
from dataclasses import dataclass
from typing import Optional

import structlog

from ..exceptions import ProcessingError, UnauthenticatedError, ValidationError
from ..models.records import PaymentMethod, PaymentRecord, PaymentStatus, minor_to_major
from ..processor import ProcessorClient, ProcessorError
from ..repositories import AccountDirectory, PaymentLedger

logger = structlog.get_logger(__name__)

PROCESSOR_CURRENCY = "usd"


@dataclass
class PaymentFields:
    """Caller-supplied payment input; amount is in minor units."""
    tenant_id: Optional[str]
    property_id: Optional[str]
    amount: int
    payment_method: str
    description: Optional[str] = None
    due_date: Optional[str] = None
    payment_date: Optional[str] = None
    payment_token: Optional[str] = None


class PaymentSubmissionService:

    def __init__(
        self,
        directory: AccountDirectory,
        ledger: PaymentLedger,
        processor: ProcessorClient,
        default_merchant_account_id: str,
    ):
        self.directory = directory
        self.ledger = ledger
        self.processor = processor
        self.default_merchant_account_id = default_merchant_account_id

    async def submit_payment(self, caller_id: Optional[str], fields: PaymentFields) -> PaymentRecord:
        if not caller_id:
            raise UnauthenticatedError()

        merchant_account_id, used_fallback = await self._resolve_merchant_account(caller_id)

        external_payment_id = None
        if PaymentMethod.is_electronic(fields.payment_method):
            if not fields.payment_token:
                raise ValidationError("Payment token required for electronic payments")
            external_payment_id = await self._charge(fields, merchant_account_id)

        record = PaymentRecord(
            id=self._generate_payment_id(),
            caller_id=caller_id,
            tenant_id=fields.tenant_id,
            property_id=fields.property_id,
            amount_minor_units=fields.amount,
            amount_major_units=minor_to_major(fields.amount),
            payment_method=fields.payment_method,
            description=fields.description,
            due_date=fields.due_date,
            payment_date=fields.payment_date,
            status=PaymentStatus.COMPLETED if external_payment_id else PaymentStatus.PENDING,
            external_payment_id=external_payment_id,
            merchant_account_id=merchant_account_id,
            merchant_fallback=used_fallback,
        )

        await self.ledger.add(record)

        logger.info(
            "payment_record_created",
            payment_id=record.id,
            status=record.status.value,
            caller_id=caller_id,
            external_payment_id=external_payment_id,
        )
        return record

    async def _resolve_merchant_account(self, caller_id: str):
        link = await self.directory.get(caller_id)
        if link and link.merchant_account_id:
            return link.merchant_account_id, False

        logger.warning(
            "merchant_account_fallback",
            caller_id=caller_id,
            merchant_account_id=self.default_merchant_account_id,
        )
        return self.default_merchant_account_id, True

    async def _charge(self, fields: PaymentFields, merchant_account_id: str) -> Optional[str]:
        """Submit to the processor; returns the processor payment id, if any."""
        payload = {
            "amount": fields.amount,
            "currency": PROCESSOR_CURRENCY,
            "paymentToken": fields.payment_token,
            "description": fields.description or f"Rent payment for {fields.property_id}",
        }
        try:
            result = await self.processor.create_payment_request(
                payload, on_behalf_of=merchant_account_id
            )
        except ProcessorError as e:
            logger.error(
                "processor_payment_failed",
                merchant_account_id=merchant_account_id,
                status_code=e.status_code,
                details=e.payload,
            )
            raise ProcessingError(
                "Payment processing failed",
                details=e.processor_message or "Unknown error",
            ) from e

        external_id = result.get("id") if isinstance(result, dict) else None
        logger.info(
            "processor_payment_succeeded",
            merchant_account_id=merchant_account_id,
            external_payment_id=external_id,
        )
        return str(external_id) if external_id else None

    @staticmethod
    def _generate_payment_id() -> str:
        return f"payment_{secrets.token_hex(8)}"
