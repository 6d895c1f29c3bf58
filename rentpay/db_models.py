from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base
from .models.records import MerchantLink, PaymentRecord, PaymentStatus, minor_to_major


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MerchantLinkTable(Base):
    __tablename__ = "merchant_links"

    caller_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    merchant_account_id: Mapped[str] = mapped_column(String(100))
    linked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def to_record(self) -> MerchantLink:
        return MerchantLink(
            caller_id=self.caller_id,
            merchant_account_id=self.merchant_account_id,
            linked_at=_aware(self.linked_at),
        )


class PaymentRecordTable(Base):
    __tablename__ = "payment_records"

    # Insertion order breaks createdAt ties in history queries
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    caller_id: Mapped[str] = mapped_column(String(100), index=True)
    tenant_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    property_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    amount_minor: Mapped[int]
    payment_method: Mapped[str] = mapped_column(String(20))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[str | None] = mapped_column(String(40), nullable=True)
    payment_date: Mapped[str | None] = mapped_column(String(40), nullable=True)
    status: Mapped[str] = mapped_column(String(20))
    external_payment_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    merchant_account_id: Mapped[str] = mapped_column(String(100))
    merchant_fallback: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    @classmethod
    def from_record(cls, record: PaymentRecord) -> PaymentRecordTable:
        return cls(
            id=record.id,
            caller_id=record.caller_id,
            tenant_id=record.tenant_id,
            property_id=record.property_id,
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
        )

    def to_record(self) -> PaymentRecord:
        return PaymentRecord(
            id=self.id,
            caller_id=self.caller_id,
            tenant_id=self.tenant_id,
            property_id=self.property_id,
            amount_minor_units=self.amount_minor,
            amount_major_units=minor_to_major(self.amount_minor),
            payment_method=self.payment_method,
            description=self.description,
            due_date=self.due_date,
            payment_date=self.payment_date,
            status=PaymentStatus(self.status),
            external_payment_id=self.external_payment_id,
            merchant_account_id=self.merchant_account_id,
            merchant_fallback=self.merchant_fallback,
            created_at=_aware(self.created_at),
        )
