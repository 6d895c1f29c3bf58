"""
Account Directory and Payment Ledger storage.

Both stores have an in-memory implementation (process lifetime) and a
SQLAlchemy implementation; ``build_repositories`` picks one per settings.
Each mutation is a single keyed upsert/insert.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from .config import Settings
from .database import build_engine, build_session_maker
from .db_models import MerchantLinkTable, PaymentRecordTable
from .models.records import MerchantLink, PaymentRecord

logger = structlog.get_logger(__name__)


class AccountDirectory(ABC):
    """Caller identity -> linked merchant account."""

    @abstractmethod
    async def upsert(self, link: MerchantLink) -> None:
        """Store the link, replacing any prior link for the caller."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, caller_id: str) -> Optional[MerchantLink]:
        raise NotImplementedError


class PaymentLedger(ABC):
    """Payment id -> payment record."""

    @abstractmethod
    async def add(self, record: PaymentRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list_for_caller(self, caller_id: str) -> List[PaymentRecord]:
        """Records for the caller, newest first; ties keep insertion order."""
        raise NotImplementedError


class InMemoryAccountDirectory(AccountDirectory):
    def __init__(self) -> None:
        self._links: Dict[str, MerchantLink] = {}

    async def upsert(self, link: MerchantLink) -> None:
        self._links[link.caller_id] = link

    async def get(self, caller_id: str) -> Optional[MerchantLink]:
        return self._links.get(caller_id)


class InMemoryPaymentLedger(PaymentLedger):
    def __init__(self) -> None:
        # dicts preserve insertion order
        self._records: Dict[str, PaymentRecord] = {}

    async def add(self, record: PaymentRecord) -> None:
        if record.id in self._records:
            raise ValueError(f"Duplicate payment id {record.id}")
        self._records[record.id] = record

    async def list_for_caller(self, caller_id: str) -> List[PaymentRecord]:
        records = [r for r in self._records.values() if r.caller_id == caller_id]
        # sorted() is stable, so equal timestamps stay in insertion order
        return sorted(records, key=lambda r: r.created_at, reverse=True)


class SqlAccountDirectory(AccountDirectory):
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    async def upsert(self, link: MerchantLink) -> None:
        async with self._session_maker() as session:
            async with session.begin():
                await session.merge(MerchantLinkTable(
                    caller_id=link.caller_id,
                    merchant_account_id=link.merchant_account_id,
                    linked_at=link.linked_at,
                ))

    async def get(self, caller_id: str) -> Optional[MerchantLink]:
        async with self._session_maker() as session:
            row = await session.get(MerchantLinkTable, caller_id)
            return row.to_record() if row else None


class SqlPaymentLedger(PaymentLedger):
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    async def add(self, record: PaymentRecord) -> None:
        async with self._session_maker() as session:
            async with session.begin():
                session.add(PaymentRecordTable.from_record(record))

    async def list_for_caller(self, caller_id: str) -> List[PaymentRecord]:
        async with self._session_maker() as session:
            result = await session.execute(
                select(PaymentRecordTable)
                .where(PaymentRecordTable.caller_id == caller_id)
                .order_by(PaymentRecordTable.created_at.desc(), PaymentRecordTable.seq.asc())
            )
            return [row.to_record() for row in result.scalars().all()]


def build_repositories(
    settings: Settings,
) -> Tuple[AccountDirectory, PaymentLedger, Optional[AsyncEngine]]:
    """Build the stores for the configured backend; the engine is None in memory mode."""
    if settings.storage_backend == "database":
        engine = build_engine(settings.database_url, echo=settings.database_echo)
        session_maker = build_session_maker(engine)
        logger.info("storage_configured", backend="database")
        return SqlAccountDirectory(session_maker), SqlPaymentLedger(session_maker), engine

    logger.info("storage_configured", backend="memory")
    return InMemoryAccountDirectory(), InMemoryPaymentLedger(), None
