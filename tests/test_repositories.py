"""
Storage Tests

The in-memory and SQLAlchemy stores must behave the same.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from rentpay.config import Settings
from rentpay.database import build_engine, build_session_maker
from rentpay.models import MerchantLink, PaymentRecord, PaymentStatus, minor_to_major
from rentpay.repositories import (
    InMemoryAccountDirectory,
    InMemoryPaymentLedger,
    SqlAccountDirectory,
    SqlPaymentLedger,
    build_repositories,
)
from rentpay.startup import create_tables

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def session_maker():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    yield build_session_maker(engine)
    await engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def stores(request, session_maker):
    if request.param == "memory":
        return InMemoryAccountDirectory(), InMemoryPaymentLedger()
    return SqlAccountDirectory(session_maker), SqlPaymentLedger(session_maker)


def make_record(record_id: str, created_at: datetime, caller_id: str = "u1", **overrides) -> PaymentRecord:
    values = dict(
        id=record_id,
        caller_id=caller_id,
        tenant_id="t1",
        property_id="p1",
        amount_minor_units=5000,
        amount_major_units=minor_to_major(5000),
        payment_method="cash",
        status=PaymentStatus.PENDING,
        merchant_account_id="acm_x",
        created_at=created_at,
    )
    values.update(overrides)
    return PaymentRecord(**values)


class TestAccountDirectory:

    @pytest.mark.integration
    async def test_upsert_replaces(self, stores):
        directory, _ = stores
        await directory.upsert(MerchantLink("u1", "acm_one", linked_at=NOW))
        await directory.upsert(MerchantLink("u1", "acm_two", linked_at=NOW + timedelta(minutes=1)))

        link = await directory.get("u1")
        assert link.merchant_account_id == "acm_two"
        assert link.linked_at == NOW + timedelta(minutes=1)

    @pytest.mark.integration
    async def test_missing_caller(self, stores):
        directory, _ = stores
        assert await directory.get("nobody") is None


class TestPaymentLedger:

    @pytest.mark.integration
    async def test_round_trip_preserves_record(self, stores):
        _, ledger = stores
        record = make_record(
            "payment_1",
            NOW,
            payment_method="card",
            status=PaymentStatus.COMPLETED,
            external_payment_id="px_1",
            merchant_fallback=True,
            description="March rent",
        )
        await ledger.add(record)

        [stored] = await ledger.list_for_caller("u1")
        assert stored == record
        assert stored.amount_major_units == Decimal("50.00")

    @pytest.mark.integration
    async def test_orders_newest_first_with_stable_ties(self, stores):
        _, ledger = stores
        await ledger.add(make_record("payment_old", NOW - timedelta(hours=1)))
        await ledger.add(make_record("payment_tie_a", NOW))
        await ledger.add(make_record("payment_tie_b", NOW))
        await ledger.add(make_record("payment_other", NOW, caller_id="u2"))

        records = await ledger.list_for_caller("u1")
        assert [r.id for r in records] == ["payment_tie_a", "payment_tie_b", "payment_old"]


class TestBuildRepositories:

    @pytest.mark.unit
    def test_memory_backend(self):
        directory, ledger, engine = build_repositories(Settings(_env_file=None, storage_backend="memory"))
        assert isinstance(directory, InMemoryAccountDirectory)
        assert isinstance(ledger, InMemoryPaymentLedger)
        assert engine is None

    @pytest.mark.integration
    async def test_database_backend(self):
        directory, ledger, engine = build_repositories(
            Settings(_env_file=None, storage_backend="database", database_url="sqlite+aiosqlite:///:memory:")
        )
        assert isinstance(directory, SqlAccountDirectory)
        assert isinstance(ledger, SqlPaymentLedger)
        await engine.dispose()
