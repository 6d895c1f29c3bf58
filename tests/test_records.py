"""
Domain Record Tests
"""

from decimal import Decimal

import pytest

from rentpay.models import PaymentMethod, PaymentRecord, PaymentStatus, minor_to_major


class TestPaymentRecord:

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "minor, major",
        [(1200, Decimal("12.00")), (5000, Decimal("50")), (1, Decimal("0.01")), (99999, Decimal("999.99"))],
    )
    def test_minor_to_major(self, minor, major):
        assert minor_to_major(minor) == major

    @pytest.mark.unit
    def test_completed_requires_external_id(self):
        with pytest.raises(ValueError):
            PaymentRecord(
                id="payment_1",
                caller_id="u1",
                tenant_id=None,
                property_id=None,
                amount_minor_units=100,
                amount_major_units=minor_to_major(100),
                payment_method="card",
                status=PaymentStatus.COMPLETED,
                merchant_account_id="acm_x",
            )

    @pytest.mark.unit
    def test_pending_rejects_external_id(self):
        with pytest.raises(ValueError):
            PaymentRecord(
                id="payment_1",
                caller_id="u1",
                tenant_id=None,
                property_id=None,
                amount_minor_units=100,
                amount_major_units=minor_to_major(100),
                payment_method="cash",
                status=PaymentStatus.PENDING,
                merchant_account_id="acm_x",
                external_payment_id="px_1",
            )

    @pytest.mark.unit
    @pytest.mark.parametrize("method, electronic", [("card", True), ("ach", True), ("cash", False), (None, False)])
    def test_electronic_methods(self, method, electronic):
        assert PaymentMethod.is_electronic(method) is electronic
