"""
Unit tests for PendingOperation.
"""

import pytest

from sling_ledger.core.exceptions import InsufficientFundsError, ValidationError
from sling_ledger.domain.models import OperationState
from sling_ledger.services import PendingOperation

from tests.conftest import usd


def test_nothing_happens_until_commit(funded_ledger):
    """
    GIVEN a prepared $100 debit
    WHEN I do not commit it
    THEN the balance is unchanged
    """
    operation = PendingOperation("Pay Ben", funded_ledger.debit, usd("100"))

    assert operation.state == OperationState.PENDING
    assert funded_ledger.balance() == usd("10000.00")


def test_commit_applies_once(funded_ledger):
    operation = PendingOperation("Pay Ben", funded_ledger.debit, usd("100"))

    result = operation.commit()

    assert result == usd("9900.00")
    assert operation.state == OperationState.COMMITTED
    assert operation.result == usd("9900.00")
    with pytest.raises(ValidationError):
        operation.commit()
    assert funded_ledger.balance() == usd("9900.00")


def test_failed_commit_keeps_error(funded_ledger):
    operation = PendingOperation("Pay Ben", funded_ledger.debit, usd("20000"))

    with pytest.raises(InsufficientFundsError):
        operation.commit()

    assert operation.state == OperationState.FAILED
    assert isinstance(operation.error, InsufficientFundsError)
    assert funded_ledger.balance() == usd("10000.00")


def test_cancel(funded_ledger):
    operation = PendingOperation("Pay Ben", funded_ledger.debit, usd("100"))

    operation.cancel()

    assert operation.state == OperationState.CANCELLED
    with pytest.raises(ValidationError):
        operation.commit()
    assert funded_ledger.balance() == usd("10000.00")


def test_cannot_cancel_after_commit(funded_ledger):
    operation = PendingOperation("Pay Ben", funded_ledger.debit, usd("100"))
    operation.commit()

    with pytest.raises(ValidationError):
        operation.cancel()


def test_keyword_arguments_forwarded(transfer_service, funded_ledger):
    operation = PendingOperation(
        "Buy Apple", transfer_service.buy_stock, "AAPL", usd("178.50"), shares=2
    )

    operation.commit()

    assert funded_ledger.balance() == usd("9643.00")
