"""
Unit tests for TransferService.

Tests cover:
- Currency conversion into the base currency before settlement
- Deposit and withdrawal fees with free-transfer waivers
- Settling a split against a past card payment
- Stock trades recorded with their cash impact
- No activity written when a mutation fails
- Cash and positions restored when the activity write fails
"""

import pytest
from decimal import Decimal

from sling_ledger.core.exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    NotFoundError,
    ValidationError,
)
from sling_ledger.domain.models import ActivityKind
from sling_ledger.services import TransferService

from tests.conftest import eur, gbp, usd


class TestCashIn:
    """Tests for add_money() and receive()."""

    def test_local_currency_add_money(self, transfer_service: TransferService, funded_ledger, fee_service):
        """
        GIVEN a GBP top-up of £79
        WHEN I add money
        THEN $100 is credited with no fee and no free transfer used
        """
        entry = transfer_service.add_money(gbp("79"), "Barclays", "🏦")

        assert funded_ledger.balance() == usd("10100.00")
        assert fee_service.free_transfers_remaining == 3
        assert entry.title_right == "+£79.00"
        assert entry.kind == ActivityKind.ADD_MONEY

    def test_foreign_add_money_uses_free_transfer(
        self, transfer_service: TransferService, funded_ledger, fee_service
    ):
        transfer_service.add_money(eur("100"), "Deutsche Bank", "🏦")

        assert funded_ledger.balance() == usd("10109.00")
        assert fee_service.free_transfers_remaining == 2

    def test_foreign_add_money_charged_after_free_transfers(
        self, transfer_service: TransferService, funded_ledger, fee_service
    ):
        """
        GIVEN no free transfers left
        WHEN I add €100
        THEN $109 less the $0.50 fee is credited
        """
        fee_service.reset_free_transfers(0)

        transfer_service.add_money(eur("100"), "Deutsche Bank", "🏦")

        assert funded_ledger.balance() == usd("10108.50")

    def test_receive(self, transfer_service: TransferService, funded_ledger):
        entry = transfer_service.receive("Ben", "B", usd("25"))

        assert funded_ledger.balance() == usd("10025.00")
        assert entry.is_incoming

    def test_non_positive_amount_rejected(self, transfer_service: TransferService, recorder):
        with pytest.raises(InvalidAmountError):
            transfer_service.receive("Ben", "B", usd("0"))

        assert recorder.count() == 0


class TestCashOut:
    """Tests for send(), card_payment() and withdraw_cash()."""

    def test_send_converts_to_base(self, transfer_service: TransferService, funded_ledger):
        entry = transfer_service.send("Eileen", "E", gbp("79"))

        assert funded_ledger.balance() == usd("9900.00")
        assert entry.amount == gbp("-79")
        assert entry.title_right == "-£79.00"

    def test_card_payment(self, transfer_service: TransferService, funded_ledger):
        entry = transfer_service.card_payment("Pret", "🥪", gbp("15.80"))

        assert funded_ledger.balance() == usd("9980.00")
        assert entry.kind == ActivityKind.CARD_PAYMENT

    def test_failed_send_writes_no_record(self, transfer_service: TransferService, funded_ledger, recorder):
        """
        GIVEN a $10,000 balance
        WHEN I send $20,000
        THEN the send fails, the balance is unchanged and nothing is recorded
        """
        with pytest.raises(InsufficientFundsError):
            transfer_service.send("Eileen", "E", usd("20000"))

        assert funded_ledger.balance() == usd("10000.00")
        assert recorder.count() == 0

    def test_foreign_withdrawal_adds_fee(self, transfer_service: TransferService, funded_ledger, fee_service):
        fee_service.reset_free_transfers(0)

        transfer_service.withdraw_cash(eur("100"))

        # 100 EUR = 109.00 USD plus the $0.50 fee
        assert funded_ledger.balance() == usd("9890.50")

    def test_local_withdrawal_is_free(self, transfer_service: TransferService, funded_ledger, recorder):
        entry = transfer_service.withdraw_cash(usd("40"), method="Bank Transfer")

        assert funded_ledger.balance() == usd("9960.00")
        assert entry.subtitle_left == "Bank Transfer"
        assert recorder.count() == 1


class TestSettleSplit:
    """Tests for settle_split()."""

    def test_split_past_card_payment(self, transfer_service: TransferService, funded_ledger, recorder):
        """
        GIVEN a £45.80 card payment at Dishoom
        WHEN I split it with Ben and Eileen
        THEN the shares are 15.27/15.27/15.26 and no cash moves
        """
        payment = transfer_service.card_payment("Dishoom", "🍛", gbp("45.80"))
        balance_after_payment = funded_ledger.balance()

        share = transfer_service.settle_split(payment.record_id, ["Ben", "Eileen"])

        assert share.participant_count == 3
        assert share.shares == (gbp("15.27"), gbp("15.27"), gbp("15.26"))
        assert funded_ledger.balance() == balance_after_payment
        entry = recorder.recent()[0]
        assert entry.kind == ActivityKind.SPLIT
        assert entry.subtitle_left == "Split with Ben, Eileen"
        assert entry.title_right == "£15.27"

    def test_split_requires_participants(self, transfer_service: TransferService):
        payment = transfer_service.card_payment("Dishoom", "🍛", gbp("45.80"))

        with pytest.raises(ValidationError):
            transfer_service.settle_split(payment.record_id, [])

    def test_person_payment_is_not_splittable(self, transfer_service: TransferService):
        sent = transfer_service.send("Ben", "B", gbp("10"))

        with pytest.raises(NotFoundError):
            transfer_service.settle_split(sent.record_id, ["Eileen"])

    def test_payment_can_only_be_split_once(self, transfer_service: TransferService, recorder):
        """
        GIVEN a card payment that has already been split
        WHEN I try to split it again
        THEN it is rejected, no second SPLIT is recorded and it drops out of split_eligible
        """
        payment = transfer_service.card_payment("Dishoom", "🍛", gbp("45.80"))
        transfer_service.settle_split(payment.record_id, ["Ben", "Eileen"])

        with pytest.raises(ValidationError):
            transfer_service.settle_split(payment.record_id, ["Ben"])

        assert len(recorder.filter(kind=ActivityKind.SPLIT)) == 1
        assert recorder.split_eligible() == []
        assert recorder.filter(kind=ActivityKind.SPLIT)[0].related_record_id == payment.record_id


class TestTrades:
    """Tests for buy_stock() and sell_stock()."""

    def test_buy_records_cost_and_shares(self, transfer_service: TransferService, funded_ledger):
        entry = transfer_service.buy_stock("aapl", usd("178.50"), shares=10, name="Apple")

        assert funded_ledger.balance() == usd("8215.00")
        assert entry.amount == usd("-1785.00")
        assert entry.subtitle_right == "+10.00 AAPL"
        assert entry.title_left == "Apple"

    def test_buy_then_sell_at_same_price_nets_to_zero(
        self, transfer_service: TransferService, funded_ledger, holdings
    ):
        transfer_service.buy_stock("AAPL", usd("178.50"), amount=usd("1000"))
        shares = holdings.shares_owned("AAPL")

        entry = transfer_service.sell_stock("AAPL", shares, usd("178.50"))

        assert holdings.shares_owned("AAPL") == Decimal("0")
        assert entry.kind == ActivityKind.SELL
        assert funded_ledger.balance() == usd("10000.00")

    def test_failed_buy_writes_no_record(self, transfer_service: TransferService, recorder, holdings):
        with pytest.raises(InsufficientFundsError):
            transfer_service.buy_stock("AAPL", usd("178.50"), shares=100)

        assert recorder.count() == 0
        assert not holdings.owns("AAPL")


class TestActivityWriteFailure:
    """A mutation and its activity record are kept together: both or neither."""

    def test_send_restores_balance(self, failing_transfer_service: TransferService, funded_ledger, failing_repo):
        """
        GIVEN a $10,000 balance and an activity store that rejects writes
        WHEN I send $40
        THEN the error propagates, the balance is still $10,000 and nothing is stored
        """
        with pytest.raises(RuntimeError):
            failing_transfer_service.send("Ben", "B", usd("40"))

        assert funded_ledger.balance() == usd("10000.00")
        assert failing_repo.attempts == 1
        assert failing_repo.count() == 0

    @pytest.mark.parametrize(
        "flow",
        [
            lambda service: service.receive("Ben", "B", usd("25")),
            lambda service: service.card_payment("Pret", "🥪", gbp("15.80")),
            lambda service: service.withdraw_cash(usd("40")),
            lambda service: service.add_money(gbp("79"), "Barclays", "🏦"),
        ],
        ids=["receive", "card_payment", "withdraw_cash", "add_money"],
    )
    def test_cash_flows_restore_balance(self, failing_transfer_service: TransferService, funded_ledger, flow):
        with pytest.raises(RuntimeError):
            flow(failing_transfer_service)

        assert funded_ledger.balance() == usd("10000.00")

    def test_failed_foreign_withdrawal_keeps_free_transfer(
        self, failing_transfer_service: TransferService, funded_ledger, fee_service
    ):
        with pytest.raises(RuntimeError):
            failing_transfer_service.withdraw_cash(eur("100"))

        assert funded_ledger.balance() == usd("10000.00")
        assert fee_service.free_transfers_remaining == 3

    def test_buy_restores_cash_and_position(
        self, failing_transfer_service: TransferService, funded_ledger, holdings
    ):
        """
        GIVEN an activity store that rejects writes
        WHEN I buy 10 AAPL
        THEN no position, no history event and the full balance remain
        """
        with pytest.raises(RuntimeError):
            failing_transfer_service.buy_stock("AAPL", usd("178.50"), shares=10)

        assert funded_ledger.balance() == usd("10000.00")
        assert not holdings.owns("AAPL")
        assert holdings.history() == []

    def test_sell_restores_position(
        self, transfer_service: TransferService, funded_ledger, holdings, converter, fee_service, failing_recorder
    ):
        transfer_service.buy_stock("AAPL", usd("178.50"), shares=10)
        balance = funded_ledger.balance()
        failing = TransferService(funded_ledger, holdings, failing_recorder, converter, fee_service)

        with pytest.raises(RuntimeError):
            failing.sell_stock("AAPL", 4, usd("180.00"))

        assert holdings.shares_owned("AAPL") == Decimal("10")
        assert holdings.get("AAPL").total_cost == usd("1785.00")
        assert funded_ledger.balance() == balance
        assert len(holdings.history("AAPL")) == 1
