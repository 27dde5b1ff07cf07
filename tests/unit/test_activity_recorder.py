"""
Unit tests for ActivityRecorder.

Tests cover:
- Append-only storage in insertion order
- Most-recent-first listing
- Display strings built by the convenience recorders
- Filtering and split eligibility by explicit payee kind
"""

import pytest
from decimal import Decimal

from sling_ledger.domain.models import ActivityKind, ActivityRecord, PayeeKind
from sling_ledger.services import ActivityRecorder

from tests.conftest import gbp, usd, utc_datetime


class TestRecord:
    """Tests for record(), all() and recent()."""

    def test_record_stamps_missing_date(self, recorder: ActivityRecorder, clock):
        """
        GIVEN an entry without a date
        WHEN I record it
        THEN it is stamped with the clock's time
        """
        stored = recorder.record(
            ActivityRecord(avatar="A", title_left="Tesco", subtitle_left="", title_right="-£5.00")
        )

        assert stored.date == clock.now()

    def test_record_keeps_given_date(self, recorder: ActivityRecorder):
        when = utc_datetime(2024, 1, 2)

        stored = recorder.record(
            ActivityRecord(avatar="A", title_left="Tesco", subtitle_left="", title_right="-£5.00", date=when)
        )

        assert stored.date == when

    def test_all_in_insertion_order_recent_reversed(self, recorder: ActivityRecorder):
        """
        GIVEN three records
        WHEN I list them
        THEN all() is insertion order and recent() is most-recent-first
        """
        for name in ("first", "second", "third"):
            recorder.record_send(name, "A", gbp("1.00"))

        assert [r.title_left for r in recorder.all()] == ["first", "second", "third"]
        assert [r.title_left for r in recorder.recent()] == ["third", "second", "first"]
        assert [r.title_left for r in recorder.recent(limit=1)] == ["third"]
        assert recorder.count() == 3

    def test_get_by_id(self, recorder: ActivityRecorder):
        entry = recorder.record_top_up(gbp("20.00"))

        assert recorder.get(entry.record_id) == entry
        assert recorder.get("missing") is None


class TestConvenienceRecorders:
    """Tests for the display strings and signed amounts of record_* helpers."""

    def test_card_payment(self, recorder: ActivityRecorder):
        """
        GIVEN a £12.50 card payment at Pret
        WHEN I record it
        THEN it shows '-£12.50', carries -12.50 GBP and a MERCHANT payee
        """
        entry = recorder.record_card_payment("Pret", "🥪", gbp("12.50"))

        assert entry.title_right == "-£12.50"
        assert entry.subtitle_left == "Card payment"
        assert entry.amount == gbp("-12.50")
        assert entry.payee_kind == PayeeKind.MERCHANT
        assert entry.is_outgoing

    def test_add_money(self, recorder: ActivityRecorder):
        entry = recorder.record_add_money("Barclays", "🏦", gbp("100"))

        assert entry.title_right == "+£100.00"
        assert entry.kind == ActivityKind.ADD_MONEY
        assert entry.is_incoming

    def test_received(self, recorder: ActivityRecorder):
        entry = recorder.record_received("Ben Johnson", "AvatarBen", gbp("25"))

        assert entry.subtitle_left == "Received"
        assert entry.title_right == "+£25.00"
        assert entry.payee_kind == PayeeKind.PERSON

    def test_withdrawal(self, recorder: ActivityRecorder):
        entry = recorder.record_withdrawal(gbp("40"))

        assert entry.title_left == "Withdrawal"
        assert entry.subtitle_left == "ATM"
        assert entry.title_right == "-£40.00"

    def test_buy_shows_shares(self, recorder: ActivityRecorder):
        entry = recorder.record_buy("Apple", "", usd("1000"), Decimal("5.60224089"), "AAPL")

        assert entry.title_right == "-$1,000.00"
        assert entry.subtitle_right == "+5.60 AAPL"
        assert entry.payee_kind == PayeeKind.INSTRUMENT

    def test_sell_shows_shares_sold(self, recorder: ActivityRecorder):
        entry = recorder.record_sell("Apple", "", usd("1785"), Decimal("10"), "AAPL")

        assert entry.subtitle_left == "Sold 10.00 AAPL"
        assert entry.title_right == "+$1,785.00"

    def test_request_has_no_cash_impact(self, recorder: ActivityRecorder):
        entry = recorder.record_request("Eileen", "E", gbp("12.50"))

        assert entry.subtitle_left == "Requested"
        assert entry.title_right == "£12.50"
        assert entry.amount is None

    def test_split(self, recorder: ActivityRecorder):
        entry = recorder.record_split("Dishoom", "🍛", gbp("15.27"), "Ben, Eileen")

        assert entry.subtitle_left == "Split with Ben, Eileen"
        assert entry.kind == ActivityKind.SPLIT
        assert entry.amount is None
        assert entry.related_record_id is None


class TestFilters:
    """Tests for filter() and split_eligible()."""

    @pytest.fixture
    def populated(self, recorder: ActivityRecorder) -> ActivityRecorder:
        recorder.record_card_payment("Pret", "🥪", gbp("12.50"))
        recorder.record_send("Ben", "B", gbp("10"))
        recorder.record_received("Eileen", "E", gbp("5"))
        recorder.record_card_payment("Dishoom", "🍛", gbp("45.80"))
        return recorder

    def test_filter_by_kind(self, populated: ActivityRecorder):
        results = populated.filter(kind=ActivityKind.CARD_PAYMENT)

        assert [r.title_left for r in results] == ["Pret", "Dishoom"]

    def test_filter_by_payee_kind(self, populated: ActivityRecorder):
        results = populated.filter(payee_kind=PayeeKind.PERSON)

        assert [r.title_left for r in results] == ["Ben", "Eileen"]

    def test_filter_by_sign(self, populated: ActivityRecorder):
        assert [r.title_left for r in populated.filter(sign=1)] == ["Eileen"]
        assert len(populated.filter(sign=-1)) == 3

    def test_split_eligible_only_merchant_card_payments(self, populated: ActivityRecorder):
        """
        GIVEN card payments, a send and a receive
        WHEN I list split-eligible records
        THEN only merchant card payments are returned, most recent first
        """
        results = populated.split_eligible()

        assert [r.title_left for r in results] == ["Dishoom", "Pret"]

    def test_split_payment_leaves_eligible_list(self, populated: ActivityRecorder):
        dishoom = populated.split_eligible()[0]

        populated.record_split("Dishoom", "🍛", gbp("15.27"), "Ben", related_record_id=dishoom.record_id)

        assert [r.title_left for r in populated.split_eligible()] == ["Pret"]
        assert populated.is_split(dishoom.record_id)
        assert not populated.is_split(populated.split_eligible()[0].record_id)

    def test_clear(self, populated: ActivityRecorder):
        populated.clear()

        assert populated.count() == 0
