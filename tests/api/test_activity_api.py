"""
API tests for bill splitting and the activity feed.

Tests cover:
- Equal split calculation with remainder distribution
- Settling a split against a past card payment, once only
- Activity listing and filters
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from sling_ledger.account_context import AccountContext

from tests.conftest import gbp, usd


@pytest.fixture
def with_activity(client: TestClient, funded_context: AccountContext) -> TestClient:
    funded_context.transfers.card_payment("Pret", "🥪", gbp("12.50"))
    funded_context.transfers.send("Ben", "B", gbp("10"))
    funded_context.transfers.card_payment("Dishoom", "🍛", gbp("45.80"))
    return client


# =============================================================================
# SPLIT TESTS
# =============================================================================


class TestSplitAPI:
    """Tests for /split endpoints."""

    def test_split_three_ways(self, client: TestClient):
        """
        GIVEN a £45.80 bill
        WHEN I split it three ways
        THEN shares are 15.27/15.27/15.26 and sum to the total
        """
        response = client.post("/split", json={"total": "45.80", "participant_count": 3})

        assert response.status_code == 200
        data = response.json()
        assert [Decimal(s["amount"]) for s in data["shares"]] == [
            Decimal("15.27"),
            Decimal("15.27"),
            Decimal("15.26"),
        ]
        assert Decimal(data["per_person"]["amount"]) == Decimal("15.2667")
        assert data["total"]["currency_code"] == "GBP"

    def test_zero_participants_returns_400(self, client: TestClient):
        response = client.post("/split", json={"total": "45.80", "participant_count": 0})

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_PARTICIPANT_COUNT"

    def test_settle_split(self, with_activity: TestClient, funded_context: AccountContext):
        record_id = with_activity.get("/activity", params={"split_eligible": True}).json()["items"][0]["record_id"]
        balance_before = funded_context.ledger.balance()

        response = with_activity.post(
            "/split/settle", json={"record_id": record_id, "participant_names": ["Ben", "Eileen"]}
        )

        assert response.status_code == 200
        assert Decimal(response.json()["shares"][0]["amount"]) == Decimal("15.27")
        assert funded_context.ledger.balance() == balance_before

    def test_settle_unknown_record_returns_404(self, client: TestClient):
        response = client.post("/split/settle", json={"record_id": "missing", "participant_names": ["Ben"]})

        assert response.status_code == 404

    def test_sub_cent_total_returns_400(self, client: TestClient):
        response = client.post("/split", json={"total": "45.805", "participant_count": 3})

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_AMOUNT"

    def test_settle_twice_returns_400(self, with_activity: TestClient):
        """
        GIVEN a card payment that was just split
        WHEN I settle it again
        THEN the second attempt is rejected and the payment is no longer split-eligible
        """
        record_id = with_activity.get("/activity", params={"split_eligible": True}).json()["items"][0]["record_id"]
        body = {"record_id": record_id, "participant_names": ["Ben"]}
        with_activity.post("/split/settle", json=body)

        response = with_activity.post("/split/settle", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"
        eligible = with_activity.get("/activity", params={"split_eligible": True}).json()["items"]
        assert record_id not in [item["record_id"] for item in eligible]


# =============================================================================
# ACTIVITY TESTS
# =============================================================================


class TestActivityAPI:
    """Tests for GET /activity."""

    def test_most_recent_first(self, with_activity: TestClient):
        data = with_activity.get("/activity").json()

        assert data["total"] == 3
        assert [item["title_left"] for item in data["items"]] == ["Dishoom", "Ben", "Pret"]
        assert data["items"][0]["title_right"] == "-£45.80"

    def test_filter_by_payee_kind(self, with_activity: TestClient):
        data = with_activity.get("/activity", params={"payee_kind": "PERSON"}).json()

        assert [item["title_left"] for item in data["items"]] == ["Ben"]

    def test_split_eligible(self, with_activity: TestClient):
        data = with_activity.get("/activity", params={"split_eligible": True}).json()

        assert [item["title_left"] for item in data["items"]] == ["Dishoom", "Pret"]

    def test_limit(self, with_activity: TestClient):
        data = with_activity.get("/activity", params={"limit": 1}).json()

        assert data["total"] == 3
        assert len(data["items"]) == 1

    def test_trade_shows_in_feed(self, client: TestClient, funded_context: AccountContext):
        funded_context.transfers.buy_stock("AAPL", usd("178.50"), shares=10)

        item = client.get("/activity", params={"kind": "BUY"}).json()["items"][0]

        assert item["subtitle_right"] == "+10.00 AAPL"
        assert Decimal(item["amount"]["amount"]) == Decimal("-1785.00")
