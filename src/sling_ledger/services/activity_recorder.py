"""Append-only activity feed."""

import dataclasses
import logging
import threading
from decimal import Decimal
from typing import Optional

from sling_ledger.core.timezone import Clock, SystemClock
from sling_ledger.domain.models import ActivityKind, ActivityRecord, Money, PayeeKind
from sling_ledger.repositories.memory import InMemoryActivityRepository
from sling_ledger.repositories.protocols import ActivityRepository
from sling_ledger.services.currency_converter import format_money

logger = logging.getLogger(__name__)

TOP_UP_AVATAR = "🏦"
WITHDRAWAL_AVATAR = "💳"
SAVINGS_AVATAR = "💰"


class ActivityRecorder:
    """
    Append-only log of completed mutations.

    Records are never edited or deleted individually. The ``record_*`` helpers
    build the display strings for each kind of activity; ``amount`` on the
    resulting record is the signed cash impact.
    """

    def __init__(
        self,
        repository: Optional[ActivityRepository] = None,
        clock: Optional[Clock] = None,
        lock: Optional[threading.RLock] = None,
    ):
        self._repo = repository if repository is not None else InMemoryActivityRepository()
        self._clock = clock or SystemClock()
        self._lock = lock or threading.RLock()

    def record(self, entry: ActivityRecord) -> ActivityRecord:
        """Append an entry; a missing date is stamped with the clock."""
        if entry.date is None:
            entry = dataclasses.replace(entry, date=self._clock.now())
        with self._lock:
            stored = self._repo.append(entry)
        logger.debug("Recorded %s activity: %s %s", entry.kind.value, entry.title_left, entry.title_right)
        return stored

    def all(self) -> list[ActivityRecord]:
        """Records in insertion order."""
        with self._lock:
            return self._repo.list_all()

    def recent(self, limit: Optional[int] = None) -> list[ActivityRecord]:
        """Records most-recent-first."""
        records = list(reversed(self.all()))
        return records[:limit] if limit is not None else records

    def count(self) -> int:
        with self._lock:
            return self._repo.count()

    def get(self, record_id: str) -> Optional[ActivityRecord]:
        for entry in self.all():
            if entry.record_id == record_id:
                return entry
        return None

    def filter(
        self,
        kind: Optional[ActivityKind] = None,
        payee_kind: Optional[PayeeKind] = None,
        sign: Optional[int] = None,
    ) -> list[ActivityRecord]:
        """
        Filter records client-side.

        Args:
            kind: Only records of this ActivityKind
            payee_kind: Only records with this payee kind
            sign: Negative for money out, positive for money in
        """
        results = []
        for entry in self.all():
            if kind is not None and entry.kind != kind:
                continue
            if payee_kind is not None and entry.payee_kind != payee_kind:
                continue
            if sign is not None:
                if sign < 0 and not entry.is_outgoing:
                    continue
                if sign > 0 and not entry.is_incoming:
                    continue
            results.append(entry)
        return results

    def split_eligible(self) -> list[ActivityRecord]:
        """Outgoing merchant card payments not yet split, most recent first."""
        already_split = self._split_payment_ids()
        return [
            entry
            for entry in self.recent()
            if entry.kind == ActivityKind.CARD_PAYMENT
            and entry.payee_kind == PayeeKind.MERCHANT
            and entry.is_outgoing
            and entry.record_id not in already_split
        ]

    def is_split(self, record_id: str) -> bool:
        return record_id in self._split_payment_ids()

    def _split_payment_ids(self) -> set[str]:
        return {
            entry.related_record_id
            for entry in self.all()
            if entry.kind == ActivityKind.SPLIT and entry.related_record_id
        }

    def clear(self) -> None:
        """Drop all records (account reset only)."""
        with self._lock:
            self._repo.clear()

    # Convenience recorders

    def record_add_money(self, source_name: str, source_avatar: str, amount: Money) -> ActivityRecord:
        return self._add(
            source_avatar, source_name, "", amount, ActivityKind.ADD_MONEY, PayeeKind.SELF, outgoing=False
        )

    def record_top_up(self, amount: Money, source: str = "Bank Transfer") -> ActivityRecord:
        return self._add(
            TOP_UP_AVATAR, "Top Up", source, amount, ActivityKind.ADD_MONEY, PayeeKind.SELF, outgoing=False
        )

    def record_withdrawal(self, amount: Money, method: str = "ATM") -> ActivityRecord:
        return self._add(
            WITHDRAWAL_AVATAR, "Withdrawal", method, amount, ActivityKind.WITHDRAWAL, PayeeKind.SELF, outgoing=True
        )

    def record_send(self, to_name: str, to_avatar: str, amount: Money) -> ActivityRecord:
        return self._add(to_avatar, to_name, "", amount, ActivityKind.SEND, PayeeKind.PERSON, outgoing=True)

    def record_received(self, from_name: str, from_avatar: str, amount: Money) -> ActivityRecord:
        return self._add(
            from_avatar, from_name, "Received", amount, ActivityKind.RECEIVE, PayeeKind.PERSON, outgoing=False
        )

    def record_card_payment(self, merchant_name: str, merchant_avatar: str, amount: Money) -> ActivityRecord:
        return self._add(
            merchant_avatar,
            merchant_name,
            "Card payment",
            amount,
            ActivityKind.CARD_PAYMENT,
            PayeeKind.MERCHANT,
            outgoing=True,
        )

    def record_request(self, from_name: str, from_avatar: str, amount: Money) -> ActivityRecord:
        """A request has no cash impact until it is paid."""
        return self.record(
            ActivityRecord(
                avatar=from_avatar,
                title_left=from_name,
                subtitle_left="Requested",
                title_right=format_money(amount.amount, amount.currency_code),
                kind=ActivityKind.REQUEST,
                payee_kind=PayeeKind.PERSON,
            )
        )

    def record_pay_request(self, to_name: str, to_avatar: str, amount: Money, note: str = "") -> ActivityRecord:
        return self._add(
            to_avatar, to_name, note or "Payment", amount, ActivityKind.PAY_REQUEST, PayeeKind.PERSON, outgoing=True
        )

    def record_split(
        self,
        merchant_name: str,
        merchant_avatar: str,
        split_amount: Money,
        with_names: str,
        related_record_id: Optional[str] = None,
    ) -> ActivityRecord:
        """Share owed by the other participants; no cash moves."""
        return self.record(
            ActivityRecord(
                avatar=merchant_avatar,
                title_left=merchant_name,
                subtitle_left=f"Split with {with_names}",
                title_right=format_money(split_amount.amount, split_amount.currency_code),
                kind=ActivityKind.SPLIT,
                payee_kind=PayeeKind.MERCHANT,
                related_record_id=related_record_id,
            )
        )

    def record_buy(
        self, instrument_name: str, icon: str, amount: Money, shares: Decimal, symbol: str
    ) -> ActivityRecord:
        return self._add(
            icon,
            instrument_name,
            "",
            amount,
            ActivityKind.BUY,
            PayeeKind.INSTRUMENT,
            outgoing=True,
            subtitle_right=f"+{shares:.2f} {symbol}",
        )

    def record_sell(
        self, instrument_name: str, icon: str, amount: Money, shares: Decimal, symbol: str
    ) -> ActivityRecord:
        return self._add(
            icon,
            instrument_name,
            f"Sold {shares:.2f} {symbol}",
            amount,
            ActivityKind.SELL,
            PayeeKind.INSTRUMENT,
            outgoing=False,
        )

    def record_savings_deposit(self, amount: Money, tokens: Decimal, symbol: str) -> ActivityRecord:
        return self._add(
            SAVINGS_AVATAR,
            "Savings",
            "Deposit",
            amount,
            ActivityKind.SAVINGS_DEPOSIT,
            PayeeKind.INSTRUMENT,
            outgoing=True,
            subtitle_right=f"+{tokens:.2f} {symbol}",
        )

    def record_savings_withdraw(self, amount: Money, tokens: Decimal, symbol: str) -> ActivityRecord:
        return self._add(
            SAVINGS_AVATAR,
            "Savings",
            f"Withdrew {tokens:.2f} {symbol}",
            amount,
            ActivityKind.SAVINGS_WITHDRAW,
            PayeeKind.INSTRUMENT,
            outgoing=False,
        )

    def _add(
        self,
        avatar: str,
        title: str,
        subtitle: str,
        amount: Money,
        kind: ActivityKind,
        payee_kind: PayeeKind,
        outgoing: bool,
        subtitle_right: str = "",
    ) -> ActivityRecord:
        signed = -abs(amount) if outgoing else abs(amount)
        return self.record(
            ActivityRecord(
                avatar=avatar,
                title_left=title,
                subtitle_left=subtitle,
                title_right=format_money(signed.amount, signed.currency_code, signed=True),
                subtitle_right=subtitle_right,
                kind=kind,
                payee_kind=payee_kind,
                amount=signed,
            )
        )
