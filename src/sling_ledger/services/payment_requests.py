"""Peer-to-peer payment requests."""

import logging
import threading
from typing import Optional

from sling_ledger.core.exceptions import InvalidAmountError, NotFoundError
from sling_ledger.core.timezone import Clock, SystemClock
from sling_ledger.domain.models import CENT, Money, PaymentRequest, RequestStatus
from sling_ledger.services.activity_recorder import ActivityRecorder
from sling_ledger.services.currency_converter import CurrencyConverter
from sling_ledger.services.ledger import Ledger
from sling_ledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


class PaymentRequestBook:
    """Incoming requests awaiting payment and requests this account has sent."""

    def __init__(
        self,
        ledger: Ledger,
        recorder: ActivityRecorder,
        converter: CurrencyConverter,
        clock: Optional[Clock] = None,
        lock: Optional[threading.RLock] = None,
    ):
        self._ledger = ledger
        self._recorder = recorder
        self._converter = converter
        self._clock = clock or SystemClock()
        self._lock = lock or ledger.lock
        self._pending: list[PaymentRequest] = []
        self._sent: list[PaymentRequest] = []

    def pending(self) -> list[PaymentRequest]:
        """Requests from others, newest first."""
        with self._lock:
            return list(self._pending)

    def sent(self) -> list[PaymentRequest]:
        """Requests this account has made, newest first."""
        with self._lock:
            return list(self._sent)

    def receive_request(
        self,
        from_name: str,
        from_username: str,
        from_avatar: str,
        amount: Money,
        note: str = "",
    ) -> PaymentRequest:
        """Someone asks this account for money."""
        self._require_positive(amount)
        request = PaymentRequest(
            counterparty_name=from_name,
            counterparty_username=from_username,
            counterparty_avatar=from_avatar,
            amount=amount,
            note=note,
            created_at=self._clock.now(),
        )
        with self._lock:
            self._pending.insert(0, request)
        return request

    def create_request(
        self,
        to_name: str,
        to_username: str,
        to_avatar: str,
        amount: Money,
        note: str = "",
    ) -> PaymentRequest:
        """Ask someone else for money; no cash moves until they pay."""
        self._require_positive(amount)
        request = PaymentRequest(
            counterparty_name=to_name,
            counterparty_username=to_username,
            counterparty_avatar=to_avatar,
            amount=amount,
            note=note,
            created_at=self._clock.now(),
        )
        with self._lock:
            self._sent.insert(0, request)
            self._recorder.record_request(to_name, to_avatar, amount)
        logger.info("Requested %s from %s", amount, to_username)
        return request

    def pay_request(self, request_id: str) -> PaymentRequest:
        """Pay a pending request: debit, record, and mark it paid."""
        with unit_of_work(self._lock, self._ledger):
            request = self._find_pending(request_id)
            base_amount = self._converter.convert_money(
                request.amount, self._ledger.base_currency
            ).quantize(CENT)
            self._ledger.debit(base_amount)
            self._recorder.record_pay_request(
                request.counterparty_name, request.counterparty_avatar, request.amount, request.note
            )
            request.status = RequestStatus.PAID
            self._pending.remove(request)
            logger.info("Paid request %s from %s", request.amount, request.counterparty_username)
            return request

    def decline_request(self, request_id: str) -> PaymentRequest:
        with self._lock:
            request = self._find_pending(request_id)
            request.status = RequestStatus.DECLINED
            self._pending.remove(request)
            return request

    def clear(self) -> None:
        with self._lock:
            self._pending.clear()
            self._sent.clear()

    def _find_pending(self, request_id: str) -> PaymentRequest:
        for request in self._pending:
            if request.request_id == request_id:
                return request
        raise NotFoundError("Payment request", request_id)

    @staticmethod
    def _require_positive(amount: Money) -> None:
        if amount.amount <= 0:
            raise InvalidAmountError(f"Request amount must be positive, got {amount}")
