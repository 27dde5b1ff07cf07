"""Rollback of in-memory account state when a multi-step flow fails."""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from sling_ledger.services.holdings_book import HoldingsBook
from sling_ledger.services.ledger import Ledger

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(
    lock: threading.RLock,
    ledger: Ledger,
    holdings: Optional[HoldingsBook] = None,
) -> Iterator[None]:
    """
    Run a flow under the account lock as one step.

    Cash (and positions, when ``holdings`` is given) are snapshotted on entry.
    If anything inside raises, including the activity write, both are put
    back before the exception propagates.

    Usage:
        with unit_of_work(lock, ledger, holdings):
            ledger.debit(amount)
            recorder.record_send(...)
    """
    with lock:
        balance = ledger.snapshot()
        positions = holdings.snapshot() if holdings is not None else None
        try:
            yield
        except Exception:
            ledger.restore(balance)
            if holdings is not None:
                holdings.restore(positions)
            logger.warning("Flow failed, restored balance to %s", balance)
            raise
