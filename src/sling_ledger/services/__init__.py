"""Engine services."""

from sling_ledger.services.currency_converter import CurrencyConverter, format_money, symbol_for
from sling_ledger.services.ledger import Ledger
from sling_ledger.services.holdings_book import HoldingsBook
from sling_ledger.services.split_calculator import SplitCalculator
from sling_ledger.services.quote_timer import QuoteTimer, random_jitter
from sling_ledger.services.activity_recorder import ActivityRecorder
from sling_ledger.services.pending_operation import PendingOperation
from sling_ledger.services.fee_service import FeeService
from sling_ledger.services.savings_service import SavingsService
from sling_ledger.services.transfer_service import TransferService
from sling_ledger.services.payment_requests import PaymentRequestBook
from sling_ledger.services.recurring_purchases import RecurringPurchaseBook
from sling_ledger.services.unit_of_work import unit_of_work

__all__ = [
    "CurrencyConverter",
    "format_money",
    "symbol_for",
    "Ledger",
    "HoldingsBook",
    "SplitCalculator",
    "QuoteTimer",
    "random_jitter",
    "ActivityRecorder",
    "PendingOperation",
    "FeeService",
    "SavingsService",
    "TransferService",
    "PaymentRequestBook",
    "RecurringPurchaseBook",
    "unit_of_work",
]
