"""Enumerations for domain models."""

from enum import Enum


class ActivityKind(str, Enum):
    """Kinds of completed ledger mutations shown in the activity feed."""

    ADD_MONEY = "ADD_MONEY"
    SEND = "SEND"
    RECEIVE = "RECEIVE"
    REQUEST = "REQUEST"
    PAY_REQUEST = "PAY_REQUEST"
    CARD_PAYMENT = "CARD_PAYMENT"
    SPLIT = "SPLIT"
    WITHDRAWAL = "WITHDRAWAL"
    BUY = "BUY"
    SELL = "SELL"
    SAVINGS_DEPOSIT = "SAVINGS_DEPOSIT"
    SAVINGS_WITHDRAW = "SAVINGS_WITHDRAW"


class PayeeKind(str, Enum):
    """Counterparty of an activity record, set when the record is created."""

    PERSON = "PERSON"
    MERCHANT = "MERCHANT"
    SELF = "SELF"  # own bank account, ATM, savings
    INSTRUMENT = "INSTRUMENT"  # stock or token


class RateSource(str, Enum):
    """Where an exchange rate came from."""

    LIVE = "LIVE"
    FALLBACK = "FALLBACK"
    IDENTITY = "IDENTITY"


class QuoteState(str, Enum):
    """Lifecycle of a time-boxed price quote."""

    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    PAUSED = "PAUSED"
    CONSUMED = "CONSUMED"


class RemainderPolicy(str, Enum):
    """How leftover cents are handled when splitting a bill."""

    DISTRIBUTE = "DISTRIBUTE"  # first participants absorb one extra cent each
    EXACT = "EXACT"  # unrounded quotient, shares may not sum to the total


class FeeTransactionType(str, Enum):
    """Transaction kinds the fee schedule distinguishes."""

    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    P2P_SEND = "P2P_SEND"
    P2P_REQUEST = "P2P_REQUEST"


class YieldDisplayMode(str, Enum):
    """How savings growth is presented."""

    ACCUMULATING = "ACCUMULATING"  # token count fixed, price grows
    REBASING = "REBASING"  # price fixed at 1.00, token count grows


class RequestStatus(str, Enum):
    """Status of a peer-to-peer payment request."""

    PENDING = "PENDING"
    PAID = "PAID"
    DECLINED = "DECLINED"


class OperationState(str, Enum):
    """State of a confirmation-screen operation awaiting submit."""

    PENDING = "PENDING"
    COMMITTED = "COMMITTED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class PortfolioEventKind(str, Enum):
    """Position changes kept in the holdings history."""

    BUY = "BUY"
    SELL = "SELL"
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"


class RecurringFrequency(str, Enum):
    """How often a recurring purchase runs."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"


class RecurringPurchaseStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    CANCELLED = "CANCELLED"
