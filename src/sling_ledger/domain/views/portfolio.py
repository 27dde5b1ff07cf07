"""View models for holdings and savings outputs."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sling_ledger.domain.models import Money, YieldDisplayMode


@dataclass
class HoldingView:
    """View model for a single position valued at a current price."""

    instrument_id: str
    shares: Decimal
    average_price: Money
    cost_basis: Money
    current_price: Optional[Money] = None
    market_value: Optional[Money] = None
    unrealized_pnl: Optional[Money] = None
    pnl_percent: Optional[Decimal] = None


@dataclass
class SavingsSummary:
    """Savings (USDY) position as presented to the user."""

    token_balance: Decimal
    token_price: Money
    total_value: Money
    total_deposited: Money
    total_earnings: Money
    display_mode: YieldDisplayMode
    display_tokens: Decimal
    display_price: Money
    first_deposit_at: Optional[datetime] = None


@dataclass
class PortfolioPnL:
    """Whole-portfolio profit and loss at a set of prices."""

    market_value: Money
    cost_basis: Money
    unrealized_pnl: Money
    pnl_percent: Optional[Decimal] = None
