"""View models for service outputs."""

from sling_ledger.domain.views.portfolio import HoldingView, PortfolioPnL, SavingsSummary

__all__ = [
    "HoldingView",
    "PortfolioPnL",
    "SavingsSummary",
]
