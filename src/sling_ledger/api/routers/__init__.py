"""API routers package."""

from sling_ledger.api.routers.balance import router as balance_router
from sling_ledger.api.routers.rates import router as rates_router
from sling_ledger.api.routers.holdings import router as holdings_router
from sling_ledger.api.routers.savings import router as savings_router
from sling_ledger.api.routers.split import router as split_router
from sling_ledger.api.routers.activity import router as activity_router
from sling_ledger.api.routers.recurring import router as recurring_router

__all__ = [
    "balance_router",
    "rates_router",
    "holdings_router",
    "savings_router",
    "split_router",
    "activity_router",
    "recurring_router",
]
