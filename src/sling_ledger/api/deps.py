"""Dependency injection for FastAPI."""

from sling_ledger.account_context import AccountContext
from sling_ledger.account_context import get_account_context as _get_global_context


def get_account_context() -> AccountContext:
    """Provide the AccountContext (overridden in tests)."""
    return _get_global_context()
