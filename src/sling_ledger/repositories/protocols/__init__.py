"""Repository protocol definitions (interfaces)."""

from sling_ledger.repositories.protocols.activity_repo import ActivityRepository

__all__ = [
    "ActivityRepository",
]
