"""In-memory repository implementations."""

from sling_ledger.repositories.memory.activity_repo import InMemoryActivityRepository

__all__ = [
    "InMemoryActivityRepository",
]
