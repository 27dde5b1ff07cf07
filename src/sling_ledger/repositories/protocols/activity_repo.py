"""Activity repository protocol."""

from typing import Protocol

from sling_ledger.domain.models import ActivityRecord


class ActivityRepository(Protocol):
    """Interface for the append-only activity store."""

    def append(self, record: ActivityRecord) -> ActivityRecord:
        """Persist a new record at the end of the log."""
        ...

    def list_all(self) -> list[ActivityRecord]:
        """List all records in insertion order."""
        ...

    def count(self) -> int:
        """Number of stored records."""
        ...

    def clear(self) -> None:
        """Delete every record (account reset)."""
        ...
