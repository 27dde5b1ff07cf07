"""In-memory implementation of ActivityRepository."""

from sling_ledger.domain.models import ActivityRecord


class InMemoryActivityRepository:
    """List-backed activity store; the default when no database is configured."""

    def __init__(self):
        self._records: list[ActivityRecord] = []

    def append(self, record: ActivityRecord) -> ActivityRecord:
        self._records.append(record)
        return record

    def list_all(self) -> list[ActivityRecord]:
        return list(self._records)

    def count(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()
