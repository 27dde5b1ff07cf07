"""SQLAlchemy implementation of ActivityRepository."""

from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from sling_ledger.core.timezone import to_utc
from sling_ledger.domain.models import ActivityRecord, Money
from sling_ledger.repositories.sqlalchemy.orm_models import ActivityRecordORM


class SqlAlchemyActivityRepository:
    """SQLAlchemy-backed activity log. Rows are only ever inserted."""

    def __init__(self, db: Session):
        self._db = db

    def append(self, record: ActivityRecord) -> ActivityRecord:
        """Persist a new record; the session is rolled back if the commit fails."""
        orm_record = self._to_orm(record)
        self._db.add(orm_record)
        try:
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        self._db.refresh(orm_record)
        return self._to_domain(orm_record)

    def list_all(self) -> list[ActivityRecord]:
        """List records in insertion order."""
        rows = self._db.query(ActivityRecordORM).order_by(ActivityRecordORM.seq).all()
        return [self._to_domain(row) for row in rows]

    def count(self) -> int:
        return self._db.query(func.count(ActivityRecordORM.seq)).scalar() or 0

    def clear(self) -> None:
        self._db.query(ActivityRecordORM).delete()
        try:
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

    @staticmethod
    def _to_orm(record: ActivityRecord) -> ActivityRecordORM:
        """Convert domain model to ORM model."""
        return ActivityRecordORM(
            record_id=record.record_id,
            avatar=record.avatar,
            title_left=record.title_left,
            subtitle_left=record.subtitle_left,
            title_right=record.title_right,
            subtitle_right=record.subtitle_right,
            # SQLite drops tzinfo; store naive UTC
            date=to_utc(record.date).replace(tzinfo=None) if record.date else None,
            kind=record.kind,
            payee_kind=record.payee_kind,
            amount=record.amount.amount if record.amount else None,
            currency_code=record.amount.currency_code if record.amount else None,
            related_record_id=record.related_record_id,
        )

    @staticmethod
    def _to_domain(orm: ActivityRecordORM) -> ActivityRecord:
        """Convert ORM model to domain model."""
        amount = None
        if orm.amount is not None:
            amount = Money(Decimal(str(orm.amount)), orm.currency_code)
        return ActivityRecord(
            record_id=orm.record_id,
            avatar=orm.avatar,
            title_left=orm.title_left,
            subtitle_left=orm.subtitle_left,
            title_right=orm.title_right,
            subtitle_right=orm.subtitle_right or "",
            date=to_utc(orm.date) if orm.date else None,
            kind=orm.kind,
            payee_kind=orm.payee_kind,
            amount=amount,
            related_record_id=orm.related_record_id,
        )
