"""SQLAlchemy ORM model definitions."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Numeric,
    Enum as SqlEnum,
)

from sling_ledger.repositories.sqlalchemy.database import Base
from sling_ledger.domain.models.enums import ActivityKind, PayeeKind


class ActivityRecordORM(Base):
    """Append-only activity log row."""

    __tablename__ = "activity_records"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    record_id = Column(String(36), unique=True, nullable=False)
    avatar = Column(String(255), nullable=False)
    title_left = Column(String(255), nullable=False)
    subtitle_left = Column(String(255), nullable=False)
    title_right = Column(String(64), nullable=False)
    subtitle_right = Column(String(255), nullable=False, default="")
    date = Column(DateTime, nullable=True)
    kind = Column(SqlEnum(ActivityKind), nullable=False)
    payee_kind = Column(SqlEnum(PayeeKind), nullable=False)
    amount = Column(Numeric(precision=18, scale=8), nullable=True)
    currency_code = Column(String(8), nullable=True)
    related_record_id = Column(String(36), nullable=True)
