from sqlalchemy import Column, Integer, BigInteger, String, Text, DateTime, Enum, JSON, Index
from sqlalchemy.dialects.postgresql import JSONB
from enum import Enum as PyEnum

from review_sync.database import Base, utcnow


class EventStatus(str, PyEnum):
    """Lifecycle status of a webhook delivery."""

    pending = "pending"
    processed = "processed"
    failed = "failed"
    ignored = "ignored"


class PrEvent(Base):
    """Ledger row for one GitHub webhook delivery.

    Rows are created once per ``delivery_id`` in ``pending`` and moved to a
    terminal status by ingestion or replay.  They are never deleted.
    """

    __tablename__ = "pr_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    delivery_id = Column(String(255), unique=True, nullable=False)
    github_event = Column(String(100), nullable=False)
    action = Column(String(100))
    repository_github_id = Column(BigInteger)
    pull_request_github_id = Column(BigInteger)
    status = Column(
        Enum(EventStatus, name="pr_event_status", native_enum=False, length=50),
        default=EventStatus.pending,
        nullable=False,
    )
    retry_count = Column(Integer, default=0, nullable=False)
    error_message = Column(Text)
    payload = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
    processed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_pr_events_status", "status"),
    )

    def __repr__(self):
        return f"<PrEvent id={self.id} delivery_id={self.delivery_id} event={self.github_event} status={self.status}>"
