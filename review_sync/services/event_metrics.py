from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from review_sync.models.pr_event import EventStatus, PrEvent


@dataclass
class LatestFailure:
    id: int
    delivery_id: str
    error_message: str | None
    updated_at: datetime | None
    retry_count: int


@dataclass
class EventMetrics:
    processed: int = 0
    pending: int = 0
    failed: int = 0
    ignored: int = 0
    latest_processed_at: datetime | None = None
    latest_failure: LatestFailure | None = None


def _is_later(candidate: datetime | None, current: datetime | None) -> bool:
    if candidate is None:
        return False
    return current is None or candidate > current


def calculate_event_metrics(events: Iterable[PrEvent]) -> EventMetrics:
    """Summarise the webhook ledger for the operator dashboard."""
    metrics = EventMetrics()
    for event in events:
        if event.status == EventStatus.processed:
            metrics.processed += 1
            if _is_later(event.processed_at, metrics.latest_processed_at):
                metrics.latest_processed_at = event.processed_at
        elif event.status == EventStatus.pending:
            metrics.pending += 1
        elif event.status == EventStatus.failed:
            metrics.failed += 1
            current = metrics.latest_failure
            if current is None or _is_later(event.updated_at, current.updated_at):
                metrics.latest_failure = LatestFailure(
                    id=event.id,
                    delivery_id=event.delivery_id,
                    error_message=event.error_message,
                    updated_at=event.updated_at,
                    retry_count=event.retry_count or 0,
                )
        elif event.status == EventStatus.ignored:
            metrics.ignored += 1
    return metrics
