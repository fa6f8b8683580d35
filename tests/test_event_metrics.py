from datetime import datetime, timezone

from review_sync.models import EventStatus, PrEvent
from review_sync.services.event_metrics import calculate_event_metrics


def make_event(event_id, status, **fields):
    return PrEvent(
        id=event_id,
        delivery_id=f"delivery-{event_id}",
        github_event="pull_request",
        status=status,
        retry_count=fields.pop("retry_count", 0),
        **fields,
    )


def at(hour):
    return datetime(2024, 5, 1, hour, 0, tzinfo=timezone.utc)


def test_empty_ledger():
    metrics = calculate_event_metrics([])

    assert (metrics.processed, metrics.pending, metrics.failed, metrics.ignored) == (0, 0, 0, 0)
    assert metrics.latest_processed_at is None
    assert metrics.latest_failure is None


def test_counts_and_latest_entries():
    events = [
        make_event(1, EventStatus.processed, processed_at=at(9)),
        make_event(2, EventStatus.processed, processed_at=at(11)),
        make_event(3, EventStatus.processed, processed_at=None),
        make_event(4, EventStatus.pending),
        make_event(5, EventStatus.ignored, processed_at=at(12)),
        make_event(6, EventStatus.failed, updated_at=at(8), error_message="older", retry_count=3),
        make_event(7, EventStatus.failed, updated_at=at(10), error_message="newer", retry_count=1),
    ]

    metrics = calculate_event_metrics(events)

    assert metrics.processed == 3
    assert metrics.pending == 1
    assert metrics.ignored == 1
    assert metrics.failed == 2
    # ignored rows carry processed_at too but do not count here
    assert metrics.latest_processed_at == at(11)
    assert metrics.latest_failure.id == 7
    assert metrics.latest_failure.delivery_id == "delivery-7"
    assert metrics.latest_failure.error_message == "newer"
    assert metrics.latest_failure.retry_count == 1
