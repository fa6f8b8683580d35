"""Webhook ingestion and replay.

A delivery is handled in up to three transactions:

1. record the delivery in ``pr_events`` (or find it already there) and commit;
2. apply it to the mirror tables and stamp the terminal status, committed
   together;
3. if step 2 raised, roll it back and record the failure on the event row
   in a fresh transaction before re-raising.

Step 1 being committed first is what lets a ``failed`` row survive the
rollback of the mirror writes it attempted.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from review_sync.models.pr_event import EventStatus, PrEvent
from review_sync.schemas.github import parse_event
from review_sync.services import event_store
from review_sync.services.errors import EventNotFoundError, error_message
from review_sync.services.processor import process_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    already_processed: bool
    status: EventStatus


async def _process_and_finalize(
    db: AsyncSession,
    event_id: int,
    github_event: str,
    action: str | None,
    payload: Mapping[str, Any],
) -> EventStatus:
    try:
        event = parse_event(github_event, action, payload)
        status = await process_event(db, event)
        await event_store.mark_finished(db, event_id, status)
        await db.commit()
    except Exception as exc:
        await db.rollback()
        await event_store.mark_failed(db, event_id, error_message(exc))
        raise
    return status


async def ingest_github_event(
    db: AsyncSession,
    *,
    delivery_id: str,
    github_event: str,
    action: str | None,
    payload: Mapping[str, Any],
) -> IngestResult:
    """Record and apply one webhook delivery.

    A delivery ID seen before is never applied again; the stored status is
    reported instead, with ``failed`` surfaced as ``ignored``.  Use
    :func:`replay_event` to retry a failed delivery.
    """
    record = await event_store.record_incoming(
        db,
        delivery_id=delivery_id,
        github_event=github_event,
        action=action,
        payload=payload,
    )

    if not record.is_new:
        stored = record.event.status
        logger.info("Duplicate GitHub delivery %s (stored status %s)", delivery_id, stored.value)
        status = EventStatus.ignored if stored == EventStatus.failed else stored
        return IngestResult(already_processed=True, status=status)

    event_id = record.event.id
    try:
        status = await _process_and_finalize(db, event_id, github_event, action, payload)
    except Exception:
        logger.exception("Failed to process GitHub delivery %s (%s)", delivery_id, github_event)
        raise

    logger.info("GitHub delivery %s (%s/%s) %s", delivery_id, github_event, action, status.value)
    return IngestResult(already_processed=False, status=status)


async def replay_event(db: AsyncSession, event_id: int) -> EventStatus:
    """Re-run a stored delivery by its local ID, bypassing the dedupe gate."""
    row = await db.get(PrEvent, event_id, populate_existing=True)
    if row is None:
        await db.rollback()
        raise EventNotFoundError(f"PR event {event_id} not found")

    github_event, action, payload = row.github_event, row.action, row.payload
    logger.info("Replaying PR event %s (delivery %s)", event_id, row.delivery_id)
    try:
        status = await _process_and_finalize(db, event_id, github_event, action, payload)
    except Exception:
        logger.exception("Replay of PR event %s failed", event_id)
        raise

    logger.info("Replay of PR event %s finished as %s", event_id, status.value)
    return status
