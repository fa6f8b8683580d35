"""Durable ledger of GitHub webhook deliveries.

The unique constraint on ``pr_events.delivery_id`` decides whether a delivery
has been seen before.  Each helper here commits its own transaction so that
the ledger row outlives any rollback of the mirror writes.
"""

from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from review_sync.database import utcnow
from review_sync.models.pr_event import EventStatus, PrEvent
from review_sync.services.normalize import to_mapping, to_number


@dataclass(frozen=True)
class IncomingRecord:
    event: PrEvent
    is_new: bool


def _embedded_id(payload: Mapping[str, Any], key: str) -> int | None:
    obj = to_mapping(payload.get(key))
    return to_number(obj.get("id")) if obj is not None else None


async def get_by_delivery_id(db: AsyncSession, delivery_id: str) -> PrEvent | None:
    result = await db.execute(select(PrEvent).where(PrEvent.delivery_id == delivery_id).limit(1))
    return result.scalar_one_or_none()


async def record_incoming(
    db: AsyncSession,
    *,
    delivery_id: str,
    github_event: str,
    action: str | None,
    payload: Mapping[str, Any],
) -> IncomingRecord:
    """Insert a ``pending`` row for *delivery_id* or return the existing one.

    A concurrent insert of the same delivery loses on the unique constraint;
    the loser rolls back and reports the winner's row.
    """
    existing = await get_by_delivery_id(db, delivery_id)
    if existing is not None:
        await db.commit()
        return IncomingRecord(event=existing, is_new=False)

    event = PrEvent(
        delivery_id=delivery_id,
        github_event=github_event,
        action=action,
        repository_github_id=_embedded_id(payload, "repository"),
        pull_request_github_id=_embedded_id(payload, "pull_request"),
        status=EventStatus.pending,
        retry_count=0,
        payload=dict(payload),
    )
    db.add(event)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        existing = await get_by_delivery_id(db, delivery_id)
        if existing is None:
            raise
        await db.commit()
        return IncomingRecord(event=existing, is_new=False)

    return IncomingRecord(event=event, is_new=True)


async def mark_finished(db: AsyncSession, event_id: int, status: EventStatus) -> None:
    """Stamp a terminal status; the caller commits alongside its mirror writes."""
    now = utcnow()
    await db.execute(
        update(PrEvent)
        .where(PrEvent.id == event_id)
        .values(status=status, processed_at=now, error_message=None, updated_at=now)
        .execution_options(synchronize_session=False)
    )


async def mark_failed(db: AsyncSession, event_id: int, error_message: str) -> None:
    """Record a failed attempt in its own transaction."""
    await db.execute(
        update(PrEvent)
        .where(PrEvent.id == event_id)
        .values(
            status=EventStatus.failed,
            error_message=error_message,
            retry_count=PrEvent.retry_count + 1,
            updated_at=utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    await db.commit()


async def list_events(
    db: AsyncSession,
    status: EventStatus | None = None,
    limit: int = 50,
) -> list[PrEvent]:
    query = select(PrEvent).order_by(PrEvent.created_at.desc(), PrEvent.id.desc()).limit(limit)
    if status is not None:
        query = query.where(PrEvent.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())


async def all_events(db: AsyncSession) -> list[PrEvent]:
    result = await db.execute(select(PrEvent))
    return list(result.scalars().all())
