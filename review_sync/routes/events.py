import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from review_sync.database import get_db
from review_sync.models.pr_event import EventStatus
from review_sync.models.user import User
from review_sync.schemas.events import EventMetricsOut, PrEventOut, ReplayResponse
from review_sync.services import event_store
from review_sync.services.errors import EventNotFoundError, error_message
from review_sync.services.event_metrics import calculate_event_metrics
from review_sync.services.ingest import replay_event
from review_sync.utils.auth import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/github/events", tags=["GitHub Events"])


@router.get("", response_model=list[PrEventOut])
async def list_events(
    status: EventStatus | None = None,
    limit: int = Query(50, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await event_store.list_events(db, status=status, limit=limit)


@router.get("/metrics", response_model=EventMetricsOut)
async def event_metrics(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    events = await event_store.all_events(db)
    return EventMetricsOut.model_validate(calculate_event_metrics(events), from_attributes=True)


@router.post("/{event_id}/replay", response_model=ReplayResponse)
async def replay(
    event_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Reprocess a stored delivery, typically one that previously failed."""
    logger.info("Replay of PR event %s requested by %s", event_id, current_user.id)
    try:
        status = await replay_event(db, event_id)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except Exception as exc:
        raise HTTPException(status_code=500, detail=error_message(exc))
    return ReplayResponse(success=True, status=status)
