from datetime import datetime
from pydantic import BaseModel

from review_sync.models.pr_event import EventStatus


class PrEventOut(BaseModel):
    id: int
    delivery_id: str
    github_event: str
    action: str | None = None
    repository_github_id: int | None = None
    pull_request_github_id: int | None = None
    status: EventStatus
    retry_count: int
    error_message: str | None = None
    processed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LatestFailureOut(BaseModel):
    id: int
    delivery_id: str
    error_message: str | None = None
    updated_at: datetime | None = None
    retry_count: int

    class Config:
        from_attributes = True


class EventMetricsOut(BaseModel):
    processed: int
    pending: int
    failed: int
    ignored: int
    latest_processed_at: datetime | None = None
    latest_failure: LatestFailureOut | None = None

    class Config:
        from_attributes = True


class ReplayResponse(BaseModel):
    success: bool
    status: EventStatus
