import logging

from sqlalchemy.ext.asyncio import AsyncSession

from review_sync.models.pr_event import EventStatus
from review_sync.schemas.github import (
    GitHubEvent,
    IssueCommentEvent,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
)
from review_sync.services import mirror
from review_sync.services.errors import EntityNotSyncedError
from review_sync.services.resolver import find_pull_request

logger = logging.getLogger(__name__)

REVIEW_UPSERT_ACTIONS = {"submitted", "edited"}
COMMENT_UPSERT_ACTIONS = {"created", "edited"}


async def _handle_pull_request(db: AsyncSession, event: PullRequestEvent) -> EventStatus:
    if event.pull_request is None:
        return EventStatus.ignored
    await mirror.upsert_pull_request(db, event.repository, event.pull_request)
    return EventStatus.processed


async def _handle_review(db: AsyncSession, event: PullRequestReviewEvent) -> EventStatus:
    if event.review is None:
        return EventStatus.ignored

    if event.action in REVIEW_UPSERT_ACTIONS:
        pull_request = await find_pull_request(
            db, pull_request=event.pull_request, repository=event.repository
        )
        if pull_request is None:
            raise EntityNotSyncedError("Pull request not synced locally for review event")
        await mirror.upsert_review(db, pull_request.id, event.review)
        return EventStatus.processed

    if event.action == "dismissed" and event.review.id is not None:
        await mirror.delete_review(db, event.review.id)
        return EventStatus.processed

    return EventStatus.ignored


async def _apply_comment(db: AsyncSession, event, pull_request_lookup: dict) -> EventStatus:
    comment = event.comment
    if comment is None:
        return EventStatus.ignored

    if event.action == "deleted":
        if comment.id is None:
            return EventStatus.ignored
        removed = await mirror.delete_comment(db, comment.id)
        return EventStatus.processed if removed else EventStatus.ignored

    if event.action not in COMMENT_UPSERT_ACTIONS:
        return EventStatus.ignored

    pull_request = await find_pull_request(db, repository=event.repository, **pull_request_lookup)
    if pull_request is None:
        raise EntityNotSyncedError("Pull request not synced locally for comment event")
    await mirror.upsert_comment(db, pull_request.id, comment)
    return EventStatus.processed


async def _handle_review_comment(db: AsyncSession, event: PullRequestReviewCommentEvent) -> EventStatus:
    return await _apply_comment(db, event, {"pull_request": event.pull_request})


async def _handle_issue_comment(db: AsyncSession, event: IssueCommentEvent) -> EventStatus:
    # comments on plain issues share this event kind
    if event.issue is None or not event.issue.is_pull_request:
        return EventStatus.ignored
    return await _apply_comment(db, event, {"issue": event.issue})


_HANDLERS = {
    "pull_request": _handle_pull_request,
    "pull_request_review": _handle_review,
    "pull_request_review_comment": _handle_review_comment,
    "issue_comment": _handle_issue_comment,
}


async def process_event(db: AsyncSession, event: GitHubEvent) -> EventStatus:
    """Apply *event* to the mirror tables and return its terminal status.

    Runs inside the caller's transaction.  Missing parent entities raise so the
    caller can record the failure; unsupported kinds and actions are ignored.
    """
    handler = _HANDLERS.get(event.kind)
    if handler is None:
        logger.debug("No handler for GitHub event %s", event.kind)
        return EventStatus.ignored
    return await handler(db, event)
