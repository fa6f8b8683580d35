"""Upsert-by-GitHub-ID writes for the mirrored pull request tables.

Both webhook ingestion and the on-demand sync go through these helpers so
that a GitHub entity never produces more than one local row.  Updates only
touch display and state columns; identity and parent links are written once,
on insert.
"""

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from review_sync.database import utcnow
from review_sync.models.comment import Comment
from review_sync.models.pull_request import PullRequest
from review_sync.models.review import Review
from review_sync.schemas.github import (
    CommentPayload,
    GitHubUser,
    PullRequestPayload,
    RepositoryPayload,
    ReviewPayload,
)
from review_sync.services.errors import EntityNotSyncedError, MalformedPayloadError
from review_sync.services.resolver import find_repository

UNKNOWN_AUTHOR = "unknown"

PULL_REQUEST_UPDATE_FIELDS = (
    "title",
    "body",
    "state",
    "author",
    "author_avatar",
    "head_branch",
    "head_sha",
    "mergeable",
    "merged",
    "draft",
    "updated_at",
    "closed_at",
    "merged_at",
)

REVIEW_UPDATE_FIELDS = (
    "state",
    "body",
    "author",
    "author_avatar",
    "synced_to_github",
    "submitted_at",
)

COMMENT_UPDATE_FIELDS = (
    "body",
    "line",
    "side",
    "path",
    "commit_id",
    "author",
    "author_avatar",
    "synced_to_github",
    "updated_at",
)

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


async def _upsert(db: AsyncSession, model, values: dict, update_fields: tuple[str, ...]) -> None:
    dialect = db.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Upserts are not supported on the {dialect} dialect")

    stmt = insert(model).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["github_id"],
        set_={field: stmt.excluded[field] for field in update_fields},
    )
    await db.execute(stmt)


def _author(user: GitHubUser | None) -> tuple[str, str | None]:
    if user is None:
        return UNKNOWN_AUTHOR, None
    return user.login or UNKNOWN_AUTHOR, user.avatar_url


async def upsert_pull_request(
    db: AsyncSession,
    repository: RepositoryPayload | None,
    pull_request: PullRequestPayload,
) -> None:
    if repository is None or repository.id is None:
        raise MalformedPayloadError("Missing repository GitHub ID in payload")

    repo = await find_repository(db, repository.id)
    if repo is None:
        raise EntityNotSyncedError(f"Repository {repository.id} not synced locally")

    if pull_request.id is None:
        raise MalformedPayloadError("Missing pull request GitHub ID in payload")

    author, avatar = _author(pull_request.user)
    now = utcnow()
    values = {
        "github_id": pull_request.id,
        "number": pull_request.number if pull_request.number is not None else 0,
        "title": pull_request.title or "",
        "body": pull_request.body,
        "state": pull_request.state or "open",
        "author": author,
        "author_avatar": avatar,
        "base_branch": (pull_request.base and pull_request.base.ref) or "unknown",
        "head_branch": (pull_request.head and pull_request.head.ref) or "unknown",
        "head_sha": pull_request.head.sha if pull_request.head else None,
        "mergeable": pull_request.mergeable,
        "merged": pull_request.is_merged,
        "draft": bool(pull_request.draft),
        "created_at": pull_request.created_at or now,
        "updated_at": pull_request.updated_at or now,
        "closed_at": pull_request.closed_at,
        "merged_at": pull_request.merged_at,
        "repository_id": repo.id,
    }
    await _upsert(db, PullRequest, values, PULL_REQUEST_UPDATE_FIELDS)


async def upsert_review(db: AsyncSession, pull_request_id: int, review: ReviewPayload) -> None:
    if review.id is None:
        raise MalformedPayloadError("Missing review GitHub ID in payload")

    author, avatar = _author(review.user)
    values = {
        "github_id": review.id,
        "state": review.state.value,
        "body": review.body,
        "author": author,
        "author_avatar": avatar,
        "synced_to_github": True,
        "submitted_at": review.submitted_at or utcnow(),
        "pull_request_id": pull_request_id,
        "user_id": None,
    }
    await _upsert(db, Review, values, REVIEW_UPDATE_FIELDS)


async def upsert_comment(db: AsyncSession, pull_request_id: int, comment: CommentPayload) -> None:
    if comment.id is None:
        raise MalformedPayloadError("Missing comment GitHub ID in payload")

    author, avatar = _author(comment.user)
    created_at = comment.created_at or utcnow()
    values = {
        "github_id": comment.id,
        "body": comment.body or "",
        "line": comment.anchor_line,
        "side": comment.side.value if comment.side else None,
        "path": comment.path,
        "commit_id": comment.resolved_commit_id,
        "author": author,
        "author_avatar": avatar,
        "synced_to_github": True,
        "created_at": created_at,
        "updated_at": comment.updated_at or created_at,
        "pull_request_id": pull_request_id,
        "user_id": None,
    }
    await _upsert(db, Comment, values, COMMENT_UPDATE_FIELDS)


async def delete_review(db: AsyncSession, github_id: int) -> bool:
    result = await db.execute(
        delete(Review)
        .where(Review.github_id == github_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def delete_comment(db: AsyncSession, github_id: int) -> bool:
    """Delete a mirrored comment; returns whether a row was removed."""
    result = await db.execute(
        delete(Comment)
        .where(Comment.github_id == github_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0
