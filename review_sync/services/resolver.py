from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from review_sync.models.pull_request import PullRequest
from review_sync.models.repository import Repository
from review_sync.schemas.github import IssuePayload, PullRequestPayload, RepositoryPayload


async def find_repository(db: AsyncSession, github_id: int) -> Repository | None:
    result = await db.execute(select(Repository).where(Repository.github_id == github_id).limit(1))
    return result.scalar_one_or_none()


async def find_pull_request(
    db: AsyncSession,
    *,
    pull_request: PullRequestPayload | None = None,
    repository: RepositoryPayload | None = None,
    issue: IssuePayload | None = None,
) -> PullRequest | None:
    """Locate the local pull request a payload refers to.

    Review and review-comment payloads embed the pull request, so its GitHub
    ID is tried first.  Issue-comment payloads only carry the repository and
    the issue number, which identify the pull request within that repository.
    """
    if pull_request is not None and pull_request.id is not None:
        result = await db.execute(
            select(PullRequest).where(PullRequest.github_id == pull_request.id).limit(1)
        )
        row = result.scalar_one_or_none()
        if row is not None:
            return row

    if repository is None or issue is None:
        return None
    if repository.id is None or issue.number is None:
        return None

    repo = await find_repository(db, repository.id)
    if repo is None:
        return None

    result = await db.execute(
        select(PullRequest)
        .where(
            PullRequest.repository_id == repo.id,
            PullRequest.number == issue.number,
        )
        .limit(1)
    )
    return result.scalar_one_or_none()
