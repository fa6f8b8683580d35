import asyncio
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from review_sync.database import Base
from review_sync.models import PullRequest, Repository, User

from factories import JWT_SECRET, PR_GITHUB_ID, PR_NUMBER, REPO_GITHUB_ID, WEBHOOK_SECRET


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'review_sync.db'}", poolclass=NullPool
    )
    TestingSessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def init_db():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    asyncio.run(init_db())

    yield TestingSessionLocal
    asyncio.run(engine.dispose())


@pytest.fixture
def repository(session_factory):
    """An operator user owning the mirrored ``octo/widgets`` repository."""

    async def seed():
        async with session_factory() as session:
            user = User(email="reviewer@example.com", name="Reviewer")
            session.add(user)
            await session.flush()
            repo = Repository(
                github_id=REPO_GITHUB_ID,
                owner="octo",
                name="widgets",
                full_name="octo/widgets",
                default_branch="main",
                user_id=user.id,
            )
            session.add(repo)
            await session.commit()
            return SimpleNamespace(user_id=user.id, repository_id=repo.id)

    return asyncio.run(seed())


@pytest.fixture
def pull_request(session_factory, repository):
    """Pull request #7 of ``octo/widgets``, already mirrored locally."""

    async def seed():
        async with session_factory() as session:
            pr = PullRequest(
                github_id=PR_GITHUB_ID,
                number=PR_NUMBER,
                title="Add widget",
                state="open",
                author="octocat",
                base_branch="main",
                head_branch="feature/widget",
                created_at=datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc),
                updated_at=datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc),
                repository_id=repository.repository_id,
            )
            session.add(pr)
            await session.commit()
            return SimpleNamespace(
                user_id=repository.user_id,
                repository_id=repository.repository_id,
                pull_request_id=pr.id,
            )

    return asyncio.run(seed())


@pytest.fixture
def client(session_factory, monkeypatch):
    from fastapi.testclient import TestClient

    from review_sync.config import settings
    from review_sync.database import get_db
    from review_sync.main import app

    monkeypatch.setattr(settings, "GITHUB_WEBHOOK_SECRET", WEBHOOK_SECRET)
    monkeypatch.setattr(settings, "JWT_SECRET_KEY", JWT_SECRET)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
