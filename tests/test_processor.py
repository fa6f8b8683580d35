from datetime import datetime

import pytest

from review_sync.models import Comment, EventStatus, PullRequest, Review
from review_sync.schemas.github import parse_event
from review_sync.services.errors import EntityNotSyncedError, MalformedPayloadError
from review_sync.services.processor import process_event

from factories import (
    PR_GITHUB_ID,
    fetch_all,
    issue_comment_event,
    pull_request_event,
    review_comment_event,
    review_event,
    run_in_session,
)


def process(factory, event_name, payload):
    async def apply(session):
        event = parse_event(event_name, payload.get("action"), payload)
        status = await process_event(session, event)
        await session.commit()
        return status
    return run_in_session(factory, apply)


# pull_request

def test_pull_request_opened_inserts_mirror_row(session_factory, repository):
    status = process(session_factory, "pull_request", pull_request_event())

    assert status == EventStatus.processed
    [pr] = fetch_all(session_factory, PullRequest)
    assert pr.github_id == PR_GITHUB_ID
    assert pr.number == 7
    assert pr.title == "Add widget"
    assert pr.author == "octocat"
    assert pr.author_avatar == "https://avatars.example.com/octocat"
    assert pr.base_branch == "main"
    assert pr.head_branch == "feature/widget"
    assert pr.head_sha == "abc123"
    assert pr.mergeable is True
    assert pr.merged is False
    assert pr.draft is False
    assert pr.created_at.replace(tzinfo=None) == datetime(2024, 5, 1, 10, 0)
    assert pr.updated_at.replace(tzinfo=None) == datetime(2024, 5, 2, 11, 30)
    assert pr.closed_at is None
    assert pr.repository_id == repository.repository_id


def test_pull_request_update_keeps_identity_and_linkage(session_factory, pull_request):
    payload = pull_request_event(
        action="closed",
        number=99,
        title="Add widget (final)",
        state="closed",
        base={"ref": "release"},
        merged_at="2024-05-04T08:00:00Z",
        closed_at="2024-05-04T08:00:00Z",
        created_at="2030-01-01T00:00:00Z",
    )

    status = process(session_factory, "pull_request", payload)

    assert status == EventStatus.processed
    [pr] = fetch_all(session_factory, PullRequest)
    assert pr.id == pull_request.pull_request_id
    assert pr.title == "Add widget (final)"
    assert pr.state == "closed"
    assert pr.merged is True
    assert pr.merged_at.replace(tzinfo=None) == datetime(2024, 5, 4, 8, 0)
    assert pr.closed_at.replace(tzinfo=None) == datetime(2024, 5, 4, 8, 0)
    # never rewritten by an update
    assert pr.number == 7
    assert pr.base_branch == "main"
    assert pr.created_at.replace(tzinfo=None) == datetime(2024, 5, 1, 10, 0)
    assert pr.repository_id == pull_request.repository_id


def test_pull_request_for_unknown_repository_fails(session_factory):
    with pytest.raises(EntityNotSyncedError, match="Repository 1001 not synced locally"):
        process(session_factory, "pull_request", pull_request_event())
    assert fetch_all(session_factory, PullRequest) == []


def test_pull_request_without_ids_is_malformed(session_factory, repository):
    with pytest.raises(MalformedPayloadError, match="Missing pull request GitHub ID"):
        process(session_factory, "pull_request", pull_request_event(id=None))

    payload = pull_request_event()
    del payload["repository"]
    with pytest.raises(MalformedPayloadError, match="Missing repository GitHub ID"):
        process(session_factory, "pull_request", payload)


def test_pull_request_event_without_pull_request_is_ignored(session_factory, repository):
    status = process(session_factory, "pull_request", {"action": "opened", "repository": {"id": 1001}})
    assert status == EventStatus.ignored


# pull_request_review

def test_review_submitted_upserts_review(session_factory, pull_request):
    status = process(session_factory, "pull_request_review", review_event())

    assert status == EventStatus.processed
    [review] = fetch_all(session_factory, Review)
    assert review.github_id == 3001
    assert review.state == "APPROVE"
    assert review.body == "Looks good to me"
    assert review.author == "hubot"
    assert review.synced_to_github is True
    assert review.submitted_at.replace(tzinfo=None) == datetime(2024, 5, 3, 9, 0)
    assert review.pull_request_id == pull_request.pull_request_id
    assert review.user_id is None


def test_review_edited_updates_existing_row(session_factory, pull_request):
    process(session_factory, "pull_request_review", review_event())
    status = process(
        session_factory,
        "pull_request_review",
        review_event(action="edited", state="CHANGES_REQUESTED"),
    )

    assert status == EventStatus.processed
    [review] = fetch_all(session_factory, Review)
    assert review.state == "REQUEST_CHANGES"


def test_review_for_unknown_pull_request_fails(session_factory, repository):
    with pytest.raises(EntityNotSyncedError, match="Pull request not synced locally for review event"):
        process(session_factory, "pull_request_review", review_event())


def test_review_dismissed_deletes_review(session_factory, pull_request):
    process(session_factory, "pull_request_review", review_event())

    status = process(session_factory, "pull_request_review", review_event(action="dismissed"))

    assert status == EventStatus.processed
    assert fetch_all(session_factory, Review) == []


def test_review_dismissed_without_review_id_is_ignored(session_factory, pull_request):
    status = process(session_factory, "pull_request_review", review_event(action="dismissed", review_id=None))
    assert status == EventStatus.ignored


def test_other_review_actions_are_ignored(session_factory, pull_request):
    status = process(session_factory, "pull_request_review", review_event(action="requested"))
    assert status == EventStatus.ignored
    assert fetch_all(session_factory, Review) == []


# pull_request_review_comment

def test_review_comment_created_upserts_comment(session_factory, pull_request):
    status = process(session_factory, "pull_request_review_comment", review_comment_event())

    assert status == EventStatus.processed
    [comment] = fetch_all(session_factory, Comment)
    assert comment.github_id == 4001
    assert comment.body == "Nit: rename this"
    assert comment.line == 12
    assert comment.side == "RIGHT"
    assert comment.path == "src/widget.py"
    assert comment.commit_id == "abc123"
    assert comment.author == "hubot"
    assert comment.synced_to_github is True
    assert comment.pull_request_id == pull_request.pull_request_id


def test_review_comment_edited_updates_body_only_once(session_factory, pull_request):
    process(session_factory, "pull_request_review_comment", review_comment_event())
    process(
        session_factory,
        "pull_request_review_comment",
        review_comment_event(action="edited", body="Nit: rename this, please", side="sideways"),
    )

    [comment] = fetch_all(session_factory, Comment)
    assert comment.body == "Nit: rename this, please"
    assert comment.side is None


def test_review_comment_deleted(session_factory, pull_request):
    process(session_factory, "pull_request_review_comment", review_comment_event())

    first = process(session_factory, "pull_request_review_comment", review_comment_event(action="deleted"))
    second = process(session_factory, "pull_request_review_comment", review_comment_event(action="deleted"))

    assert first == EventStatus.processed
    assert second == EventStatus.ignored
    assert fetch_all(session_factory, Comment) == []


def test_review_comment_for_unknown_pull_request_fails(session_factory, repository):
    with pytest.raises(EntityNotSyncedError, match="comment event"):
        process(session_factory, "pull_request_review_comment", review_comment_event())


# issue_comment

def test_issue_comment_on_pull_request_resolves_by_number(session_factory, pull_request):
    status = process(session_factory, "issue_comment", issue_comment_event())

    assert status == EventStatus.processed
    [comment] = fetch_all(session_factory, Comment)
    assert comment.pull_request_id == pull_request.pull_request_id
    assert comment.line is None
    assert comment.path is None


def test_issue_comment_on_plain_issue_is_ignored(session_factory, pull_request):
    status = process(session_factory, "issue_comment", issue_comment_event(on_pull_request=False))

    assert status == EventStatus.ignored
    assert fetch_all(session_factory, Comment) == []


def test_issue_comment_deleted(session_factory, pull_request):
    process(session_factory, "issue_comment", issue_comment_event())

    status = process(session_factory, "issue_comment", issue_comment_event(action="deleted"))

    assert status == EventStatus.processed
    assert fetch_all(session_factory, Comment) == []


# everything else

@pytest.mark.parametrize("event_name", ["push", "issues", "check_run"])
def test_unsupported_events_are_ignored(session_factory, pull_request, event_name):
    status = process(session_factory, event_name, {"action": "created", "repository": {"id": 1001}})
    assert status == EventStatus.ignored
