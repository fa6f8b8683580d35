"""Typed views over GitHub webhook payloads.

Each supported event kind gets its own model.  Scalar fields run through the
normalizers before validation and nested values that are not JSON objects are
treated as missing, so parsing a dict payload never fails.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict

from review_sync.models.comment import CommentSide
from review_sync.models.review import ReviewState
from review_sync.services.normalize import (
    normalize_comment_side,
    normalize_review_state,
    to_datetime,
    to_flag,
    to_mapping,
    to_number,
    to_text,
)

Number = Annotated[int | None, BeforeValidator(to_number)]
Timestamp = Annotated[datetime | None, BeforeValidator(to_datetime)]
Text = Annotated[str | None, BeforeValidator(to_text)]
Flag = Annotated[bool | None, BeforeValidator(to_flag)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class GitHubUser(_Payload):
    login: Text = None
    avatar_url: Text = None


class BranchRef(_Payload):
    ref: Text = None
    sha: Text = None


class RepositoryPayload(_Payload):
    id: Number = None
    full_name: Text = None
    name: Text = None


class PullRequestPayload(_Payload):
    id: Number = None
    number: Number = None
    title: Text = None
    body: Text = None
    state: Text = None
    user: Annotated[GitHubUser | None, BeforeValidator(to_mapping)] = None
    base: Annotated[BranchRef | None, BeforeValidator(to_mapping)] = None
    head: Annotated[BranchRef | None, BeforeValidator(to_mapping)] = None
    mergeable: Flag = None
    merged: Flag = None
    merged_by: Any = None
    draft: Flag = None
    created_at: Timestamp = None
    updated_at: Timestamp = None
    closed_at: Timestamp = None
    merged_at: Timestamp = None

    @property
    def is_merged(self) -> bool:
        return bool(self.merged_at or self.merged or self.merged_by)


class ReviewPayload(_Payload):
    id: Number = None
    state: Annotated[ReviewState, BeforeValidator(normalize_review_state)] = ReviewState.COMMENT
    body: Text = None
    user: Annotated[GitHubUser | None, BeforeValidator(to_mapping)] = None
    submitted_at: Timestamp = None


class CommentPayload(_Payload):
    id: Number = None
    body: Text = None
    position: Number = None
    original_position: Number = None
    line: Number = None
    side: Annotated[CommentSide | None, BeforeValidator(normalize_comment_side)] = None
    path: Text = None
    commit_id: Text = None
    original_commit_id: Text = None
    user: Annotated[GitHubUser | None, BeforeValidator(to_mapping)] = None
    created_at: Timestamp = None
    updated_at: Timestamp = None

    @property
    def anchor_line(self) -> int | None:
        for candidate in (self.position, self.original_position, self.line):
            if candidate is not None:
                return candidate
        return None

    @property
    def resolved_commit_id(self) -> str | None:
        return self.commit_id or self.original_commit_id


class IssuePayload(_Payload):
    number: Number = None
    # present only when the issue is actually a pull request
    pull_request: Any = None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None


Repo = Annotated[RepositoryPayload | None, BeforeValidator(to_mapping)]
PullRequestField = Annotated[PullRequestPayload | None, BeforeValidator(to_mapping)]


class _Event(_Payload):
    action: Text = None
    repository: Repo = None


class PullRequestEvent(_Event):
    kind: Literal["pull_request"] = "pull_request"
    pull_request: PullRequestField = None


class PullRequestReviewEvent(_Event):
    kind: Literal["pull_request_review"] = "pull_request_review"
    pull_request: PullRequestField = None
    review: Annotated[ReviewPayload | None, BeforeValidator(to_mapping)] = None


class PullRequestReviewCommentEvent(_Event):
    kind: Literal["pull_request_review_comment"] = "pull_request_review_comment"
    pull_request: PullRequestField = None
    comment: Annotated[CommentPayload | None, BeforeValidator(to_mapping)] = None


class IssueCommentEvent(_Event):
    kind: Literal["issue_comment"] = "issue_comment"
    issue: Annotated[IssuePayload | None, BeforeValidator(to_mapping)] = None
    comment: Annotated[CommentPayload | None, BeforeValidator(to_mapping)] = None


class UnsupportedEvent(_Event):
    kind: str


GitHubEvent = Union[
    PullRequestEvent,
    PullRequestReviewEvent,
    PullRequestReviewCommentEvent,
    IssueCommentEvent,
    UnsupportedEvent,
]

EVENT_MODELS: dict[str, type[_Event]] = {
    "pull_request": PullRequestEvent,
    "pull_request_review": PullRequestReviewEvent,
    "pull_request_review_comment": PullRequestReviewCommentEvent,
    "issue_comment": IssueCommentEvent,
}


def parse_event(event_name: str, action: str | None, payload: Mapping[str, Any]) -> GitHubEvent:
    """Build the typed event for *event_name*.

    *action* comes from the caller rather than the body so that replays use
    exactly what was recorded.
    """
    data = dict(payload)
    data["action"] = action
    data["kind"] = event_name
    model = EVENT_MODELS.get(event_name, UnsupportedEvent)
    return model.model_validate(data)
