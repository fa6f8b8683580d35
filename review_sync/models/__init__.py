from . import user, repository, pull_request, review, comment, pr_event
from .user import User
from .repository import Repository
from .pull_request import PullRequest
from .review import Review, ReviewState
from .comment import Comment, CommentSide
from .pr_event import PrEvent, EventStatus

__all__ = [
    "user",
    "repository",
    "pull_request",
    "review",
    "comment",
    "pr_event",
    "User",
    "Repository",
    "PullRequest",
    "Review",
    "ReviewState",
    "Comment",
    "CommentSide",
    "PrEvent",
    "EventStatus",
]
