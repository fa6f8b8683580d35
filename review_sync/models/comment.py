from sqlalchemy import Column, Integer, BigInteger, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum

from review_sync.database import Base, utcnow


class CommentSide(str, PyEnum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class Comment(Base):
    """Review or issue comment attached to a mirrored pull request."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    github_id = Column(BigInteger, unique=True, nullable=True)
    body = Column(Text, nullable=False)
    line = Column(Integer)
    side = Column(String(10))
    path = Column(String(500))
    commit_id = Column(String(255))
    author = Column(String(255), nullable=False)
    author_avatar = Column(Text)
    synced_to_github = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    pull_request_id = Column(Integer, ForeignKey("pull_requests.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    pull_request = relationship("PullRequest", back_populates="comments")
