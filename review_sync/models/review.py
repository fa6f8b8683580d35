from sqlalchemy import Column, Integer, BigInteger, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum

from review_sync.database import Base, utcnow


class ReviewState(str, PyEnum):
    """Canonical review verdicts stored locally."""

    APPROVE = "APPROVE"
    REQUEST_CHANGES = "REQUEST_CHANGES"
    COMMENT = "COMMENT"


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # null until a locally drafted review has been pushed to GitHub
    github_id = Column(BigInteger, unique=True, nullable=True)
    state = Column(String(50), nullable=False)
    body = Column(Text)
    author = Column(String(255), nullable=False)
    author_avatar = Column(Text)
    synced_to_github = Column(Boolean, default=False, nullable=False)
    submitted_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    pull_request_id = Column(Integer, ForeignKey("pull_requests.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    pull_request = relationship("PullRequest", back_populates="reviews")
