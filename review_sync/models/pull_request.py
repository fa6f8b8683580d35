from sqlalchemy import Column, Integer, BigInteger, String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from review_sync.database import Base


class PullRequest(Base):
    """Local projection of a GitHub pull request.

    ``github_id`` is the upsert key; ``repository_id`` is fixed at insert time
    and never rewritten by an update.
    """

    __tablename__ = "pull_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    github_id = Column(BigInteger, unique=True, nullable=False)
    number = Column(Integer, nullable=False)
    title = Column(String(500), nullable=False)
    body = Column(Text)
    state = Column(String(50), nullable=False)
    author = Column(String(255), nullable=False)
    author_avatar = Column(Text)
    base_branch = Column(String(255), nullable=False)
    head_branch = Column(String(255), nullable=False)
    head_sha = Column(String(255))
    mergeable = Column(Boolean)
    merged = Column(Boolean, default=False, nullable=False)
    draft = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    closed_at = Column(DateTime(timezone=True))
    merged_at = Column(DateTime(timezone=True))

    repository_id = Column(Integer, ForeignKey("repositories.id", ondelete="CASCADE"), nullable=False)

    repository = relationship("Repository", back_populates="pull_requests")
    reviews = relationship("Review", back_populates="pull_request", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="pull_request", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_pull_requests_repository_number", "repository_id", "number"),
    )

    def __repr__(self):
        return f"<PullRequest id={self.id} github_id={self.github_id} number={self.number} state={self.state}>"
