from sqlalchemy import Column, String, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from photofeed.db.base import Base, utcnow

class Follow(Base):
    __tablename__ = "follows"

    # Composite key: one edge per ordered (follower, following) pair.
    # Self-follow is allowed.
    follower_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    following_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    follower = relationship(
        "User",
        foreign_keys=[follower_id],
        back_populates="following"
    )
    following = relationship(
        "User",
        foreign_keys=[following_id],
        back_populates="followers"
    )

    __table_args__ = (
        Index('ix_follows_following_id', 'following_id'),
        Index('ix_follows_created_at', 'created_at'),
    )
