from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from photofeed.db.base import Base, utcnow

class Save(Base):
    __tablename__ = "saves"

    # Composite key: at most one save per (user, post)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    post = relationship("Post", back_populates="saves")

    __table_args__ = (
        Index('ix_saves_created_at', 'created_at'),
    )
