from sqlalchemy import Column, String, DateTime, JSON, Index
from photofeed.db.base import Base

class Session(Base):
    __tablename__ = "sessions"

    sid = Column(String, primary_key=True)
    sess = Column(JSON, nullable=False)
    expire = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index('IDX_session_expire', 'expire'),
    )
