from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bookshelf.core.database import Base

MIN_SESSION_MINUTES = 1
MAX_SESSION_MINUTES = 1440  # 24 hours


class ReadingSession(Base):
    """Minutes read by one user on one calendar day."""

    __tablename__ = "reading_sessions"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_reading_session_user_date"),
        CheckConstraint(
            f"minutes >= {MIN_SESSION_MINUTES} AND minutes <= {MAX_SESSION_MINUTES}",
            name="ck_reading_session_minutes",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date = Column(Date, nullable=False, index=True)
    minutes = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="reading_sessions")

    def __repr__(self):
        return f"<ReadingSession(id={self.id}, user_id={self.user_id}, date={self.date}, minutes={self.minutes})>"
