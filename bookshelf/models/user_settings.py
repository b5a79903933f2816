from sqlalchemy import JSON, CheckConstraint, Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bookshelf.core.database import Base

DEFAULT_PREFERENCES = {"notifications": True}


class UserSettings(Base):
    __tablename__ = "user_settings"
    __table_args__ = (
        CheckConstraint(
            "yearly_goal >= 1 AND yearly_goal <= 1000", name="ck_user_settings_goal"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    yearly_goal = Column(Integer, nullable=False, default=24)
    preferences = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_PREFERENCES))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="settings")

    def __repr__(self):
        return f"<UserSettings(id={self.id}, user_id={self.user_id}, yearly_goal={self.yearly_goal})>"
