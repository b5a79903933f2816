import enum

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bookshelf.core.database import Base


class BookStatus(str, enum.Enum):
    TO_READ = "To Read"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    DID_NOT_FINISH = "Did Not Finish"


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    title = Column(String(500), nullable=False, index=True)
    author = Column(String(200), nullable=False)
    genre = Column(String, nullable=False)
    status = Column(
        Enum(
            BookStatus,
            name="book_status",
            native_enum=False,
            length=32,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=BookStatus.TO_READ,
    )

    start_date = Column(Date, nullable=True)
    finish_date = Column(Date, nullable=True)
    rating = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    cover_url = Column(String, nullable=True)
    quotes = Column(JSON, nullable=False, default=list)

    date_added = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="books")

    def __repr__(self):
        return f"<Book(id={self.id}, title='{self.title}', status='{self.status}')>"
