from typing import List

from pydantic import BaseModel, Field

from bookshelf.schemas.book import BookCreate
from bookshelf.schemas.reading_session import ReadingSessionLog


class MigrationData(BaseModel):
    """Locally stored books and sessions uploaded after signing in."""

    books: List[BookCreate] = Field(default_factory=list)
    reading_sessions: List[ReadingSessionLog] = Field(default_factory=list)


class MigrationResult(BaseModel):
    books_created: int = 0
    sessions_created: int = 0
    errors: List[str] = Field(default_factory=list)
