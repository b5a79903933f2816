from .book import Book, BookStatus
from .reading_session import ReadingSession
from .user import User
from .user_settings import UserSettings

__all__ = [
    "User",
    "Book",
    "BookStatus",
    "ReadingSession",
    "UserSettings",
]
