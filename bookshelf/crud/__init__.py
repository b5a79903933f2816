from .book import crud_book
from .reading_session import crud_reading_session
from .user import crud_user
from .user_settings import crud_user_settings

__all__ = [
    "crud_user",
    "crud_book",
    "crud_reading_session",
    "crud_user_settings",
]
