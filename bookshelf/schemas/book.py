from datetime import date, datetime
from typing import List, Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from bookshelf.models.book import BookStatus

_http_url = TypeAdapter(AnyHttpUrl)


def _clean_cover_url(value: Optional[str]) -> Optional[str]:
    # Empty string means "no cover"
    if value is None or value == "":
        return None
    _http_url.validate_python(value)
    return value


class BookBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    author: str = Field(..., min_length=1, max_length=200)
    genre: str = Field(..., min_length=1)
    status: BookStatus = BookStatus.TO_READ
    start_date: Optional[date] = None
    finish_date: Optional[date] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    notes: Optional[str] = Field(None, max_length=5000)
    cover_url: Optional[str] = None
    quotes: List[str] = Field(default_factory=list)

    @field_validator("cover_url")
    @classmethod
    def validate_cover_url(cls, value: Optional[str]) -> Optional[str]:
        return _clean_cover_url(value)


class BookCreate(BookBase):
    date_added: Optional[datetime] = None


class BookUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    author: Optional[str] = Field(None, min_length=1, max_length=200)
    genre: Optional[str] = Field(None, min_length=1)
    status: Optional[BookStatus] = None
    start_date: Optional[date] = None
    finish_date: Optional[date] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    notes: Optional[str] = Field(None, max_length=5000)
    cover_url: Optional[str] = None
    quotes: Optional[List[str]] = None

    @field_validator("title", "author", "genre", "status", "quotes")
    @classmethod
    def reject_null(cls, value):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("cover_url")
    @classmethod
    def validate_cover_url(cls, value: Optional[str]) -> Optional[str]:
        return _clean_cover_url(value)


class BookResponse(BookBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date_added: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("quotes", mode="before")
    @classmethod
    def default_quotes(cls, value):
        return value or []
