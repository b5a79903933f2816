from typing import List, Optional

from pydantic import BaseModel, Field

from bookshelf.schemas.reading_session import ReadingSummary


class GenreCount(BaseModel):
    name: str
    value: int


class MonthlyActivity(BaseModel):
    month: str
    completed: int = 0
    started: int = 0


class GoalProgress(BaseModel):
    yearly_goal: int
    completed: int
    percentage: float
    rounded_percentage: int
    achieved: bool


class CompletionStreak(BaseModel):
    current: int = 0
    longest: int = 0


class DashboardStats(BaseModel):
    year: int
    total_books: int
    books_in_progress: int
    books_completed_this_year: int
    goal: GoalProgress
    genres: List[GenreCount]
    monthly: List[MonthlyActivity]
    reading_pace: float
    average_rating: Optional[float] = None
    rated_books: int = 0
    completion_streak: CompletionStreak = Field(default_factory=CompletionStreak)


class DashboardResponseData(DashboardStats):
    reading: ReadingSummary
