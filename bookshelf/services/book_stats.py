"""Dashboard figures computed from a user's books."""
from collections import Counter
from datetime import date
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from bookshelf.models.book import BookStatus
from bookshelf.schemas.stats import (
    CompletionStreak,
    DashboardStats,
    GenreCount,
    GoalProgress,
    MonthlyActivity,
)
from bookshelf.services.aggregator import coerce_date

# Completion streak windows, in days
STREAK_RECENT_DAYS = 7
STREAK_MAX_GAP_DAYS = 14

MONTHS = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]


def _field(book: Any, name: str) -> Any:
    if isinstance(book, dict):
        return book.get(name)
    return getattr(book, name, None)


def _status(book: Any) -> Optional[BookStatus]:
    try:
        return BookStatus(_field(book, "status"))
    except ValueError:
        return None


def books_completed_in_year(books: Iterable[Any], year: int) -> int:
    count = 0
    for book in books:
        finished = coerce_date(_field(book, "finish_date"))
        if _status(book) is BookStatus.COMPLETED and finished and finished.year == year:
            count += 1
    return count


def books_in_progress(books: Iterable[Any]) -> int:
    return sum(1 for book in books if _status(book) is BookStatus.IN_PROGRESS)


def goal_progress(completed: int, yearly_goal: int) -> GoalProgress:
    percentage = (completed / yearly_goal) * 100 if yearly_goal > 0 else 0.0
    return GoalProgress(
        yearly_goal=yearly_goal,
        completed=completed,
        percentage=percentage,
        rounded_percentage=int(percentage + 0.5),
        achieved=percentage >= 100,
    )


def genre_distribution(books: Iterable[Any]) -> List[GenreCount]:
    counts = Counter(_field(book, "genre") or "Unspecified" for book in books)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [GenreCount(name=genre, value=count) for genre, count in ordered]


def monthly_activity(books: Iterable[Any], year: int) -> List[MonthlyActivity]:
    monthly = [MonthlyActivity(month=month) for month in MONTHS]

    for book in books:
        finished = coerce_date(_field(book, "finish_date"))
        if finished and finished.year == year:
            monthly[finished.month - 1].completed += 1

        started = coerce_date(_field(book, "start_date"))
        if started and started.year == year:
            monthly[started.month - 1].started += 1

    return monthly


def reading_pace(completed_this_year: int, today: date) -> float:
    """Books completed per elapsed month of the current year."""
    return round(completed_this_year / today.month, 1)


def rating_summary(books: Iterable[Any]) -> Tuple[Optional[float], int]:
    """Average rating over rated books and how many books carry a rating.

    A rating of 0 counts as unrated.
    """
    ratings = []
    for book in books:
        rating = _field(book, "rating")
        if isinstance(rating, (int, float)) and not isinstance(rating, bool) and rating:
            ratings.append(float(rating))

    if not ratings:
        return None, 0
    return round(sum(ratings) / len(ratings), 1), len(ratings)


def completion_streak(books: Iterable[Any], today: date) -> CompletionStreak:
    """Streaks of finished books.

    Consecutive finishes belong to one streak while they are at most
    ``STREAK_MAX_GAP_DAYS`` apart. The current streak only counts when the
    latest finish is within ``STREAK_RECENT_DAYS`` of ``today``.
    """
    finished = []
    for book in books:
        day = coerce_date(_field(book, "finish_date"))
        if _status(book) is BookStatus.COMPLETED and day:
            finished.append(day)
    finished.sort(reverse=True)
    if not finished:
        return CompletionStreak()

    runs = [1]
    for newer, older in zip(finished, finished[1:]):
        if (newer - older).days <= STREAK_MAX_GAP_DAYS:
            runs[-1] += 1
        else:
            runs.append(1)

    current = runs[0] if (today - finished[0]).days <= STREAK_RECENT_DAYS else 0
    return CompletionStreak(current=current, longest=max(runs))


def build_dashboard(
    books: Sequence[Any], yearly_goal: int, today: Optional[date] = None
) -> DashboardStats:
    today = today or date.today()
    books = list(books)
    completed = books_completed_in_year(books, today.year)
    average_rating, rated_books = rating_summary(books)

    return DashboardStats(
        year=today.year,
        total_books=len(books),
        books_in_progress=books_in_progress(books),
        books_completed_this_year=completed,
        goal=goal_progress(completed, yearly_goal),
        genres=genre_distribution(books),
        monthly=monthly_activity(books, today.year),
        reading_pace=reading_pace(completed, today),
        average_rating=average_rating,
        rated_books=rated_books,
        completion_streak=completion_streak(books, today),
    )
