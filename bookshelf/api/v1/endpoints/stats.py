from datetime import date
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookshelf.core.auth import get_current_user
from bookshelf.core.database import get_db
from bookshelf.crud.book import crud_book
from bookshelf.crud.reading_session import crud_reading_session
from bookshelf.crud.user_settings import crud_user_settings
from bookshelf.models.user import User
from bookshelf.schemas.response import Messages, SuccessResponse
from bookshelf.schemas.stats import DashboardResponseData
from bookshelf.services.aggregator import summarize_sessions
from bookshelf.services.book_stats import build_dashboard

router = APIRouter()


@router.get("/dashboard", response_model=SuccessResponse[DashboardResponseData])
def read_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Book counts, yearly goal progress, genre and monthly charts, and the
    reading time summary for the current user.
    """
    today = date.today()
    books = crud_book.get_by_user(db, user_id=current_user.id)
    user_settings = crud_user_settings.get_or_create(db, user_id=current_user.id)
    sessions = crud_reading_session.list_sessions(db, user_id=current_user.id)

    dashboard = build_dashboard(books, user_settings.yearly_goal, today=today)
    return SuccessResponse(
        message=Messages.DASHBOARD_RETRIEVED,
        data=DashboardResponseData(
            **dashboard.model_dump(),
            reading=summarize_sessions(sessions, today=today),
        ),
    )
