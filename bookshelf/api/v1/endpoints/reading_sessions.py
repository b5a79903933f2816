import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from bookshelf.core.auth import get_current_user
from bookshelf.core.config import settings
from bookshelf.core.database import get_db
from bookshelf.crud.reading_session import crud_reading_session
from bookshelf.models.user import User
from bookshelf.schemas.reading_session import (
    ReadingHeatmap,
    ReadingSessionLog,
    ReadingSessionLogResult,
    ReadingSessionResponse,
    ReadingSummary,
)
from bookshelf.schemas.response import (
    DeleteResponse,
    ListResponse,
    Messages,
    SuccessResponse,
)
from bookshelf.services.aggregator import build_heatmap, summarize_sessions
from bookshelf.services.ledger import LogOutcome, log_reading_time, remove_reading_day

logger = logging.getLogger(__name__)

router = APIRouter()

_OUTCOME_MESSAGES = {
    LogOutcome.CREATED: Messages.READING_SESSION_CREATED,
    LogOutcome.MERGED: Messages.READING_SESSION_UPDATED,
    LogOutcome.REPLACED: Messages.READING_SESSION_UPDATED,
    LogOutcome.DELETED: Messages.READING_SESSION_DELETED,
    LogOutcome.NOOP: Messages.READING_SESSION_UNCHANGED,
}


@router.get("/", response_model=ListResponse[ReadingSessionResponse])
def read_reading_sessions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Retrieve every day the current user has logged, newest first.
    """
    sessions = crud_reading_session.list_sessions(db, user_id=current_user.id)
    return ListResponse(
        message=Messages.READING_SESSIONS_RETRIEVED,
        data=[ReadingSessionResponse.model_validate(s) for s in sessions],
        meta={"total": len(sessions)},
    )


@router.post("/", response_model=SuccessResponse[ReadingSessionLogResult])
def log_reading_session(
    *,
    db: Session = Depends(get_db),
    session_in: ReadingSessionLog,
    response: Response,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Log reading minutes for a day using the deployment's merge policy.

    Returns 201 when a new day was created and 200 for every other outcome.
    """
    result = log_reading_time(
        db,
        user_id=current_user.id,
        date=session_in.date,
        minutes=session_in.minutes,
    )
    if result.outcome is LogOutcome.CREATED:
        response.status_code = status.HTTP_201_CREATED

    session = (
        ReadingSessionResponse.model_validate(result.session)
        if result.session is not None
        else None
    )
    return SuccessResponse(
        message=_OUTCOME_MESSAGES[result.outcome],
        data=ReadingSessionLogResult(
            outcome=result.outcome.value,
            policy=result.policy.value,
            session=session,
        ),
    )


@router.get("/stats", response_model=SuccessResponse[ReadingSummary])
def read_reading_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Totals, daily average and streaks over all logged days.
    """
    sessions = crud_reading_session.list_sessions(db, user_id=current_user.id)
    return SuccessResponse(
        message=Messages.READING_STATS_RETRIEVED,
        data=summarize_sessions(sessions, today=date.today()),
    )


@router.get("/heatmap", response_model=SuccessResponse[ReadingHeatmap])
def read_reading_heatmap(
    db: Session = Depends(get_db),
    days: int = Query(
        default=settings.HEATMAP_DAYS,
        ge=1,
        le=settings.MAX_HEATMAP_DAYS,
        description="Number of days ending today",
    ),
    current_user: User = Depends(get_current_user),
) -> Any:
    sessions = crud_reading_session.list_sessions(db, user_id=current_user.id)
    return SuccessResponse(
        message=Messages.HEATMAP_RETRIEVED,
        data=build_heatmap(sessions, today=date.today(), days=days),
    )


@router.delete("/{session_date}", response_model=DeleteResponse)
def delete_reading_session(
    *,
    db: Session = Depends(get_db),
    session_date: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Remove the minutes logged for a day. Deleting a day with nothing
    logged succeeds without changing anything.
    """
    removed = remove_reading_day(db, user_id=current_user.id, date=session_date)
    message = (
        Messages.READING_SESSION_DELETED
        if removed
        else Messages.READING_SESSION_NOT_FOUND
    )
    return DeleteResponse(message=message, meta={"removed": removed})
