import logging
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookshelf.core.auth import get_current_user
from bookshelf.core.database import get_db
from bookshelf.core.exceptions import LedgerError
from bookshelf.crud.book import crud_book
from bookshelf.models.user import User
from bookshelf.schemas.migration import MigrationData, MigrationResult
from bookshelf.schemas.response import SuccessResponse
from bookshelf.services.ledger import log_reading_time

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=SuccessResponse[MigrationResult])
def migrate_local_data(
    *,
    db: Session = Depends(get_db),
    data_in: MigrationData,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Import books and reading sessions kept on a device before sign-in.

    Items are imported one by one; a failing item is reported in ``errors``
    and does not stop the rest. Sessions follow the configured merge policy.
    """
    result = MigrationResult()

    for book_in in data_in.books:
        try:
            crud_book.create_for_user(db, obj_in=book_in, user_id=current_user.id)
            result.books_created += 1
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to migrate book '{book_in.title}': {e}")
            result.errors.append(f"Failed to migrate book \"{book_in.title}\": {e}")

    for session_in in data_in.reading_sessions:
        try:
            outcome = log_reading_time(
                db,
                user_id=current_user.id,
                date=session_in.date,
                minutes=session_in.minutes,
            )
        except LedgerError as e:
            logger.error(f"Failed to migrate reading session {session_in.date}: {e}")
            result.errors.append(
                f"Failed to migrate reading session for {session_in.date}: {e.message}"
            )
            continue
        if outcome.session is not None:
            result.sessions_created += 1

    logger.info(
        f"Migration for user {current_user.id}: {result.books_created} books, "
        f"{result.sessions_created} sessions, {len(result.errors)} errors"
    )
    return SuccessResponse(
        message=(
            f"Migration completed: {result.books_created} books and "
            f"{result.sessions_created} reading sessions imported"
        ),
        data=result,
    )
