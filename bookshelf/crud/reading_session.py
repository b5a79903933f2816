import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import delete, func, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshelf.core.exceptions import (
    SessionConflictError,
    SessionNotFoundError,
    SessionValidationError,
)
from bookshelf.crud.base import CRUDBase
from bookshelf.models.reading_session import (
    MAX_SESSION_MINUTES,
    MIN_SESSION_MINUTES,
    ReadingSession,
)
from bookshelf.schemas.reading_session import ReadingSessionLog

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


def _check_stored_values(day: date, minutes: int) -> None:
    if not isinstance(day, date):
        raise SessionValidationError("date", "Date must be a calendar day")
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise SessionValidationError("minutes", "Minutes must be an integer")
    if minutes < MIN_SESSION_MINUTES:
        raise SessionValidationError("minutes", "Minutes must be at least 1")
    if minutes > MAX_SESSION_MINUTES:
        raise SessionValidationError(
            "minutes", "Minutes cannot exceed 24 hours (1440 minutes)"
        )


class CRUDReadingSession(CRUDBase[ReadingSession, ReadingSessionLog, ReadingSessionLog]):
    """Per-user store of daily reading minutes, one row per calendar day."""

    def find_session(
        self, db: Session, *, user_id: int, date: date
    ) -> Optional[ReadingSession]:
        return (
            db.query(ReadingSession)
            .filter(ReadingSession.user_id == user_id, ReadingSession.date == date)
            .populate_existing()
            .first()
        )

    def list_sessions(self, db: Session, *, user_id: int) -> List[ReadingSession]:
        return (
            db.query(ReadingSession)
            .filter(ReadingSession.user_id == user_id)
            .order_by(ReadingSession.date.desc())
            .all()
        )

    def create_session(
        self, db: Session, *, user_id: int, date: date, minutes: int
    ) -> ReadingSession:
        _check_stored_values(date, minutes)

        db_obj = ReadingSession(user_id=user_id, date=date, minutes=minutes)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update_session_minutes(
        self, db: Session, *, session_id: int, minutes: int
    ) -> ReadingSession:
        db_obj = self._get_or_raise(db, session_id)
        _check_stored_values(db_obj.date, minutes)

        db_obj.minutes = minutes
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def increment_session_minutes(
        self, db: Session, *, session_id: int, delta: int
    ) -> ReadingSession:
        """Add ``delta`` in SQL so concurrent increments are not lost."""
        db_obj = self._get_or_raise(db, session_id)
        _check_stored_values(db_obj.date, db_obj.minutes + delta)

        db.execute(
            update(ReadingSession)
            .where(ReadingSession.id == session_id)
            .values(minutes=ReadingSession.minutes + delta, updated_at=func.now())
        )
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete_session(self, db: Session, *, session_id: int) -> None:
        result = db.execute(delete(ReadingSession).where(ReadingSession.id == session_id))
        db.commit()
        if result.rowcount == 0:
            raise SessionNotFoundError(f"Reading session {session_id} no longer exists")

    def delete_by_date(self, db: Session, *, user_id: int, date: date) -> bool:
        result = db.execute(
            delete(ReadingSession).where(
                ReadingSession.user_id == user_id, ReadingSession.date == date
            )
        )
        db.commit()
        return result.rowcount > 0

    def upsert_minutes(
        self,
        db: Session,
        *,
        user_id: int,
        date: date,
        minutes: int,
        additive: bool,
    ) -> ReadingSession:
        """Insert the day or update it in one statement.

        With ``additive`` the stored minutes are incremented, otherwise they
        are replaced. The unique (user_id, date) constraint is the conflict
        target, so two writers for the same day can never both insert.
        """
        _check_stored_values(date, minutes)

        insert_fn = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
        if insert_fn is None:
            return self._upsert_fallback(
                db, user_id=user_id, date=date, minutes=minutes, additive=additive
            )

        stmt = insert_fn(ReadingSession).values(
            user_id=user_id, date=date, minutes=minutes
        )
        new_minutes = (
            ReadingSession.minutes + stmt.excluded.minutes
            if additive
            else stmt.excluded.minutes
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ReadingSession.user_id, ReadingSession.date],
            set_={"minutes": new_minutes, "updated_at": func.now()},
        )

        try:
            db.execute(stmt)
            db.commit()
        except IntegrityError as e:
            # Only the minutes check constraint can fail here
            db.rollback()
            logger.error(f"Upsert rejected for user {user_id} on {date}: {e.orig}")
            raise SessionConflictError(
                f"Reading session for {date.isoformat()} changed concurrently"
            ) from e

        return self.find_session(db, user_id=user_id, date=date)

    def _upsert_fallback(
        self,
        db: Session,
        *,
        user_id: int,
        date: date,
        minutes: int,
        additive: bool,
    ) -> ReadingSession:
        existing = self.find_session(db, user_id=user_id, date=date)
        if existing is None:
            try:
                return self.create_session(
                    db, user_id=user_id, date=date, minutes=minutes
                )
            except IntegrityError:
                db.rollback()
                logger.warning(
                    f"Concurrent insert for user {user_id} on {date}, retrying as update"
                )
                existing = self.find_session(db, user_id=user_id, date=date)
                if existing is None:
                    raise SessionConflictError(
                        f"Could not store reading session for {date.isoformat()}"
                    )

        if additive:
            return self.increment_session_minutes(
                db, session_id=existing.id, delta=minutes
            )
        return self.update_session_minutes(db, session_id=existing.id, minutes=minutes)

    def _get_or_raise(self, db: Session, session_id: int) -> ReadingSession:
        db_obj = db.get(ReadingSession, session_id)
        if db_obj is None:
            raise SessionNotFoundError(f"Reading session {session_id} no longer exists")
        return db_obj


crud_reading_session = CRUDReadingSession(ReadingSession)
