"""
Reading session ledger: turns "log N minutes for day D" into a store mutation.

Two merge policies exist and exactly one is configured per deployment
(``READING_SESSION_MERGE_POLICY``):

* ``additive`` - repeated logs for a day accumulate. Zero is never valid.
* ``absolute`` - a log replaces the day's total; logging 0 removes the day,
  and logging 0 for a day with nothing recorded does nothing.
"""
import enum
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Union

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from bookshelf.core.config import settings
from bookshelf.core.exceptions import SessionValidationError, StoreUnavailableError
from bookshelf.crud.reading_session import crud_reading_session
from bookshelf.models.reading_session import MAX_SESSION_MINUTES, ReadingSession

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class MergePolicy(str, enum.Enum):
    ADDITIVE = "additive"
    ABSOLUTE = "absolute"


class LogOutcome(str, enum.Enum):
    CREATED = "created"
    MERGED = "merged"
    REPLACED = "replaced"
    DELETED = "deleted"
    NOOP = "noop"


@dataclass(frozen=True)
class LogResult:
    outcome: LogOutcome
    policy: MergePolicy
    session: Optional[ReadingSession] = None


def configured_policy() -> MergePolicy:
    return MergePolicy(settings.READING_SESSION_MERGE_POLICY)


def parse_session_date(
    value: Union[str, date],
    today: Optional[date] = None,
    future_message: str = "Cannot log reading time for a future day",
) -> date:
    """Parse a YYYY-MM-DD day and reject days after ``today``."""
    if isinstance(value, datetime):
        raise SessionValidationError("date", "Date must not include a time")
    if isinstance(value, date):
        day = value
    else:
        if not isinstance(value, str) or not _DATE_RE.match(value):
            raise SessionValidationError("date", "Date must be in YYYY-MM-DD format")
        try:
            day = date.fromisoformat(value)
        except ValueError:
            raise SessionValidationError("date", f"{value} is not a valid calendar day")

    if day > (today or date.today()):
        raise SessionValidationError("date", future_message)
    return day


def validate_log_request(
    day: Union[str, date],
    minutes: Any,
    policy: MergePolicy,
    today: Optional[date] = None,
) -> date:
    """Check a log request before anything touches the store.

    Returns the parsed day.
    """
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise SessionValidationError("minutes", "Minutes must be an integer")

    lowest = 1 if policy is MergePolicy.ADDITIVE else 0
    if minutes < lowest:
        raise SessionValidationError("minutes", f"Minutes must be at least {lowest}")
    if minutes > MAX_SESSION_MINUTES:
        raise SessionValidationError(
            "minutes", "Minutes cannot exceed 24 hours (1440 minutes)"
        )

    return parse_session_date(day, today)


def log_reading_time(
    db: Session,
    *,
    user_id: int,
    date: Union[str, date],
    minutes: Any,
    policy: Optional[MergePolicy] = None,
    today: Optional[date] = None,
) -> LogResult:
    """Apply one "log reading time" request for ``user_id``.

    Raises:
        SessionValidationError: malformed day or minutes, or an additive total
            above 24 hours.
        SessionConflictError: the day changed concurrently in a way the
            atomic upsert could not absorb.
        StoreUnavailableError: the database could not be reached.
    """
    policy = MergePolicy(policy) if policy else configured_policy()
    day = validate_log_request(date, minutes, policy, today)

    try:
        existing = crud_reading_session.find_session(db, user_id=user_id, date=day)

        if policy is MergePolicy.ADDITIVE:
            if existing is not None and existing.minutes + minutes > MAX_SESSION_MINUTES:
                raise SessionValidationError(
                    "minutes",
                    f"Total for {day.isoformat()} would exceed 24 hours "
                    f"({existing.minutes} already logged)",
                )
            session = crud_reading_session.upsert_minutes(
                db, user_id=user_id, date=day, minutes=minutes, additive=True
            )
            outcome = LogOutcome.CREATED if existing is None else LogOutcome.MERGED

        elif minutes == 0:
            if existing is None:
                logger.warning(
                    f"Ignoring 0-minute log for user {user_id} on {day}: nothing recorded"
                )
                return LogResult(outcome=LogOutcome.NOOP, policy=policy)
            removed = crud_reading_session.delete_by_date(db, user_id=user_id, date=day)
            if not removed:
                logger.warning(
                    f"Reading session for user {user_id} on {day} was already removed"
                )
            session = None
            outcome = LogOutcome.DELETED

        else:
            session = crud_reading_session.upsert_minutes(
                db, user_id=user_id, date=day, minutes=minutes, additive=False
            )
            outcome = LogOutcome.CREATED if existing is None else LogOutcome.REPLACED

    except OperationalError as e:
        db.rollback()
        logger.error(f"Store unavailable while logging for user {user_id}: {e}")
        raise StoreUnavailableError("Reading sessions are temporarily unavailable") from e

    logger.info(
        f"Reading time {outcome.value} for user {user_id} on {day} "
        f"({minutes} min, {policy.value} policy)"
    )
    return LogResult(outcome=outcome, policy=policy, session=session)


def remove_reading_day(db: Session, *, user_id: int, date: Union[str, date]) -> bool:
    """Delete the session logged for a day.

    A day with nothing logged is not an error: another request may have
    removed it first. Returns whether a row was deleted.
    """
    day = parse_session_date(
        date, future_message="Cannot remove reading time for a future day"
    )
    try:
        removed = crud_reading_session.delete_by_date(db, user_id=user_id, date=day)
    except OperationalError as e:
        db.rollback()
        logger.error(f"Store unavailable while deleting for user {user_id}: {e}")
        raise StoreUnavailableError("Reading sessions are temporarily unavailable") from e

    if removed:
        logger.info(f"Reading session removed for user {user_id} on {day}")
    else:
        logger.warning(f"No reading session to remove for user {user_id} on {day}")
    return removed
