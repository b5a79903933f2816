from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status


# ===============================
# HTTP ERRORS
# ===============================


class BookNotFound(HTTPException):
    def __init__(self, book_id: int):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book with id {book_id} not found",
        )


class NotBookOwner(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden - You can only access your own books",
        )


class NotAuthenticated(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidCredentials(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials"
        )


class InactiveUser(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")


class DuplicateEmail(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )


class DuplicateUsername(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered",
        )


# ===============================
# READING LEDGER ERRORS
# ===============================


class LedgerError(Exception):
    """Base class for reading session ledger failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Reading session operation failed"

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class SessionValidationError(LedgerError):
    """Malformed date or minutes; raised before the store is touched."""

    status_code = 422
    error = "Validation failed"

    def __init__(self, field: str, message: str):
        super().__init__(message, details=[{"field": field, "message": message}])
        self.field = field


class SessionNotFoundError(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Reading session not found"


class SessionConflictError(LedgerError):
    """More than one writer raced for the same user and day."""

    status_code = status.HTTP_409_CONFLICT
    error = "Conflicting reading session"


class StoreUnavailableError(LedgerError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Storage unavailable"
