from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

# Generic type for data payload
T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    error: Optional[str] = None
    details: Optional[List[Any]] = None
    meta: Optional[Dict[str, Any]] = None


class SuccessResponse(APIResponse[T]):
    """Success response with data"""

    success: bool = True
    message: Optional[str] = "Operation completed successfully"


class ErrorResponse(APIResponse[None]):
    """Error response with error details"""

    success: bool = False
    error: Optional[str] = "An error occurred"
    data: None = None


class CreateResponse(APIResponse[T]):
    """Response for create operations"""

    success: bool = True
    message: Optional[str] = "Created successfully"


class UpdateResponse(APIResponse[T]):
    """Response for update operations"""

    success: bool = True
    message: Optional[str] = "Updated successfully"


class DeleteResponse(APIResponse[None]):
    """Response for delete operations"""

    success: bool = True
    message: Optional[str] = "Deleted successfully"
    data: None = None


class ListResponse(APIResponse[List[T]]):
    """Response for list operations"""

    success: bool = True
    message: Optional[str] = "Data retrieved successfully"


def error_body(
    error: str,
    message: Optional[str] = None,
    details: Optional[List[Any]] = None,
) -> Dict[str, Any]:
    """Serialized failure envelope for exception handlers."""
    return ErrorResponse(error=error, message=message, details=details).model_dump()


# Specific success messages for different operations
class Messages:
    # User messages
    USER_CREATED = "User created successfully"
    REGISTER_SUCCESS = "Registration successful"
    LOGIN_SUCCESSFUL = "Login successful"
    INCORRECT_CREDENTIALS = "Invalid credentials"
    INACTIVE_USER = "Inactive user"

    # Book messages
    BOOK_CREATED = "Book created successfully"
    BOOK_UPDATED = "Book updated successfully"
    BOOK_DELETED = "Book deleted successfully"
    BOOK_NOT_FOUND = "Book not found"
    BOOKS_RETRIEVED = "Books retrieved successfully"

    # Reading session messages
    READING_SESSION_CREATED = "Reading session created successfully"
    READING_SESSION_UPDATED = "Reading session updated successfully"
    READING_SESSION_DELETED = "Reading session deleted successfully"
    READING_SESSION_UNCHANGED = "Nothing logged for this date"
    READING_SESSION_NOT_FOUND = "No reading session logged for this date"
    READING_SESSIONS_RETRIEVED = "Reading sessions retrieved successfully"
    READING_STATS_RETRIEVED = "Reading statistics retrieved successfully"
    HEATMAP_RETRIEVED = "Reading heatmap retrieved successfully"

    # Settings messages
    SETTINGS_RETRIEVED = "Settings retrieved successfully"
    SETTINGS_UPDATED = "Settings updated successfully"

    # Dashboard messages
    DASHBOARD_RETRIEVED = "Dashboard statistics retrieved successfully"

    # General messages
    OPERATION_SUCCESS = "Operation completed successfully"
    DATA_RETRIEVED = "Data retrieved successfully"
    VALIDATION_FAILED = "Validation failed"
    UNAUTHORIZED = "Unauthorized"
    NOT_FOUND = "Resource not found"
    INTERNAL_ERROR = "Internal server error occurred"
