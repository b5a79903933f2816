import logging
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from bookshelf.core.auth import create_access_token, get_current_user
from bookshelf.core.config import settings
from bookshelf.core.database import get_db
from bookshelf.core.exceptions import (
    DuplicateEmail,
    DuplicateUsername,
    InactiveUser,
    InvalidCredentials,
)
from bookshelf.crud.user import crud_user
from bookshelf.models.user import User
from bookshelf.schemas.response import CreateResponse, Messages, SuccessResponse
from bookshelf.schemas.token import Token
from bookshelf.schemas.user import UserCreate, UserLogin, UserResponse

logger = logging.getLogger(__name__)

# Constants
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

router = APIRouter()


def _issue_token(db: Session, login: str, password: str) -> Token:
    user = crud_user.authenticate(db, login=login, password=password)
    if not user:
        logger.warning(f"Failed login attempt for '{login}'")
        raise InvalidCredentials()
    elif not crud_user.is_active(user):
        raise InactiveUser()

    access_token = create_access_token(
        user.id, expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return Token(
        access_token=access_token,
        token_type="bearer",
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post(
    "/register",
    response_model=CreateResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
def register(
    *,
    db: Session = Depends(get_db),
    user_in: UserCreate,
) -> Any:
    """
    Create new user.
    """
    if crud_user.get_by_email(db, email=user_in.email):
        raise DuplicateEmail()

    if crud_user.get_by_username(db, username=user_in.username):
        raise DuplicateUsername()

    user = crud_user.create(db, obj_in=user_in)
    return CreateResponse(
        message=Messages.REGISTER_SUCCESS, data=UserResponse.model_validate(user)
    )


@router.post("/login", response_model=SuccessResponse[Token])
def login_for_access_token(
    db: Session = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()
) -> Any:
    """
    OAuth2 compatible token login, get an access token for future requests
    """
    token = _issue_token(db, form_data.username, form_data.password)
    return SuccessResponse(message=Messages.LOGIN_SUCCESSFUL, data=token)


@router.post("/login-json", response_model=SuccessResponse[Token])
def login_json(user_in: UserLogin, db: Session = Depends(get_db)) -> Any:
    """
    JSON login endpoint; accepts an email or a username.
    """
    token = _issue_token(db, user_in.username, user_in.password)
    return SuccessResponse(message=Messages.LOGIN_SUCCESSFUL, data=token)


@router.get("/me", response_model=SuccessResponse[UserResponse])
def read_users_me(current_user: User = Depends(get_current_user)) -> Any:
    """
    Get current user.
    """
    return SuccessResponse(
        message=Messages.DATA_RETRIEVED, data=UserResponse.model_validate(current_user)
    )
