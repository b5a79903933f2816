from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookshelf.core.auth import get_current_user
from bookshelf.core.database import get_db
from bookshelf.crud.user_settings import crud_user_settings
from bookshelf.models.user import User
from bookshelf.schemas.response import Messages, SuccessResponse, UpdateResponse
from bookshelf.schemas.user_settings import UserSettingsResponse, UserSettingsUpdate

router = APIRouter()


@router.get("/", response_model=SuccessResponse[UserSettingsResponse])
def read_settings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Get the current user's settings, creating the defaults on first use.
    """
    user_settings = crud_user_settings.get_or_create(db, user_id=current_user.id)
    return SuccessResponse(
        message=Messages.SETTINGS_RETRIEVED,
        data=UserSettingsResponse.model_validate(user_settings),
    )


@router.put("/", response_model=UpdateResponse[UserSettingsResponse])
def update_settings(
    *,
    db: Session = Depends(get_db),
    settings_in: UserSettingsUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    user_settings = crud_user_settings.update_for_user(
        db, user_id=current_user.id, obj_in=settings_in
    )
    return UpdateResponse(
        message=Messages.SETTINGS_UPDATED,
        data=UserSettingsResponse.model_validate(user_settings),
    )
