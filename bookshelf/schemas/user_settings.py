from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Preferences(BaseModel):
    theme: Optional[str] = None
    default_view: Optional[str] = None
    notifications: Optional[bool] = None


class UserSettingsUpdate(BaseModel):
    yearly_goal: Optional[int] = Field(None, ge=1, le=1000)
    preferences: Optional[Preferences] = None


class UserSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    yearly_goal: int
    preferences: dict = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
