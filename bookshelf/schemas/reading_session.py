from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class ReadingSessionLog(BaseModel):
    """Body of a "log reading time" request.

    ``minutes = 0`` is only meaningful under the absolute merge policy, where
    it removes the logged day. The ledger enforces the policy-specific range.
    """

    date: str = Field(..., pattern=DATE_PATTERN, description="Calendar day, YYYY-MM-DD")
    minutes: StrictInt = Field(..., ge=0, le=1440)


class ReadingSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: date
    minutes: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReadingSessionLogResult(BaseModel):
    outcome: str
    policy: str
    session: Optional[ReadingSessionResponse] = None


class ReadingSummary(BaseModel):
    total_minutes: int = 0
    total_hours: int = 0
    active_days: int = 0
    daily_average: int = 0
    current_streak: int = 0
    longest_streak: int = 0


class HeatmapCell(BaseModel):
    date: date
    minutes: int
    intensity: int


class ReadingHeatmap(BaseModel):
    start: date
    end: date
    cells: List[HeatmapCell]
