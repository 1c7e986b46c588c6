from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import BaseEntityGet
from ..model.base import as_utc
from ..services.permissions_store import end_of_day


class CourseRole(str, Enum):
    EDITOR = "EDITOR"
    DOCENTE = "DOCENTE"
    VIEWER = "VIEWER"


def expiry_from_input(value):
    """A bare date (``YYYY-MM-DD``) means the grant lasts through that whole day."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return end_of_day(value)
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            return end_of_day(date.fromisoformat(value.strip()))
        except ValueError:
            return value
    return value


class GrantCreate(BaseModel):
    # taken from the path on /courses/{id}/permissions
    course_id: Optional[str] = None
    email: str = Field(..., min_length=3, max_length=320)
    role: CourseRole = CourseRole.DOCENTE
    expires_at: Optional[datetime] = None
    name: str = ""

    model_config = ConfigDict(use_enum_values=True)

    @field_validator('expires_at', mode='before')
    @classmethod
    def expires_at_end_of_day(cls, value):
        return expiry_from_input(value)


class GrantResult(BaseModel):
    id: Optional[str] = None
    created: bool


class GrantGet(BaseEntityGet):
    id: str
    course_id: str
    email: str
    role_in_course: CourseRole
    name: str = ""
    expires_at: Optional[datetime] = None

    @field_validator('expires_at', mode='after')
    @classmethod
    def expires_at_utc(cls, value):
        return as_utc(value)


class ExpirationUpdate(BaseModel):
    # None makes the grant permanent
    expires_at: Optional[datetime] = None

    @field_validator('expires_at', mode='before')
    @classmethod
    def expires_at_end_of_day(cls, value):
        return expiry_from_input(value)


class AccessSuggestion(BaseModel):
    email: str
    name: str = ""
