from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

from ..model.base import as_utc


class FavoriteGet(BaseModel):
    id: str
    user_id: str
    resource_id: str
    course_id: str
    resource_title: Optional[str] = None
    resource_type: Optional[str] = None
    resource_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator('created_at', mode='after')
    @classmethod
    def created_at_utc(cls, value):
        return as_utc(value)

    model_config = ConfigDict(from_attributes=True)


class RecentGet(BaseModel):
    id: str
    user_id: str
    resource_id: str
    course_id: str
    resource_title: Optional[str] = None
    resource_type: Optional[str] = None
    resource_url: Optional[str] = None
    last_opened_at: Optional[datetime] = None

    @field_validator('last_opened_at', mode='after')
    @classmethod
    def last_opened_at_utc(cls, value):
        return as_utc(value)

    model_config = ConfigDict(from_attributes=True)


class CompletedGet(BaseModel):
    id: str
    user_id: str
    resource_id: str
    course_id: str
    completed_at: Optional[datetime] = None

    @field_validator('completed_at', mode='after')
    @classmethod
    def completed_at_utc(cls, value):
        return as_utc(value)

    model_config = ConfigDict(from_attributes=True)


class ToggleResult(BaseModel):
    resource_id: str
    active: bool
