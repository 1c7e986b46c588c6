from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import BaseEntityGet
from ..model.base import as_utc


class CourseStatus(str, Enum):
    active = "active"
    archived = "archived"


class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = None


class CourseGet(BaseEntityGet):
    id: str
    title: str
    description: Optional[str] = None
    image_url: str = ""
    status: CourseStatus
    updated_at: Optional[datetime] = None

    @field_validator('updated_at', mode='after')
    @classmethod
    def updated_at_utc(cls, value):
        return as_utc(value)


class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None


class CourseStatusUpdate(BaseModel):
    status: CourseStatus

    model_config = ConfigDict(use_enum_values=True)


class CourseImageGet(BaseModel):
    id: str
    image_url: str
