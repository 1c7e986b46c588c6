from typing import Optional
from pydantic import BaseModel, Field

from .base import BaseEntityGet


class ModuleCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class ModuleGet(BaseEntityGet):
    id: str
    course_id: str
    title: str
    description: Optional[str] = None
    order: int


class ModuleUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    order: Optional[int] = None


class ModuleDeleteResult(BaseModel):
    id: str
    deleted_resources: int
