from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, field_validator

from .base import BaseEntityGet
from ..model.base import as_utc


class GlobalRole(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    DOCENTE = "DOCENTE"
    VIEWER = "VIEWER"


class UserProfileGet(BaseEntityGet):
    uid: str
    email: str
    role_global: GlobalRole
    # display name recorded on one of the user's access grants
    name: Optional[str] = None
    updated_at: Optional[datetime] = None

    @field_validator('updated_at', mode='after')
    @classmethod
    def updated_at_utc(cls, value):
        return as_utc(value)


class UserRoleUpdate(BaseModel):
    role: GlobalRole
