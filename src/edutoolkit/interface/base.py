from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..model.base import as_utc


class BaseEntityGet(BaseModel):
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    @field_validator('created_at', mode='after')
    @classmethod
    def created_at_utc(cls, value):
        return as_utc(value)

    model_config = ConfigDict(from_attributes=True)
