from enum import Enum
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from .base import BaseEntityGet


class ResourceType(str, Enum):
    drive = "drive"
    video = "video"
    link = "link"


class ResourceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: ResourceType
    url: str = Field(..., min_length=1, max_length=2048)
    module_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True)


class ResourceGet(BaseEntityGet):
    id: str
    course_id: str
    module_id: Optional[str] = None
    title: str
    type: ResourceType
    url: str
    tags: List[str] = Field(default_factory=list)
    order: int


class ResourceUpdate(BaseModel):
    """Partial update; ``module_id: null`` moves the resource to "General"."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[ResourceType] = None
    url: Optional[str] = Field(None, min_length=1, max_length=2048)
    module_id: Optional[str] = None
    tags: Optional[List[str]] = None
    order: Optional[int] = None

    model_config = ConfigDict(use_enum_values=True)


class ResourceReorder(BaseModel):
    resource_ids: List[str]


class ModuleDropTarget(BaseModel):
    kind: Literal["module"] = "module"
    # None targets the "General" container
    module_id: Optional[str] = None


class ResourceDropTarget(BaseModel):
    kind: Literal["resource"] = "resource"
    resource_id: str


class ResourceMove(BaseModel):
    resource_id: str
    target: Union[ModuleDropTarget, ResourceDropTarget] = Field(..., discriminator="kind")


class ResourceMoveResult(BaseModel):
    resource_id: str
    module_id: Optional[str] = None
    module_changed: bool
    order_changed: bool
    resources: List[ResourceGet]
