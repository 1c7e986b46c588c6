from typing import Annotated, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException, NotFoundException
from ..database import get_db
from ..interface.resources import (
    ModuleDropTarget,
    ResourceCreate,
    ResourceGet,
    ResourceMove,
    ResourceMoveResult,
    ResourceReorder,
    ResourceUpdate,
)
from ..permissions.auth import get_admin_principal, get_current_principal
from ..permissions.gate import require_course_view
from ..permissions.principal import Principal
from ..services import resources as resource_service
from ..services.courses import get_course
from ..services.modules import get_module
from ..services.ordering import ModuleTarget, ResourceTarget, move_resource

resource_router = APIRouter()


def _check_module(db: Session, course_id: str, module_id):
    if module_id is not None and get_module(db, module_id).course_id != course_id:
        raise BadRequestException(f"Module {module_id} does not belong to course {course_id}")


@resource_router.get("/courses/{course_id}/resources", response_model=List[ResourceGet])
def list_course_resources(
    principal: Annotated[Principal, Depends(get_current_principal)],
    course_id: str,
    db: Session = Depends(get_db)
):
    require_course_view(db, principal, course_id)
    return resource_service.get_course_resources(db, course_id)


@resource_router.post("/courses/{course_id}/resources", response_model=ResourceGet, status_code=status.HTTP_201_CREATED)
def create_resource(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course_id: str,
    resource: ResourceCreate,
    db: Session = Depends(get_db)
):
    get_course(db, course_id)
    _check_module(db, course_id, resource.module_id)
    resource_id = resource_service.create_resource(
        db, course_id, resource.title, resource.type, resource.url, resource.module_id, resource.tags
    )
    return resource_service.get_resource(db, resource_id)


@resource_router.patch("/resources/{resource_id}", response_model=ResourceGet)
def update_resource(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    resource_id: str,
    resource: ResourceUpdate,
    db: Session = Depends(get_db)
):
    # null only has a meaning for module_id ("General")
    fields = {k: v for k, v in resource.model_dump(exclude_unset=True).items() if v is not None or k == "module_id"}
    if "module_id" in fields:
        _check_module(db, resource_service.get_resource(db, resource_id).course_id, fields["module_id"])
    return resource_service.update_resource(db, resource_id, fields)


@resource_router.delete("/resources/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    resource_id: str,
    db: Session = Depends(get_db)
):
    if not resource_service.delete_resource(db, resource_id):
        raise NotFoundException(f"Resource {resource_id} not found")


@resource_router.post("/resources/{resource_id}/duplicate", response_model=ResourceGet, status_code=status.HTTP_201_CREATED)
def duplicate_resource(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    resource_id: str,
    db: Session = Depends(get_db)
):
    original = resource_service.get_resource(db, resource_id)
    return resource_service.get_resource(db, resource_service.duplicate_resource(db, original))


@resource_router.post("/courses/{course_id}/resources/reorder", response_model=List[ResourceGet])
def reorder_resources(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course_id: str,
    reorder: ResourceReorder,
    db: Session = Depends(get_db)
):
    course_ids = {r.id for r in resource_service.get_course_resources(db, course_id)}
    foreign = [i for i in reorder.resource_ids if i not in course_ids]
    if foreign:
        raise BadRequestException(f"Resources not in course {course_id}: {', '.join(foreign)}")
    if len(set(reorder.resource_ids)) != len(reorder.resource_ids):
        raise BadRequestException("Duplicate resource ids")

    resource_service.reorder_resources(db, reorder.resource_ids)
    return resource_service.get_course_resources(db, course_id)


@resource_router.post("/courses/{course_id}/resources/move", response_model=ResourceMoveResult)
def move_course_resource(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course_id: str,
    move: ResourceMove,
    db: Session = Depends(get_db)
):
    if isinstance(move.target, ModuleDropTarget):
        _check_module(db, course_id, move.target.module_id)
        target = ModuleTarget(move.target.module_id)
    else:
        target = ResourceTarget(move.target.resource_id)

    plan = move_resource(db, course_id, move.resource_id, target)
    return ResourceMoveResult(
        resource_id=plan.resource_id,
        module_id=plan.target_module_id,
        module_changed=plan.module_changed,
        order_changed=plan.order_changed,
        resources=[ResourceGet.model_validate(r) for r in resource_service.get_course_resources(db, course_id)],
    )
