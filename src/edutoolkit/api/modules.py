from typing import Annotated, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..interface.modules import ModuleCreate, ModuleDeleteResult, ModuleGet, ModuleUpdate
from ..permissions.auth import get_admin_principal, get_current_principal
from ..permissions.gate import require_course_view
from ..permissions.principal import Principal
from ..services import modules as module_service
from ..services.courses import get_course

module_router = APIRouter()


@module_router.get("/courses/{course_id}/modules", response_model=List[ModuleGet])
def list_course_modules(
    principal: Annotated[Principal, Depends(get_current_principal)],
    course_id: str,
    db: Session = Depends(get_db)
):
    require_course_view(db, principal, course_id)
    return module_service.get_course_modules(db, course_id)


@module_router.post("/courses/{course_id}/modules", response_model=ModuleGet, status_code=status.HTTP_201_CREATED)
def create_module(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course_id: str,
    module: ModuleCreate,
    db: Session = Depends(get_db)
):
    get_course(db, course_id)
    module_id = module_service.create_module(db, course_id, module.title, module.description)
    return module_service.get_module(db, module_id)


@module_router.patch("/modules/{module_id}", response_model=ModuleGet)
def update_module(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    module_id: str,
    module: ModuleUpdate,
    db: Session = Depends(get_db)
):
    fields = {k: v for k, v in module.model_dump(exclude_unset=True).items() if v is not None or k == "description"}
    return module_service.update_module(db, module_id, fields)


@module_router.delete("/modules/{module_id}", response_model=ModuleDeleteResult)
def delete_module(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    module_id: str,
    db: Session = Depends(get_db)
):
    removed = module_service.delete_module(db, module_id)
    return ModuleDeleteResult(id=module_id, deleted_resources=removed)
