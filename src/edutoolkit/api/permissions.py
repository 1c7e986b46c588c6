from typing import Annotated, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..api.exceptions import BadRequestException
from ..database import get_db
from ..interface.access import AccessSuggestion, ExpirationUpdate, GrantCreate, GrantGet, GrantResult
from ..permissions.auth import get_admin_principal
from ..permissions.principal import Principal
from ..services import permissions_store
from ..services.courses import get_course

permission_router = APIRouter()


def _grant(db: Session, course_id: str, grant: GrantCreate) -> GrantResult:
    get_course(db, course_id)
    grant_id = permissions_store.grant_access(
        db, course_id, grant.email, grant.role, grant.expires_at, grant.name
    )
    return GrantResult(id=grant_id, created=grant_id is not None)


@permission_router.get("/permissions", response_model=List[GrantGet])
def list_permissions(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    db: Session = Depends(get_db)
):
    return permissions_store.get_all_permissions(db)


@permission_router.post("/permissions", response_model=GrantResult)
def grant_access(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    grant: GrantCreate,
    db: Session = Depends(get_db)
):
    if not grant.course_id:
        raise BadRequestException("course_id is required")
    return _grant(db, grant.course_id, grant)


@permission_router.get("/permissions/suggestions", response_model=List[AccessSuggestion])
def access_suggestions(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    db: Session = Depends(get_db)
):
    return permissions_store.get_recent_access_suggestions(db)


@permission_router.get("/courses/{course_id}/permissions", response_model=List[GrantGet])
def list_course_permissions(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course_id: str,
    db: Session = Depends(get_db)
):
    return permissions_store.get_course_permissions(db, course_id)


@permission_router.post("/courses/{course_id}/permissions", response_model=GrantResult)
def grant_course_access(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course_id: str,
    grant: GrantCreate,
    db: Session = Depends(get_db)
):
    return _grant(db, course_id, grant)


@permission_router.patch("/permissions/{grant_id}", response_model=GrantGet)
def update_expiration(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    grant_id: str,
    update: ExpirationUpdate,
    db: Session = Depends(get_db)
):
    return permissions_store.update_access_expiration(db, grant_id, update.expires_at)


@permission_router.delete("/permissions/{grant_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_access(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    grant_id: str,
    db: Session = Depends(get_db)
):
    permissions_store.revoke_access(db, grant_id)
