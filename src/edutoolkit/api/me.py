from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..interface.courses import CourseGet
from ..interface.interactions import CompletedGet, FavoriteGet, RecentGet, ToggleResult
from ..interface.users import UserProfileGet
from ..permissions.auth import get_current_principal
from ..permissions.gate import require_course_view
from ..permissions.principal import Principal
from ..repositories.users import UserProfileRepository
from ..services import interactions
from ..services.courses import get_courses_by_ids
from ..services.permissions_store import get_authorized_courses_for_user, get_user_name_from_permissions
from ..services.resources import get_resource

me_router = APIRouter()


def _viewable_resource(db: Session, principal: Principal, resource_id: str):
    resource = get_resource(db, resource_id)
    require_course_view(db, principal, resource.course_id)
    return resource


@me_router.get("", response_model=UserProfileGet)
def get_me(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    profile = UserProfileRepository(db).get_by_id(principal.get_user_id_or_throw())
    return UserProfileGet(
        uid=profile.uid,
        email=profile.email,
        role_global=principal.role_global,
        name=get_user_name_from_permissions(db, profile.email),
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


@me_router.get("/courses", response_model=List[CourseGet])
def get_my_courses(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    return get_courses_by_ids(db, get_authorized_courses_for_user(db, principal.email))


@me_router.get("/favorites", response_model=List[FavoriteGet])
def get_my_favorites(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    return interactions.get_user_favorites(db, principal.get_user_id_or_throw())


@me_router.post("/favorites/{resource_id}", response_model=ToggleResult)
def toggle_favorite(
    principal: Annotated[Principal, Depends(get_current_principal)],
    resource_id: str,
    db: Session = Depends(get_db)
):
    resource = _viewable_resource(db, principal, resource_id)
    active = interactions.toggle_favorite(db, principal.get_user_id_or_throw(), resource)
    return ToggleResult(resource_id=resource_id, active=active)


@me_router.get("/recents", response_model=List[RecentGet])
def get_my_recents(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    return interactions.get_user_recents(db, principal.get_user_id_or_throw())


@me_router.post("/recents/{resource_id}", response_model=RecentGet)
def track_open(
    principal: Annotated[Principal, Depends(get_current_principal)],
    resource_id: str,
    db: Session = Depends(get_db)
):
    resource = _viewable_resource(db, principal, resource_id)
    return interactions.track_resource_open(db, principal.get_user_id_or_throw(), resource)


@me_router.get("/completed", response_model=List[CompletedGet])
def get_my_completed(
    principal: Annotated[Principal, Depends(get_current_principal)],
    course_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return interactions.get_user_completed(db, principal.get_user_id_or_throw(), course_id)


@me_router.post("/completed/{resource_id}", response_model=ToggleResult)
def toggle_completed(
    principal: Annotated[Principal, Depends(get_current_principal)],
    resource_id: str,
    db: Session = Depends(get_db)
):
    resource = _viewable_resource(db, principal, resource_id)
    active = interactions.toggle_completed(db, principal.get_user_id_or_throw(), resource)
    return ToggleResult(resource_id=resource_id, active=active)
