from typing import Annotated, List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..api.exceptions import NotFoundException
from ..database import get_db
from ..interface.users import UserProfileGet, UserRoleUpdate
from ..permissions.auth import get_admin_principal
from ..permissions.principal import Principal
from ..services import users as user_service

user_router = APIRouter()


@user_router.get("", response_model=List[UserProfileGet])
def list_users(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    db: Session = Depends(get_db)
):
    return [_profile(p) for p in user_service.get_all_users(db)]


@user_router.get("/admins", response_model=List[UserProfileGet])
def list_admins(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    db: Session = Depends(get_db)
):
    return [_profile(p) for p in user_service.get_admins(db)]


@user_router.get("/lookup", response_model=UserProfileGet)
def lookup_user(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    email: str,
    db: Session = Depends(get_db)
):
    profile = user_service.get_user_by_email(db, email)
    if profile is None:
        raise NotFoundException(f"No user with email {email}")
    return _profile(profile)


@user_router.patch("/{uid}/role", response_model=UserProfileGet)
def update_role(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    uid: str,
    update: UserRoleUpdate,
    db: Session = Depends(get_db)
):
    return _profile(user_service.update_user_role(db, uid, update.role.value))


def _profile(profile) -> UserProfileGet:
    return UserProfileGet(
        uid=profile.uid,
        email=profile.email,
        role_global=user_service.effective_role(profile),
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )
