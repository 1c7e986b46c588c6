"""User profiles and global roles."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..model.auth import UserProfile
from ..model.base import utcnow
from ..repositories.base import DuplicateError, RepositoryError
from ..repositories.users import UserProfileRepository
from ..settings import settings

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "DOCENTE"


def initial_role(email: str) -> str:
    """Role of a first sign-in, seeded from the configured allow-lists."""
    normalized = (email or "").strip().lower()
    if normalized in settings.SUPER_ADMIN_EMAILS:
        return "SUPER_ADMIN"
    if normalized in settings.ADMIN_EMAILS:
        return "ADMIN"
    return DEFAULT_ROLE


def effective_role(profile: UserProfile) -> str:
    return profile.role_global or profile.role or DEFAULT_ROLE


def ensure_user_profile(db: Session, uid: str, email: str) -> UserProfile:
    """
    Get or create the profile of an authenticated user.

    Existing profiles that only carry the legacy ``role`` field get it
    copied into ``role_global``.
    """
    repo = UserProfileRepository(db)
    profile = repo.get_by_id_optional(uid)

    if profile is not None:
        if profile.role_global is None and profile.role:
            try:
                profile = repo.update(uid, {"role_global": profile.role, "updated_at": utcnow()})
                logger.info(f"Migrated legacy role of {uid} to {profile.role_global}")
            except RepositoryError as e:
                logger.warning(f"Could not migrate legacy role of {uid}: {e}")
                profile = repo.get_by_id(uid)
        return profile

    try:
        profile = repo.create(UserProfile(uid=uid, email=email, role_global=initial_role(email)))
    except DuplicateError:
        # Created concurrently by another request of the same user
        return repo.get_by_id(uid)

    logger.info(f"Created profile for {email} with role {profile.role_global}")
    return profile


def upsert_user_profile(db: Session, uid: str, email: str, role: Optional[str]) -> UserProfile:
    """Create or overwrite the profile's email and global role."""
    repo = UserProfileRepository(db)
    role = role or DEFAULT_ROLE

    if repo.exists(uid):
        return repo.update(uid, {"email": email, "role_global": role, "updated_at": utcnow()})
    return repo.create(UserProfile(uid=uid, email=email, role_global=role))


def get_all_users(db: Session) -> List[UserProfile]:
    return UserProfileRepository(db).list_all()


def get_admins(db: Session) -> List[UserProfile]:
    return UserProfileRepository(db).find_admins()


def get_user_by_email(db: Session, email: str) -> Optional[UserProfile]:
    return UserProfileRepository(db).find_by_email(email)


def update_user_role(db: Session, uid: str, role: str) -> UserProfile:
    profile = UserProfileRepository(db).update(uid, {"role_global": role, "updated_at": utcnow()})
    logger.info(f"Set global role of {uid} to {role}")
    return profile
