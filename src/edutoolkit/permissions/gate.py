"""
Authorization gate.

The only place that decides what a caller may see or change. Admins
(``ADMIN`` and ``SUPER_ADMIN``) manage everything; anyone else may view a
course's read-only content while holding a non-expired grant for it.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ..api.exceptions import ForbiddenException
from ..services.permissions_store import has_access
from ..model.auth import ADMIN_ROLES
from .principal import Principal

logger = logging.getLogger(__name__)


def is_admin(profile) -> bool:
    """True for profiles or principals whose global role is ADMIN or SUPER_ADMIN."""
    return getattr(profile, "role_global", None) in ADMIN_ROLES


def can_manage_course(principal: Principal) -> bool:
    return is_admin(principal)


def can_view_course(db: Session, principal: Principal, course_id: str,
                    now: Optional[datetime] = None) -> bool:
    if is_admin(principal):
        return True
    return has_access(db, course_id, principal.email, now)


def require_admin(principal: Principal) -> Principal:
    if not can_manage_course(principal):
        logger.info(f"Admin access denied for {principal.email}")
        raise ForbiddenException("Administrator role required")
    return principal


def require_course_view(db: Session, principal: Principal, course_id: str) -> Principal:
    if not can_view_course(db, principal, course_id):
        logger.info(f"Access to course {course_id} denied for {principal.email}")
        raise ForbiddenException("No active access to this course")
    return principal
