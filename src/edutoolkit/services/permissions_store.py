"""
Course access grants keyed by (course, normalized email).

Grants are stored before the person necessarily has an account, so
everything here works on emails rather than user ids. Expired grants are
never deleted; they are filtered out at read time.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..model.access import CourseAccess
from ..model.base import as_utc, utcnow
from ..repositories.access import CourseAccessRepository
from ..repositories.base import DuplicateError
from ..settings import settings

logger = logging.getLogger(__name__)

USER_NAME_SCAN_LIMIT = 5


def normalize_email(email: str) -> str:
    return email.strip().lower()


def end_of_day(day: date) -> datetime:
    """Last representable instant (23:59:59.999) of ``day`` in UTC."""
    return datetime.combine(day, time(23, 59, 59, 999000), tzinfo=timezone.utc)


def is_expired(grant: CourseAccess, now: Optional[datetime] = None) -> bool:
    if grant.expires_at is None:
        return False
    now = as_utc(now) if now is not None else utcnow()
    return as_utc(grant.expires_at) < now


def grant_access(db: Session, course_id: str, email: str, role: str = "DOCENTE",
                 expires_at: Optional[datetime] = None, name: Optional[str] = None) -> Optional[str]:
    """
    Authorize ``email`` on a course.

    Returns:
        The new grant id, or None when the email already holds a grant for
        this course (no-op, not an error)
    """
    repo = CourseAccessRepository(db)
    normalized = normalize_email(email)

    if repo.find_grant(course_id, normalized) is not None:
        logger.info(f"Access to course {course_id} already granted to {normalized}")
        return None

    grant = CourseAccess(
        course_id=course_id,
        email=normalized,
        role_in_course=role,
        name=(name or "").strip(),
        expires_at=expires_at,
    )
    try:
        grant = repo.create(grant)
    except DuplicateError:
        # A concurrent grant won the unique index
        logger.info(f"Access to course {course_id} already granted to {normalized}")
        return None

    logger.info(f"Granted {role} access to course {course_id} for {normalized}")
    return grant.id


def revoke_access(db: Session, grant_id: str) -> bool:
    deleted = CourseAccessRepository(db).delete(grant_id)
    if deleted:
        logger.info(f"Revoked access grant {grant_id}")
    return deleted


def update_access_expiration(db: Session, grant_id: str, expires_at: Optional[datetime]) -> CourseAccess:
    grant = CourseAccessRepository(db).update(grant_id, {"expires_at": expires_at})
    logger.info(f"Access grant {grant_id} now expires at {expires_at or 'never'}")
    return grant


def has_access(db: Session, course_id: str, email: str, now: Optional[datetime] = None) -> bool:
    grant = CourseAccessRepository(db).find_grant(course_id, normalize_email(email))
    if grant is None:
        return False
    return not is_expired(grant, now)


def get_authorized_courses_for_user(db: Session, email: str, now: Optional[datetime] = None) -> List[str]:
    grants = CourseAccessRepository(db).find_by_email(normalize_email(email))
    return [g.course_id for g in grants if not is_expired(g, now)]


def get_all_permissions(db: Session) -> List[CourseAccess]:
    return CourseAccessRepository(db).list_newest_first()


def get_course_permissions(db: Session, course_id: str) -> List[CourseAccess]:
    return CourseAccessRepository(db).find_by_course(course_id)


def get_recent_access_suggestions(db: Session, limit: Optional[int] = None) -> List[Dict[str, str]]:
    """
    Distinct emails of the most recently created grants, for autocomplete.

    The first non-empty name seen for an email (the most recent one) wins.
    """
    grants = CourseAccessRepository(db).list_newest_first(limit or settings.RECENT_SUGGESTIONS_LIMIT)

    suggestions: Dict[str, str] = {}
    for grant in grants:
        name = (grant.name or "").strip()
        if grant.email not in suggestions:
            suggestions[grant.email] = name
        elif not suggestions[grant.email] and name:
            suggestions[grant.email] = name

    return [{"email": email, "name": name} for email, name in suggestions.items()]


def get_user_name_from_permissions(db: Session, email: str) -> Optional[str]:
    grants = CourseAccessRepository(db).find_by_email(normalize_email(email), limit=USER_NAME_SCAN_LIMIT)
    for grant in grants:
        if grant.name and grant.name.strip():
            return grant.name.strip()
    return None
