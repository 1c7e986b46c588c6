"""
Course catalogue.

Deleting a course removes the course row only. Its modules, resources and
grants are left in place.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..model.base import utcnow
from ..model.course import Course
from ..repositories.course import CourseRepository
from .storage_service import StorageService

logger = logging.getLogger(__name__)


def create_course(db: Session, title: str, image_url: Optional[str] = None,
                  description: Optional[str] = None) -> str:
    course = CourseRepository(db).create(Course(
        title=title,
        description=description,
        image_url=image_url or "",
        status="active",
    ))
    logger.info(f"Created course {course.id}")
    return course.id


def get_courses(db: Session) -> List[Course]:
    return CourseRepository(db).list_newest_first()


def get_course(db: Session, course_id: str) -> Course:
    return CourseRepository(db).get_by_id(course_id)


def get_courses_by_ids(db: Session, ids: Sequence[str]) -> List[Course]:
    return CourseRepository(db).find_by_ids(ids)


def update_course_status(db: Session, course_id: str, status: str) -> Course:
    course = CourseRepository(db).update(course_id, {"status": status, "updated_at": utcnow()})
    logger.info(f"Course {course_id} is now {status}")
    return course


def update_course_details(db: Session, course_id: str, fields: Dict[str, Any]) -> Course:
    updates = {k: v for k, v in fields.items() if k in ("title", "description")}
    updates["updated_at"] = utcnow()
    return CourseRepository(db).update(course_id, updates)


def delete_course(db: Session, course_id: str) -> bool:
    deleted = CourseRepository(db).delete(course_id)
    if deleted:
        logger.info(f"Deleted course {course_id}")
    return deleted


async def upload_course_image(db: Session, storage: StorageService, course_id: str,
                              data: bytes, content_type: Optional[str]) -> str:
    """Store a new cover for the course and point the course at it."""
    repo = CourseRepository(db)
    repo.get_by_id(course_id)

    url = await storage.upload_course_cover(course_id, data, content_type)
    repo.update(course_id, {"image_url": url, "updated_at": utcnow()})
    return url
