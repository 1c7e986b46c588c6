"""
Module lifecycle.

Deleting a module deletes its resources in the same transaction. Resources
are never reassigned to "General" on module delete.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..model.course import CourseModule
from ..repositories.base import RepositoryError
from ..repositories.course import ModuleRepository, ResourceRepository
from .resources import timestamp_order

logger = logging.getLogger(__name__)


def create_module(db: Session, course_id: str, title: str, description: Optional[str] = None) -> str:
    module = CourseModule(
        course_id=course_id,
        title=title,
        description=description,
        order=timestamp_order(),
    )
    module = ModuleRepository(db).create(module)
    logger.info(f"Created module {module.id} in course {course_id}")
    return module.id


def update_module(db: Session, module_id: str, fields: Dict[str, Any]) -> CourseModule:
    updates = {k: v for k, v in fields.items() if k in ("title", "description", "order")}
    return ModuleRepository(db).update(module_id, updates)


def get_module(db: Session, module_id: str) -> CourseModule:
    return ModuleRepository(db).get_by_id(module_id)


def get_course_modules(db: Session, course_id: str) -> List[CourseModule]:
    return ModuleRepository(db).find_by_course(course_id)


def delete_module(db: Session, module_id: str) -> int:
    """
    Delete a module and every resource assigned to it.

    Returns:
        Number of resources deleted with the module

    Raises:
        NotFoundError: If the module does not exist
    """
    modules = ModuleRepository(db)
    module = modules.get_by_id(module_id)

    try:
        removed = ResourceRepository(db).delete_by_module(module_id)
        db.delete(module)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting module {module_id}: {e}")
        raise RepositoryError(f"Failed to delete module {module_id}: {str(e)}")

    logger.info(f"Deleted module {module_id} with {removed} resources")
    return removed
