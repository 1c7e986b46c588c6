"""
Resource persistence for the ordering engine.

``order`` is an integer meaningful only relative to other resources of the
same course. New resources take the creation instant in milliseconds so
they sort after everything created before them.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..model.course import Resource
from ..repositories.course import ResourceRepository
from ..repositories.base import NotFoundError, RepositoryError

logger = logging.getLogger(__name__)

DUPLICATE_SUFFIX = " (Copia)"

UPDATABLE_FIELDS = ("title", "type", "url", "module_id", "tags", "order")


def timestamp_order() -> int:
    return int(time.time() * 1000)


def create_resource(db: Session, course_id: str, title: str, type: str, url: str,
                    module_id: Optional[str] = None, tags: Optional[List[str]] = None) -> str:
    resource = Resource(
        course_id=course_id,
        module_id=module_id,
        title=title,
        type=type,
        url=url,
        tags=list(tags or []),
        order=timestamp_order(),
    )
    resource = ResourceRepository(db).create(resource)
    logger.info(f"Created resource {resource.id} in course {course_id}")
    return resource.id


def duplicate_resource(db: Session, resource: Resource) -> str:
    """Clone into the same course; module and tags are not carried over."""
    return create_resource(
        db,
        course_id=resource.course_id,
        title=f"{resource.title}{DUPLICATE_SUFFIX}",
        type=resource.type,
        url=resource.url,
    )


def update_resource(db: Session, resource_id: str, fields: Dict[str, Any]) -> Resource:
    updates = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
    if "tags" in updates:
        updates["tags"] = list(updates["tags"] or [])
    return ResourceRepository(db).update(resource_id, updates)


def delete_resource(db: Session, resource_id: str) -> bool:
    return ResourceRepository(db).delete(resource_id)


def get_resource(db: Session, resource_id: str) -> Resource:
    return ResourceRepository(db).get_by_id(resource_id)


def get_course_resources(db: Session, course_id: str) -> List[Resource]:
    return ResourceRepository(db).find_by_course(course_id)


def get_module_resources(db: Session, module_id: Optional[str], course_id: Optional[str] = None) -> List[Resource]:
    return ResourceRepository(db).find_by_module(module_id, course_id)


def reorder_resources(db: Session, ordered_ids: Sequence[str]) -> None:
    """
    Rewrite ``order`` of every listed resource to its 0-based position.

    All writes share one transaction.
    """
    try:
        ResourceRepository(db).rewrite_order(ordered_ids)
    except RepositoryError as e:
        logger.error(f"Error reordering resources: {e}")
        raise
    logger.info(f"Reordered {len(ordered_ids)} resources")


def move_and_reorder(db: Session, resource_id: str, module_id: Optional[str],
                     ordered_ids: Sequence[str]) -> None:
    """
    Persist a drop: module change of the dragged resource and the new order
    of the course, committed together or not at all.
    """
    repo = ResourceRepository(db)
    try:
        repo.update(resource_id, {"module_id": module_id}, commit=False)
        repo.rewrite_order(ordered_ids, commit=False)
        repo.commit()
    except NotFoundError:
        repo.rollback()
        raise
    except RepositoryError as e:
        repo.rollback()
        logger.error(f"Error moving resource {resource_id}: {e}")
        raise
    logger.info(f"Moved resource {resource_id} to module {module_id or 'General'}")
