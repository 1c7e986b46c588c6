"""
Course, module and resource repositories.

Course children reference their course by id only. Nothing here cascades a
course delete; module deletion is the one place that removes resources.
"""

from typing import List, Optional, Sequence
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from .base import BaseRepository, NotFoundError, RepositoryError
from ..model.course import Course, CourseModule, Resource


def _by_order(items):
    # Stable sort keeps insertion order for equal order values
    return sorted(items, key=lambda item: item.order if item.order is not None else 0)


class CourseRepository(BaseRepository[Course]):
    """Repository for Course entity database operations."""
    
    def __init__(self, db: Session):
        super().__init__(db, Course)
    
    def list_newest_first(self) -> List[Course]:
        return self.db.query(Course).order_by(Course.created_at.desc()).all()
    
    def find_by_ids(self, ids: Sequence[str]) -> List[Course]:
        """
        Fetch courses by id, silently skipping ids that no longer exist.
        
        Args:
            ids: Course identifiers, in the order the caller wants them back
            
        Returns:
            Existing courses in the order of ``ids``
        """
        if not ids:
            return []
        found = {c.id: c for c in self.db.query(Course).filter(Course.id.in_(list(ids))).all()}
        return [found[i] for i in ids if i in found]


class ModuleRepository(BaseRepository[CourseModule]):
    """Repository for CourseModule entity database operations."""
    
    def __init__(self, db: Session):
        super().__init__(db, CourseModule)
    
    def find_by_course(self, course_id: str) -> List[CourseModule]:
        return _by_order(self.find_by(course_id=course_id))


class ResourceRepository(BaseRepository[Resource]):
    """Repository for Resource entity database operations."""
    
    def __init__(self, db: Session):
        super().__init__(db, Resource)
    
    def find_by_course(self, course_id: str) -> List[Resource]:
        """
        All resources of a course, ascending by ``order``.
        
        The query itself carries no ordering guarantee; sorting happens here.
        """
        return _by_order(self.find_by(course_id=course_id))
    
    def find_by_module(self, module_id: Optional[str], course_id: Optional[str] = None) -> List[Resource]:
        query = self.db.query(Resource)
        if module_id is None:
            query = query.filter(Resource.module_id.is_(None))
        else:
            query = query.filter(Resource.module_id == module_id)
        if course_id is not None:
            query = query.filter(Resource.course_id == course_id)
        return _by_order(query.all())
    
    def delete_by_module(self, module_id: str) -> int:
        """Delete every resource of a module inside the current transaction."""
        return self.db.query(Resource).filter(
            Resource.module_id == module_id
        ).delete(synchronize_session="fetch")
    
    def rewrite_order(self, ordered_ids: Sequence[str], commit: bool = True) -> None:
        """
        Set ``order`` of each resource to its position in ``ordered_ids``.
        
        All writes share one transaction: either every position is stored or
        none is.
        
        Raises:
            NotFoundError: If any id does not exist (nothing is written)
            RepositoryError: If the database rejects the batch
        """
        try:
            for index, resource_id in enumerate(ordered_ids):
                resource = self.get_by_id_optional(resource_id)
                if resource is None:
                    raise NotFoundError(Resource.__name__, resource_id)
                resource.order = index
            if commit:
                self.db.commit()
            else:
                self.db.flush()
        except NotFoundError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to reorder resources: {str(e)}")
