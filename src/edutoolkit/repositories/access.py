"""
Access grant repository.

Grants are keyed by (course_id, normalized email). The unique index on that
pair turns the "insert if absent" into a single statement that the database
arbitrates, so two concurrent grants cannot both succeed.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.access import CourseAccess


class CourseAccessRepository(BaseRepository[CourseAccess]):
    """Repository for CourseAccess entity database operations."""
    
    def __init__(self, db: Session):
        super().__init__(db, CourseAccess)
    
    def find_grant(self, course_id: str, email: str) -> Optional[CourseAccess]:
        return self.find_one_by(course_id=course_id, email=email)
    
    def find_by_email(self, email: str, limit: Optional[int] = None) -> List[CourseAccess]:
        return self.find_by(limit=limit, email=email)
    
    def find_by_course(self, course_id: str) -> List[CourseAccess]:
        return self.find_by(order_by=CourseAccess.created_at.desc(), course_id=course_id)
    
    def list_newest_first(self, limit: Optional[int] = None) -> List[CourseAccess]:
        return self.find_by(order_by=CourseAccess.created_at.desc(), limit=limit)
