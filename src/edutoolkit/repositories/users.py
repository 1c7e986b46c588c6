from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.auth import ADMIN_ROLES, UserProfile


class UserProfileRepository(BaseRepository[UserProfile]):
    """Repository for UserProfile entity database operations."""
    
    def __init__(self, db: Session):
        super().__init__(db, UserProfile)
    
    def find_by_email(self, email: str) -> Optional[UserProfile]:
        return self.db.query(UserProfile).filter(
            func.lower(UserProfile.email) == email.strip().lower()
        ).first()
    
    def find_admins(self) -> List[UserProfile]:
        return self.db.query(UserProfile).filter(
            UserProfile.role_global.in_(ADMIN_ROLES)
        ).all()
    
    def list_all(self) -> List[UserProfile]:
        return self.db.query(UserProfile).all()
