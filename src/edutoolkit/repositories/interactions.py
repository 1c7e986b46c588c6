from typing import List, Optional
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.interaction import UserFavorite, UserRecent, UserCompleted


class FavoriteRepository(BaseRepository[UserFavorite]):
    
    def __init__(self, db: Session):
        super().__init__(db, UserFavorite)
    
    def find_by_user(self, user_id: str) -> List[UserFavorite]:
        return self.find_by(order_by=UserFavorite.created_at.desc(), user_id=user_id)


class RecentRepository(BaseRepository[UserRecent]):
    
    def __init__(self, db: Session):
        super().__init__(db, UserRecent)
    
    def find_by_user(self, user_id: str, limit: Optional[int] = None) -> List[UserRecent]:
        return self.find_by(order_by=UserRecent.last_opened_at.desc(), limit=limit, user_id=user_id)


class CompletedRepository(BaseRepository[UserCompleted]):
    
    def __init__(self, db: Session):
        super().__init__(db, UserCompleted)
    
    def find_by_user(self, user_id: str, course_id: Optional[str] = None) -> List[UserCompleted]:
        if course_id is not None:
            return self.find_by(user_id=user_id, course_id=course_id)
        return self.find_by(user_id=user_id)
