"""Per-user favorites, recently opened and completed resources."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..model.base import utcnow
from ..model.interaction import UserCompleted, UserFavorite, UserRecent, interaction_id
from ..repositories.interactions import CompletedRepository, FavoriteRepository, RecentRepository

logger = logging.getLogger(__name__)

RECENTS_LIMIT = 5


def toggle_favorite(db: Session, user_id: str, resource) -> bool:
    """
    Add or remove ``resource`` from the user's favorites.

    Returns:
        True if the resource is a favorite afterwards
    """
    repo = FavoriteRepository(db)
    favorite_id = interaction_id(user_id, resource.id)

    if repo.delete(favorite_id):
        return False

    repo.create(UserFavorite(
        id=favorite_id,
        user_id=user_id,
        resource_id=resource.id,
        course_id=resource.course_id,
        resource_title=resource.title,
        resource_type=resource.type,
        resource_url=resource.url,
    ))
    return True


def get_user_favorites(db: Session, user_id: str) -> List[UserFavorite]:
    return FavoriteRepository(db).find_by_user(user_id)


def track_resource_open(db: Session, user_id: str, resource) -> UserRecent:
    repo = RecentRepository(db)
    recent_id = interaction_id(user_id, resource.id)
    snapshot = {
        "course_id": resource.course_id,
        "resource_title": resource.title,
        "resource_type": resource.type,
        "resource_url": resource.url,
        "last_opened_at": utcnow(),
    }

    if repo.exists(recent_id):
        return repo.update(recent_id, snapshot)
    return repo.create(UserRecent(id=recent_id, user_id=user_id, resource_id=resource.id, **snapshot))


def get_user_recents(db: Session, user_id: str, limit: int = RECENTS_LIMIT) -> List[UserRecent]:
    return RecentRepository(db).find_by_user(user_id, limit=limit)


def toggle_completed(db: Session, user_id: str, resource) -> bool:
    repo = CompletedRepository(db)
    completed_id = interaction_id(user_id, resource.id)

    if repo.delete(completed_id):
        return False

    repo.create(UserCompleted(
        id=completed_id,
        user_id=user_id,
        resource_id=resource.id,
        course_id=resource.course_id,
    ))
    return True


def get_user_completed(db: Session, user_id: str, course_id: Optional[str] = None) -> List[UserCompleted]:
    return CompletedRepository(db).find_by_user(user_id, course_id)
