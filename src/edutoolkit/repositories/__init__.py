"""
Repository pattern implementation for direct database access.

This package provides the repository classes the service layer is built on.
"""

from .base import (
    BaseRepository,
    RepositoryError,
    NotFoundError,
    DuplicateError
)
from .course import CourseRepository, ModuleRepository, ResourceRepository
from .access import CourseAccessRepository
from .users import UserProfileRepository
from .interactions import FavoriteRepository, RecentRepository, CompletedRepository

__all__ = [
    "BaseRepository",
    "RepositoryError", 
    "NotFoundError",
    "DuplicateError",
    "CourseRepository",
    "ModuleRepository",
    "ResourceRepository",
    "CourseAccessRepository",
    "UserProfileRepository",
    "FavoriteRepository",
    "RecentRepository",
    "CompletedRepository",
]
