from .base import Base, metadata
from .auth import UserProfile
from .course import Course, CourseModule, Resource
from .access import CourseAccess
from .interaction import UserFavorite, UserRecent, UserCompleted

# Import all models to ensure every table is registered on the metadata
from . import auth, course, access, interaction

__all__ = [
    'Base',
    'metadata',
    # Auth models
    'UserProfile',
    # Course models
    'Course',
    'CourseModule',
    'Resource',
    # Access grants
    'CourseAccess',
    # Learner interactions
    'UserFavorite',
    'UserRecent',
    'UserCompleted',
]
