"""initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op

from edutoolkit.model import (
    Course,
    CourseAccess,
    CourseModule,
    Resource,
    UserCompleted,
    UserFavorite,
    UserProfile,
    UserRecent,
)


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLES = [
    UserProfile,
    Course,
    CourseModule,
    Resource,
    CourseAccess,
    UserFavorite,
    UserRecent,
    UserCompleted,
]


def upgrade() -> None:
    bind = op.get_bind()

    for model in TABLES:
        model.__table__.create(bind)


def downgrade() -> None:
    bind = op.get_bind()

    for model in reversed(TABLES):
        model.__table__.drop(bind)
