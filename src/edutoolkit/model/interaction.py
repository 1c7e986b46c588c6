from sqlalchemy import Column, DateTime, String, func

from .base import Base, utcnow


def interaction_id(user_id: str, resource_id: str) -> str:
    return f"{user_id}_{resource_id}"


class UserFavorite(Base):
    __tablename__ = 'user_favorite'

    id = Column(String(512), primary_key=True)
    created_at = Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())
    user_id = Column(String(255), nullable=False, index=True)
    resource_id = Column(String(36), nullable=False)
    course_id = Column(String(36), nullable=False)
    resource_title = Column(String(255))
    resource_type = Column(String(16))
    resource_url = Column(String(2048))


class UserRecent(Base):
    __tablename__ = 'user_recent'

    id = Column(String(512), primary_key=True)
    last_opened_at = Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())
    user_id = Column(String(255), nullable=False, index=True)
    resource_id = Column(String(36), nullable=False)
    course_id = Column(String(36), nullable=False)
    resource_title = Column(String(255))
    resource_type = Column(String(16))
    resource_url = Column(String(2048))


class UserCompleted(Base):
    __tablename__ = 'user_completed'

    id = Column(String(512), primary_key=True)
    completed_at = Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())
    user_id = Column(String(255), nullable=False, index=True)
    resource_id = Column(String(36), nullable=False)
    course_id = Column(String(36), nullable=False, index=True)
