from sqlalchemy import Column, DateTime, String, func

from .base import Base, utcnow

# Global roles that manage every course
ADMIN_ROLES = ("ADMIN", "SUPER_ADMIN")


class UserProfile(Base):
    __tablename__ = 'user_profile'

    uid = Column(String(255), primary_key=True)
    created_at = Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())
    email = Column(String(320), nullable=False, index=True)
    role_global = Column(String(32), nullable=True)
    # Legacy single role field, migrated into role_global on read
    role = Column(String(32), nullable=True)
