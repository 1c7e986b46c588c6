from sqlalchemy import CheckConstraint, Column, DateTime, Index, String, func

from .base import Base, generate_id, utcnow


class CourseAccess(Base):
    """Time-bounded access grant of an email to a course."""
    __tablename__ = 'course_access'
    __table_args__ = (
        # At most one grant per (course, normalized email)
        Index('course_access_course_id_email_key', 'course_id', 'email', unique=True),
        CheckConstraint("role_in_course IN ('EDITOR', 'DOCENTE', 'VIEWER')", name='ck_course_access_role'),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())
    course_id = Column(String(36), nullable=False, index=True)
    email = Column(String(320), nullable=False, index=True)
    role_in_course = Column(String(16), nullable=False, default="DOCENTE")
    name = Column(String(255), nullable=False, default="")
    # NULL means permanent
    expires_at = Column(DateTime(True), nullable=True)
