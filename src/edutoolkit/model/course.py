from sqlalchemy import (
    BigInteger, CheckConstraint, Column, DateTime, Index, String, func
)

from .base import Base, JSONType, generate_id, utcnow


class Course(Base):
    __tablename__ = 'course'
    __table_args__ = (
        CheckConstraint("status IN ('active', 'archived')", name='ck_course_status'),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())
    title = Column(String(255), nullable=False)
    description = Column(String(4096))
    image_url = Column(String(2048), nullable=False, default="")
    status = Column(String(16), nullable=False, default="active")


class CourseModule(Base):
    __tablename__ = 'course_module'
    __table_args__ = (
        Index('course_module_course_id_order_idx', 'course_id', 'order'),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())
    # Plain reference: deleting a course leaves its modules in place
    course_id = Column(String(36), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String(4096))
    order = Column(BigInteger, nullable=False, default=0)


class Resource(Base):
    __tablename__ = 'resource'
    __table_args__ = (
        CheckConstraint("type IN ('drive', 'video', 'link')", name='ck_resource_type'),
        Index('resource_course_id_order_idx', 'course_id', 'order'),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())
    course_id = Column(String(36), nullable=False, index=True)
    # NULL means "General"
    module_id = Column(String(36), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    type = Column(String(16), nullable=False)
    url = Column(String(2048), nullable=False)
    tags = Column(JSONType, nullable=False, default=list)
    order = Column(BigInteger, nullable=False, default=0)
