from typing import Annotated, List
from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from ..api.exceptions import NotFoundException
from ..database import get_db
from ..interface.courses import CourseCreate, CourseGet, CourseImageGet, CourseStatusUpdate, CourseUpdate
from ..permissions.auth import get_admin_principal, get_current_principal
from ..permissions.gate import is_admin, require_course_view
from ..permissions.principal import Principal
from ..services import courses as course_service
from ..services.permissions_store import get_authorized_courses_for_user
from ..services.storage_service import StorageService, get_storage_service

course_router = APIRouter()


@course_router.get("", response_model=List[CourseGet])
def list_courses(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    if is_admin(principal):
        return course_service.get_courses(db)
    return course_service.get_courses_by_ids(db, get_authorized_courses_for_user(db, principal.email))


@course_router.post("", response_model=CourseGet, status_code=status.HTTP_201_CREATED)
def create_course(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course: CourseCreate,
    db: Session = Depends(get_db)
):
    course_id = course_service.create_course(db, course.title, course.image_url, course.description)
    return course_service.get_course(db, course_id)


@course_router.get("/{course_id}", response_model=CourseGet)
def get_course(
    principal: Annotated[Principal, Depends(get_current_principal)],
    course_id: str,
    db: Session = Depends(get_db)
):
    require_course_view(db, principal, course_id)
    return course_service.get_course(db, course_id)


@course_router.patch("/{course_id}", response_model=CourseGet)
def update_course(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course_id: str,
    course: CourseUpdate,
    db: Session = Depends(get_db)
):
    fields = {k: v for k, v in course.model_dump(exclude_unset=True).items() if v is not None or k == "description"}
    return course_service.update_course_details(db, course_id, fields)


@course_router.patch("/{course_id}/status", response_model=CourseGet)
def update_course_status(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course_id: str,
    update: CourseStatusUpdate,
    db: Session = Depends(get_db)
):
    return course_service.update_course_status(db, course_id, update.status)


@course_router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course_id: str,
    db: Session = Depends(get_db)
):
    if not course_service.delete_course(db, course_id):
        raise NotFoundException(f"Course {course_id} not found")


@course_router.post("/{course_id}/image", response_model=CourseImageGet)
async def upload_course_image(
    principal: Annotated[Principal, Depends(get_admin_principal)],
    course_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    data = await file.read()
    url = await course_service.upload_course_image(db, storage, course_id, data, file.content_type)
    return CourseImageGet(id=course_id, image_url=url)
