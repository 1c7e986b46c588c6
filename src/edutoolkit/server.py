import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.auth import auth_router
from .api.courses import course_router
from .api.me import me_router
from .api.modules import module_router
from .api.permissions import permission_router
from .api.resources import resource_router
from .api.users import user_router
from .database import get_engine
from .model import Base
from .repositories.base import DuplicateError, NotFoundError, RepositoryError
from .settings import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DEBUG_MODE != "production":
        # Production schemas are managed by alembic
        Base.metadata.create_all(bind=get_engine())
    
    yield

app = FastAPI(title="EduToolkit", lifespan=lifespan)

origins = [
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(DuplicateError)
async def duplicate_handler(request: Request, exc: DuplicateError):
    return JSONResponse(status_code=400, content={"detail": f"{exc.entity_type} already exists"})


@app.exception_handler(RepositoryError)
async def repository_error_handler(request: Request, exc: RepositoryError):
    logger.error(f"Store failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(
    course_router,
    prefix="/courses",
    tags=["courses"]
)

app.include_router(
    module_router,
    tags=["modules"]
)

app.include_router(
    resource_router,
    tags=["resources"]
)

app.include_router(
    permission_router,
    tags=["permissions"]
)

app.include_router(
    me_router,
    prefix="/me",
    tags=["me"]
)

app.include_router(
    user_router,
    prefix="/users",
    tags=["users"]
)

app.include_router(
    auth_router,
    prefix="/api/auth",
    tags=["auth"]
)

@app.head("/", status_code=204)
def get_status_head():
    return
