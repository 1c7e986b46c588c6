import os
import logging
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, Session

logger = logging.getLogger(__name__)

POSTGRES_URL = os.environ.get("POSTGRES_URL")
POSTGRES_USER = os.environ.get("POSTGRES_USER")
POSTGRES_PASSWORD = os.environ.get("POSTGRES_PASSWORD")
POSTGRES_DB = os.environ.get("POSTGRES_DB")

def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if url:
        return url
    return f"postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_URL}/{POSTGRES_DB}"

_database_url = get_database_url()

if _database_url.startswith("sqlite"):
    _database_options = {"connect_args": {"check_same_thread": False}}
else:
    _database_options = {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 5,
        "pool_timeout": 30,
        "pool_recycle": 300
    }

_engine = create_engine(_database_url, **_database_options)
_SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)

def get_engine():
    return _engine

def get_db() -> Generator[Session, None, None]:

    db = _SessionLocal()

    try:
        yield db
    except OperationalError:
        logger.error("Database connection failed")
        db.rollback()
        raise
    finally:
        db.close()
