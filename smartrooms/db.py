import os
import sqlite3
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from smartrooms.config import settings


def build_engine(url: str, sqlite: bool):
    """Create an engine, passing pool bounds through for server databases."""
    if sqlite:
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )


engine = build_engine(settings.DATABASE_URL, settings.is_sqlite)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, _):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def seed_roles(db: Session):
    """Insert the fixed role vocabulary if it is missing."""
    from smartrooms.models.role import Role, RoleName, ROLE_IDS

    existing = {role.name for role in db.query(Role).all()}
    for name in RoleName:
        if name not in existing:
            db.add(Role(id=ROLE_IDS[name], name=name))
    db.commit()


def init_database():
    url = make_url(settings.DATABASE_URL)
    if settings.is_sqlite and url.database not in (None, "", ":memory:"):
        directory = os.path.dirname(url.database)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)

    from smartrooms.models import booking, role, room, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_roles(db)
    finally:
        db.close()


def get_db():
    """Provide a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
