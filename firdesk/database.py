"""Database setup for the local dashboard state (SQLAlchemy)."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from firdesk.config import get_settings

settings = get_settings()


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def make_engine(url: str = settings.state_database_url) -> Engine:
    """Create a synchronous engine for the local state database."""
    return create_engine(url, echo=settings.debug, pool_pre_ping=True)


def make_session_maker(engine: Engine) -> sessionmaker:
    """Build a session factory bound to ``engine``."""
    return sessionmaker(engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create tables if they don't exist."""
    # Import models so they register on Base.metadata
    from firdesk import models  # noqa: F401

    Base.metadata.create_all(engine)
