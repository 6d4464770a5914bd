"""Database configuration and session management for SQLAlchemy."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from embedding_importer.config.settings import Settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def create_db_engine(settings: Settings) -> Engine:
    """Create the engine used for the whole run.

    Args:
        settings: Application settings

    Returns:
        Engine: Synchronous SQLAlchemy engine
    """
    return create_engine(
        settings.sqlalchemy_url,
        echo=False,
        pool_pre_ping=True,
    )


def check_connection(engine: Engine) -> None:
    """Open and close one connection so bootstrap failures surface early.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database is unreachable
    """
    with engine.connect():
        pass


def get_session_maker(engine: Engine) -> sessionmaker[Session]:
    """Build a session factory bound to ``engine``."""
    return sessionmaker(engine, class_=Session, expire_on_commit=False)
