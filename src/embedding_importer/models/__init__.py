"""Database models for the embedding importer."""

from .content_entry import ContentEntry
from .embedding import Embedding
from .database import Base, check_connection, create_db_engine, get_session_maker

__all__ = [
    "ContentEntry",
    "Embedding",
    "Base",
    "check_connection",
    "create_db_engine",
    "get_session_maker",
]
