"""Embedding model for storing imported embedding vectors."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, REAL, DateTime, Text, Uuid
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class Embedding(Base):
    """
    Embedding model representing one precomputed vector per content entry.

    Attributes:
        id: Primary key UUID, generated right before insert
        entry_id: Reference to content_entries.id
        embedding: Vector stored as real[]
        type: Provider, model and kind of content used to generate the
            embedding, e.g. "azure_ada2_title_summary"
        content: Original content used to generate the embedding
        created_at: Start time of the import run
    """
    __tablename__ = "embeddings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True
    )
    entry_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True
    )
    embedding: Mapped[list[float]] = mapped_column(
        ARRAY(REAL).with_variant(JSON(), "sqlite"),
        nullable=False
    )
    type: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False
    )

    def column_values(self) -> dict:
        """Column name to value mapping used by core INSERT statements."""
        return {
            column.key: getattr(self, column.key)
            for column in self.__table__.columns
        }
