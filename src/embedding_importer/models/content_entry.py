"""Content entry model, the join target for imported embeddings."""

import uuid
from typing import Any

from sqlalchemy import JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class ContentEntry(Base):
    """
    Content entry model. Owned by another application; read-only here.

    Attributes:
        id: Primary key UUID
        entry_data: JSON payload, its ``url`` key identifies the entry
    """
    __tablename__ = "content_entries"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True
    )
    entry_data: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False
    )
