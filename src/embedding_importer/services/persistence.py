"""Persistence gateway used by the import pipeline."""

import uuid
from enum import Enum

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from embedding_importer.errors import GatewayError
from embedding_importer.logging_config import logger
from embedding_importer.models.content_entry import ContentEntry
from embedding_importer.models.embedding import Embedding

_INSERT_BUILDERS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ExistenceCheck(str, Enum):
    """Result of looking up an existing embedding."""
    EXISTS = "exists"
    ABSENT = "absent"
    LOOKUP_FAILED = "lookup_failed"


class PersistenceGateway:
    """Lookups and inserts against the content and embedding tables."""

    def __init__(self, session: Session):
        """Initialize the gateway.

        Args:
            session: Database session used for the whole run
        """
        self.session = session

    def resolve_entry_by_url(self, url: str) -> uuid.UUID | None:
        """Find the content entry whose ``entry_data.url`` equals ``url``.

        Args:
            url: Exact URL to match

        Returns:
            The entry id, or None if no entry has this URL

        Raises:
            GatewayError: If the lookup fails
        """
        stmt = (
            select(ContentEntry.id)
            .where(ContentEntry.entry_data["url"].as_string() == url)
            .limit(1)
        )
        try:
            return self.session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise GatewayError("find entry", str(e)) from e

    def embedding_exists(self, entry_id: uuid.UUID) -> ExistenceCheck:
        """Check whether an embedding already references ``entry_id``.

        A failed query is reported as LOOKUP_FAILED rather than raised; the
        caller decides how to treat it.

        Args:
            entry_id: Content entry id

        Returns:
            ExistenceCheck outcome
        """
        stmt = select(Embedding.id).where(Embedding.entry_id == entry_id).limit(1)
        try:
            found = self.session.execute(stmt).first()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.warning(f"Embedding lookup failed for entry {entry_id}: {e}")
            return ExistenceCheck.LOOKUP_FAILED

        return ExistenceCheck.EXISTS if found is not None else ExistenceCheck.ABSENT

    def insert(self, record: Embedding) -> bool:
        """Insert an embedding, ignoring a primary key conflict.

        The row is committed immediately.

        Args:
            record: Embedding with id and entry_id set

        Returns:
            True if a row was written, False if the id already existed

        Raises:
            GatewayError: On any other database failure
        """
        try:
            dialect = self.session.get_bind().dialect.name
            builder = _INSERT_BUILDERS.get(dialect)
            if builder is None:
                raise GatewayError("record write", f"unsupported database dialect: {dialect}")

            stmt = (
                builder(Embedding)
                .values(**record.column_values())
                .on_conflict_do_nothing(index_elements=["id"])
            )
            result = self.session.execute(stmt)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise GatewayError("record write", str(e)) from e

        if result.rowcount == 0:
            logger.debug(f"Embedding {record.id} already stored, insert ignored")
            return False
        return True
