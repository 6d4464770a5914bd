"""Import pipeline: resolve, check, convert and insert one row at a time."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import BinaryIO

from embedding_importer.config.settings import EMBEDDING_SIZE
from embedding_importer.errors import EmbeddingImportError, GatewayError, MalformedInputError
from embedding_importer.etl.convert import convert_record
from embedding_importer.etl.reader import RawRecord, read_records
from embedding_importer.logging_config import logger
from embedding_importer.services.persistence import ExistenceCheck, PersistenceGateway


class RowStage(str, Enum):
    """Pipeline stage a row was in when it finished."""
    READING = "reading"
    RESOLVING = "resolving"
    CHECKING = "checking"
    CONVERTING = "converting"
    INSERTING = "inserting"


class RowStatus(str, Enum):
    """Enumeration of per-row outcomes."""
    INSERTED = "inserted"
    DUPLICATE_ID = "duplicate_id"
    SKIPPED_NOT_FOUND = "skipped_not_found"
    SKIPPED_EXISTS = "skipped_exists"
    FATAL = "fatal"


@dataclass
class RowOutcome:
    """Outcome of processing one row.

    Attributes:
        status: What happened to the row
        stage: Stage the row ended in
        line: Input line number, if known
        url: URL of the row, if known
        entry_id: Resolved entry id, if any
        embedding_id: Id generated for the inserted row, if any
        error: Error that made the row fatal
    """

    status: RowStatus
    stage: RowStage
    line: int | None = None
    url: str | None = None
    entry_id: uuid.UUID | None = None
    embedding_id: uuid.UUID | None = None
    error: EmbeddingImportError | None = None

    @property
    def is_fatal(self) -> bool:
        return self.status is RowStatus.FATAL


@dataclass
class ImportSummary:
    """Counters for one import run and the fatal outcome that ended it."""

    rows_read: int = 0
    inserted: int = 0
    duplicate_ids: int = 0
    skipped_not_found: int = 0
    skipped_existing: int = 0
    failure: RowOutcome | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    def add(self, outcome: RowOutcome) -> None:
        if outcome.status is RowStatus.INSERTED:
            self.inserted += 1
        elif outcome.status is RowStatus.DUPLICATE_ID:
            self.duplicate_ids += 1
        elif outcome.status is RowStatus.SKIPPED_NOT_FOUND:
            self.skipped_not_found += 1
        elif outcome.status is RowStatus.SKIPPED_EXISTS:
            self.skipped_existing += 1
        else:
            self.failure = outcome


class EmbeddingImporter:
    """Loads precomputed embeddings from CSV into the embeddings table."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        created_at: datetime,
        fail_open_existence_check: bool = True,
        embedding_size: int = EMBEDDING_SIZE
    ):
        """Initialize the importer.

        Args:
            gateway: Persistence gateway bound to the run's session
            created_at: Start time of the run, stored on every row
            fail_open_existence_check: Treat a failed embedding lookup as
                absence instead of aborting the run
            embedding_size: Required vector size
        """
        self.gateway = gateway
        self.created_at = created_at
        self.fail_open_existence_check = fail_open_existence_check
        self.embedding_size = embedding_size

    def process_row(self, record: RawRecord) -> RowOutcome:
        """Run one record through resolve, check, convert and insert.

        Args:
            record: CSV record

        Returns:
            RowOutcome describing the result; fatal errors are returned,
            not raised
        """
        outcome = RowOutcome(
            status=RowStatus.FATAL,
            stage=RowStage.RESOLVING,
            line=record.line,
            url=record.url,
        )

        try:
            entry_id = self.gateway.resolve_entry_by_url(record.url)
            if entry_id is None:
                logger.info(f"Record url not found, skipping line {record.line}: {record.url}")
                outcome.status = RowStatus.SKIPPED_NOT_FOUND
                return outcome
            outcome.entry_id = entry_id

            outcome.stage = RowStage.CHECKING
            check = self.gateway.embedding_exists(entry_id)
            if check is ExistenceCheck.EXISTS:
                logger.info(f"Embedding exists for entry {entry_id}, skipping line {record.line}")
                outcome.status = RowStatus.SKIPPED_EXISTS
                return outcome
            if check is ExistenceCheck.LOOKUP_FAILED:
                if not self.fail_open_existence_check:
                    raise GatewayError(
                        "embedding lookup",
                        f"could not check existing embedding for entry {entry_id}"
                    )
                logger.warning(
                    f"Could not check existing embedding for entry {entry_id}, "
                    f"treating it as absent (line {record.line})"
                )

            outcome.stage = RowStage.CONVERTING
            embedding = convert_record(record, self.created_at, self.embedding_size)
            embedding.entry_id = entry_id
            embedding.id = uuid.uuid4()
            outcome.embedding_id = embedding.id

            outcome.stage = RowStage.INSERTING
            if self.gateway.insert(embedding):
                outcome.status = RowStatus.INSERTED
            else:
                outcome.status = RowStatus.DUPLICATE_ID
            return outcome

        except EmbeddingImportError as e:
            outcome.status = RowStatus.FATAL
            outcome.error = e
            logger.error(f"{outcome.stage.value} failed at line {record.line}: {e}")
            return outcome

    def run(self, stream: BinaryIO) -> ImportSummary:
        """Import every record of a CSV stream, stopping at the first fatal error.

        Args:
            stream: Open binary stream of the CSV file

        Returns:
            ImportSummary of the run
        """
        summary = ImportSummary()
        records = read_records(stream)

        try:
            while True:
                try:
                    record = next(records, None)
                except MalformedInputError as e:
                    logger.error(f"reading failed: {e}")
                    summary.failure = RowOutcome(
                        status=RowStatus.FATAL,
                        stage=RowStage.READING,
                        line=e.line,
                        error=e,
                    )
                    break

                if record is None:
                    break

                summary.rows_read += 1
                outcome = self.process_row(record)
                summary.add(outcome)
                if outcome.is_fatal:
                    break
        finally:
            records.close()

        logger.info(
            f"Import finished: {summary.rows_read} rows read, "
            f"{summary.inserted} inserted, "
            f"{summary.skipped_not_found} without entry, "
            f"{summary.skipped_existing} already embedded, "
            f"{summary.duplicate_ids} duplicate ids"
        )
        return summary
