"""Import, verification and persistence services."""

from embedding_importer.services.importer import (
    EmbeddingImporter,
    ImportSummary,
    RowOutcome,
    RowStage,
    RowStatus,
)
from embedding_importer.services.persistence import ExistenceCheck, PersistenceGateway
from embedding_importer.services.verifier import VerifyMismatch, VerifyReport, verify

__all__ = [
    "EmbeddingImporter",
    "ImportSummary",
    "RowOutcome",
    "RowStage",
    "RowStatus",
    "ExistenceCheck",
    "PersistenceGateway",
    "VerifyMismatch",
    "VerifyReport",
    "verify",
]
