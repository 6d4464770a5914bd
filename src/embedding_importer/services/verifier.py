"""Diagnostic check that vector values survive float32 conversion unchanged."""

from dataclasses import dataclass, field
from typing import BinaryIO

from embedding_importer.config.settings import EMBEDDING_SIZE
from embedding_importer.errors import VectorParseError
from embedding_importer.etl.convert import (
    VALUE_SEPARATOR,
    format_float_token,
    new_vector_buffer,
    parse_vector,
)
from embedding_importer.etl.reader import read_records
from embedding_importer.logging_config import logger


@dataclass(frozen=True)
class VerifyMismatch:
    """A value whose re-serialized form differs from the input token."""

    line: int
    position: int
    original_value: str
    converted_value: str


@dataclass
class VerifyReport:
    lines_checked: int = 0
    mismatches: list[VerifyMismatch] = field(default_factory=list)


def verify(
    stream: BinaryIO,
    size: int = EMBEDDING_SIZE,
    max_lines: int = 10
) -> VerifyReport:
    """Parse the first ``max_lines`` vectors and compare values with their tokens.

    Every token is parsed at float32 precision and formatted back with
    ``format_float_token``; tokens that do not come back identical are
    reported. The database is not touched.

    Args:
        stream: Open binary stream of the CSV file
        size: Required vector size
        max_lines: Maximum number of data rows to inspect

    Returns:
        VerifyReport with the number of rows checked and all mismatches

    Raises:
        MalformedInputError: If the stream is not valid CSV
        VectorParseError: If a vector has the wrong size or an invalid value
    """
    report = VerifyReport()
    buffer = new_vector_buffer(size)
    records = read_records(stream)

    try:
        for record in records:
            if report.lines_checked >= max_lines:
                break

            try:
                parse_vector(record.embedding, buffer)
            except VectorParseError as e:
                e.line = record.line
                raise

            tokens = record.embedding.removeprefix("[").removesuffix("]").split(VALUE_SEPARATOR)
            for position, token in enumerate(tokens):
                converted = format_float_token(float(buffer[position]))
                if token != converted:
                    report.mismatches.append(VerifyMismatch(
                        line=record.line,
                        position=position,
                        original_value=token,
                        converted_value=converted,
                    ))

            report.lines_checked += 1
    finally:
        records.close()

    logger.info(
        f"Verified {report.lines_checked} lines, "
        f"{len(report.mismatches)} values changed by conversion"
    )
    return report
