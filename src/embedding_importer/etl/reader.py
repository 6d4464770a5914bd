"""CSV reader for embedding export files."""

import csv
import io
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

from embedding_importer.errors import MalformedInputError
from embedding_importer.logging_config import logger

FIELD_NAMES = ("embedding", "url", "content", "type")


@dataclass(frozen=True)
class RawRecord:
    """One data row of the input file, addressed by field name.

    Attributes:
        embedding: Vector text, e.g. "[0.1, -0.2, ...]"
        url: URL of the content entry the vector belongs to
        content: Original content used to produce the vector
        type: Provenance label of the vector
        line: Line number of the row in the input file
    """

    embedding: str
    url: str
    content: str
    type: str
    line: int


@contextmanager
def open_input(path: str | Path) -> Iterator[BinaryIO]:
    """Open the input file once and close it on every exit path.

    Args:
        path: Path to the CSV file

    Yields:
        Binary stream of the file

    Raises:
        OSError: If the file cannot be opened
    """
    stream = open(path, "rb")
    try:
        yield stream
    finally:
        try:
            stream.close()
        except OSError as e:
            logger.warning(f"Error closing input file {path}: {e}")


def _field_positions(header: list[str]) -> dict[str, int]:
    """Map field names to column positions.

    The header decides the positions when it names every field; any other
    header falls back to the export's fixed column order.
    """
    normalized = [name.strip().lower() for name in header]
    if all(name in normalized for name in FIELD_NAMES):
        return {name: normalized.index(name) for name in FIELD_NAMES}
    return {name: position for position, name in enumerate(FIELD_NAMES)}


def read_records(stream: BinaryIO) -> Iterator[RawRecord]:
    """Lazily read data records from a UTF-8 CSV byte stream.

    The first record is consumed as the header. Every following record must
    have the same number of columns as the header.

    Args:
        stream: Open binary stream positioned at the start of the file

    Yields:
        RawRecord for every data row, in file order

    Raises:
        MalformedInputError: If the stream is not valid CSV
    """
    text = io.TextIOWrapper(stream, encoding="utf-8", newline="")
    reader = csv.reader(text, strict=True)

    try:
        rows = _rows(reader)

        header = next(rows, None)
        if header is None:
            raise MalformedInputError("unable to parse file as CSV: missing header", 1)
        if len(header) < len(FIELD_NAMES):
            raise MalformedInputError(
                f"unable to parse file as CSV: header has {len(header)} columns, "
                f"expected at least {len(FIELD_NAMES)}",
                reader.line_num
            )

        positions = _field_positions(header)
        logger.debug(f"CSV header {header}, field positions {positions}")

        for row in rows:
            if len(row) != len(header):
                raise MalformedInputError(
                    f"unable to parse file as CSV: wrong number of fields "
                    f"{len(row)}, expected {len(header)}",
                    reader.line_num
                )
            yield RawRecord(
                embedding=row[positions["embedding"]],
                url=row[positions["url"]],
                content=row[positions["content"]],
                type=row[positions["type"]],
                line=reader.line_num,
            )
    finally:
        # Leave the caller's stream open; open_input owns closing it.
        if not stream.closed:
            text.detach()


def _rows(reader) -> Iterator[list[str]]:
    """Yield non-empty rows, translating reader failures."""
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise MalformedInputError(f"unable to parse file as CSV: {e}", reader.line_num) from e
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"input is not valid UTF-8: {e}", reader.line_num + 1) from e

        if row:
            yield row
