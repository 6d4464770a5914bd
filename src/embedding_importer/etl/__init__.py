"""CSV reading and record conversion."""

from embedding_importer.etl.convert import (
    VALUE_SEPARATOR,
    convert_record,
    format_float_token,
    new_vector_buffer,
    parse_float32,
    parse_vector,
)
from embedding_importer.etl.reader import FIELD_NAMES, RawRecord, open_input, read_records

__all__ = [
    "FIELD_NAMES",
    "RawRecord",
    "open_input",
    "read_records",
    "VALUE_SEPARATOR",
    "convert_record",
    "format_float_token",
    "new_vector_buffer",
    "parse_float32",
    "parse_vector",
]
