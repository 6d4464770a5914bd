"""Conversion of CSV records into embedding rows."""

import math
import re
from datetime import datetime
from decimal import Decimal

import numpy as np

from embedding_importer.config.settings import EMBEDDING_SIZE
from embedding_importer.errors import VectorSizeMismatchError, VectorValueParseError
from embedding_importer.etl.reader import RawRecord
from embedding_importer.models.embedding import Embedding

VALUE_SEPARATOR = ", "

_FLOAT_LITERAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# Halfway between the largest float32 and 2**128; anything at or above it
# rounds to infinity.
_FLOAT32_OVERFLOW = 2.0**128 - 2.0**103

# Decimal exponents outside [-4, 6) are written in exponent form.
_MIN_PLAIN_EXPONENT = -4
_MAX_PLAIN_EXPONENT = 6


def new_vector_buffer(size: int = EMBEDDING_SIZE) -> np.ndarray:
    """Allocate a float32 buffer for one vector."""
    return np.zeros(size, dtype=np.float32)


def parse_float32(token: str, position: int) -> float:
    """Parse one vector value at 32-bit precision.

    Args:
        token: Decimal floating-point literal
        position: Index of the token in the vector, used for error reporting

    Returns:
        The value rounded to the nearest float32, widened to a Python float

    Raises:
        VectorValueParseError: If the token is not a finite float32 literal
    """
    if not _FLOAT_LITERAL.fullmatch(token):
        raise VectorValueParseError(position, token)

    value = float(token)
    if abs(value) >= _FLOAT32_OVERFLOW:
        raise VectorValueParseError(position, token)

    return float(np.float32(value))


def parse_vector(field: str, buffer: np.ndarray) -> np.ndarray:
    """Parse the text form of a vector into ``buffer``.

    The field looks like ``[v1, v2, ..., vN]``. One leading ``[`` and one
    trailing ``]`` are removed, the rest is split on ``", "`` and every token
    is parsed as a float32. The buffer length is the required vector size.

    Args:
        field: Raw embedding field
        buffer: float32 array receiving the values in order

    Returns:
        The filled buffer

    Raises:
        VectorSizeMismatchError: If the number of tokens differs from the buffer size
        VectorValueParseError: If a token is not a valid number
    """
    if field.startswith("["):
        field = field[1:]
    if field.endswith("]"):
        field = field[:-1]

    tokens = field.split(VALUE_SEPARATOR)
    if len(tokens) != len(buffer):
        raise VectorSizeMismatchError(len(tokens), len(buffer))

    for position, token in enumerate(tokens):
        buffer[position] = parse_float32(token, position)

    return buffer


def format_float_token(value: float) -> str:
    """Format a float with the shortest digits that round-trip.

    Uses the ``%g`` layout: plain notation for decimal exponents in
    [-4, 6), exponent notation with at least two exponent digits otherwise.
    ``0.5`` gives ``"0.5"``, ``1e-05`` gives ``"1e-05"``, ``1500000.0``
    gives ``"1.5e+06"``.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0.0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(digit) for digit in digit_tuple)
    prefix = "-" if sign else ""

    # Position of the decimal point relative to the first digit.
    point = len(digits) + exponent
    decimal_exponent = point - 1

    if decimal_exponent < _MIN_PLAIN_EXPONENT or decimal_exponent >= _MAX_PLAIN_EXPONENT:
        mantissa = digits[0]
        if len(digits) > 1:
            mantissa += "." + digits[1:]
        exp_sign = "-" if decimal_exponent < 0 else "+"
        return f"{prefix}{mantissa}e{exp_sign}{abs(decimal_exponent):02d}"

    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{prefix}{digits}{'0' * (point - len(digits))}"
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def convert_record(
    record: RawRecord,
    created_at: datetime,
    size: int = EMBEDDING_SIZE
) -> Embedding:
    """Build an unsaved embedding row from a CSV record.

    ``id`` and ``entry_id`` are left unset; the importer fills them once the
    entry has been resolved.

    Args:
        record: Parsed CSV record
        created_at: Start time of the import run
        size: Required vector size

    Returns:
        Transient Embedding instance

    Raises:
        VectorParseError: If the embedding field is not a valid vector
    """
    buffer = parse_vector(record.embedding, new_vector_buffer(size))

    return Embedding(
        embedding=buffer.tolist(),
        type=record.type,
        content=record.content,
        created_at=created_at,
    )
