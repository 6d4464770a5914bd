"""Exceptions raised by the import pipeline."""


class EmbeddingImportError(Exception):
    """Base class for every error that aborts an import run."""
    pass


class MalformedInputError(EmbeddingImportError):
    """Raised when the input stream cannot be read as CSV."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class VectorParseError(EmbeddingImportError):
    """Raised when an embedding field is not a valid vector."""

    # Set by callers that know which input line the field came from.
    line: int | None = None


class VectorSizeMismatchError(VectorParseError):
    """Raised when a vector has the wrong number of values."""

    def __init__(self, observed: int, expected: int):
        self.observed = observed
        self.expected = expected
        super().__init__(
            f"vector size not equal embedding values size: {observed}, "
            f"expected {expected}"
        )


class VectorValueParseError(VectorParseError):
    """Raised when a vector value is not a float32 literal."""

    def __init__(self, position: int, token: str):
        self.position = position
        self.token = token
        super().__init__(f"error parsing value {token!r}, position {position}")


class GatewayError(EmbeddingImportError):
    """Raised on an unexpected backing-store failure."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")
