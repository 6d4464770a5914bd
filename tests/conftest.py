"""Shared test fixtures for embedding importer tests."""

import csv
import io
import uuid
from collections.abc import Callable, Generator
from datetime import datetime, timezone

import numpy as np
import pytest
from loguru import logger
from sqlalchemy import Engine, create_engine, func, select
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from embedding_importer.config.settings import EMBEDDING_SIZE
from embedding_importer.etl.convert import VALUE_SEPARATOR, format_float_token
from embedding_importer.models import Base, ContentEntry, Embedding

RUN_STARTED_AT = datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)
HEADER = ["embedding", "url", "content", "type"]


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    with Session(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def add_entry(session: Session) -> Callable[[str], uuid.UUID]:
    """Factory inserting a content entry with the given URL."""

    def _add_entry(url: str) -> uuid.UUID:
        entry = ContentEntry(
            id=uuid.uuid4(),
            entry_data={"url": url, "title": f"Title of {url}"},
        )
        session.add(entry)
        session.commit()
        return entry.id

    return _add_entry


@pytest.fixture
def count_embeddings(session: Session) -> Callable[..., int]:
    """Count stored embeddings, optionally for a single entry."""

    def _count(entry_id: uuid.UUID | None = None) -> int:
        stmt = select(func.count()).select_from(Embedding)
        if entry_id is not None:
            stmt = stmt.where(Embedding.entry_id == entry_id)
        return session.execute(stmt).scalar_one()

    return _count


@pytest.fixture
def vector_values() -> Callable[..., list[float]]:
    """Deterministic float32-exact values for a vector."""

    def _values(size: int = EMBEDDING_SIZE, seed: int = 0) -> list[float]:
        rng = np.random.default_rng(seed)
        return [float(v) for v in rng.standard_normal(size).astype(np.float32)]

    return _values


@pytest.fixture
def vector_text(vector_values) -> Callable[..., str]:
    """Render a vector in the export's ``[v1, v2, ...]`` form."""

    def _text(size: int = EMBEDDING_SIZE, seed: int = 0) -> str:
        tokens = [format_float_token(v) for v in vector_values(size, seed)]
        return "[" + VALUE_SEPARATOR.join(tokens) + "]"

    return _text


@pytest.fixture
def make_csv() -> Callable[..., io.BytesIO]:
    """Build an in-memory CSV byte stream from rows."""

    def _make_csv(rows: list[list[str]], header: list[str] | None = None) -> io.BytesIO:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(HEADER if header is None else header)
        writer.writerows(rows)
        return io.BytesIO(buffer.getvalue().encode("utf-8"))

    return _make_csv


@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def run_started_at() -> datetime:
    return RUN_STARTED_AT
