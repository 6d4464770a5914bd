"""Command line entry point for the embedding importer."""

import argparse
import sys
from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from embedding_importer.config.settings import Settings, get_settings
from embedding_importer.errors import EmbeddingImportError
from embedding_importer.etl.reader import open_input
from embedding_importer.logging_config import configure_logging, logger
from embedding_importer.models.database import check_connection, create_db_engine, get_session_maker
from embedding_importer.services.importer import EmbeddingImporter
from embedding_importer.services.persistence import PersistenceGateway
from embedding_importer.services.verifier import verify


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create argument parser for the dump and verify commands.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="embedding-import",
        description="Import precomputed embeddings from CSV into the embeddings table",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    subparsers = parser.add_subparsers(dest="command")

    dump_parser = subparsers.add_parser(
        "dump",
        help="Import every row of the input file (default command)"
    )
    dump_parser.add_argument(
        "--file",
        type=str,
        help="CSV file to import, defaults to the INPUT_FILE setting"
    )

    verify_parser = subparsers.add_parser(
        "verify",
        help="Check that vector values survive float32 conversion"
    )
    verify_parser.add_argument(
        "--file",
        type=str,
        help="CSV file to inspect, defaults to the INPUT_FILE setting"
    )
    verify_parser.add_argument(
        "--max-lines",
        type=int,
        help="Number of data rows to inspect, defaults to the VERIFY_MAX_LINES setting"
    )

    return parser


def run_dump(settings: Settings, path: str) -> int:
    """Import ``path`` into the database.

    Returns:
        Process exit code
    """
    started_at = datetime.now(timezone.utc)
    engine = create_db_engine(settings)

    try:
        try:
            check_connection(engine)
        except SQLAlchemyError as e:
            logger.error(f"Unable to connect to database: {e}")
            return 1

        session_maker = get_session_maker(engine)
        try:
            with open_input(path) as stream, session_maker() as session:
                importer = EmbeddingImporter(
                    PersistenceGateway(session),
                    created_at=started_at,
                    fail_open_existence_check=settings.fail_open_existence_check,
                    embedding_size=settings.embedding_size,
                )
                summary = importer.run(stream)
        except OSError as e:
            logger.error(f"Unable to read input file {path}: {e}")
            return 1
    finally:
        engine.dispose()

    if not summary.succeeded:
        failure = summary.failure
        logger.error(
            f"Import aborted while {failure.stage.value} line {failure.line}: {failure.error}"
        )
        return 1

    print("processing complete")
    return 0


def run_verify(settings: Settings, path: str, max_lines: int) -> int:
    """Run the float32 round-trip diagnostic on ``path``.

    Returns:
        Process exit code
    """
    try:
        with open_input(path) as stream:
            report = verify(stream, size=settings.embedding_size, max_lines=max_lines)
    except OSError as e:
        logger.error(f"Unable to read input file {path}: {e}")
        return 1
    except EmbeddingImportError as e:
        line = getattr(e, "line", None)
        logger.error(f"Verification failed at line {line}: {e}")
        return 1

    print("lines count: ", report.lines_checked)
    for mismatch in report.mismatches:
        print(
            f"line {mismatch.line}, position {mismatch.position}: "
            f"{mismatch.original_value} -> {mismatch.converted_value}"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    command = args.command or "dump"

    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        return 1

    configure_logging(settings.log_level, settings.log_file)

    path = getattr(args, "file", None) or settings.input_file

    if command == "verify":
        max_lines = args.max_lines or settings.verify_max_lines
        return run_verify(settings, path, max_lines)

    return run_dump(settings, path)


if __name__ == "__main__":
    sys.exit(main())
