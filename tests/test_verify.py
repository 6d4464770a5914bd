"""Tests for the verify diagnostic."""

import io

import pytest

from embedding_importer.errors import MalformedInputError, VectorSizeMismatchError, VectorValueParseError
from embedding_importer.services.verifier import VerifyMismatch, verify


class TestVerify:
    """Test the float32 round-trip check."""

    def test_exact_values_have_no_mismatches(self, make_csv, vector_text):
        stream = make_csv([
            [vector_text(size=8, seed=1), "u1", "c", "t"],
            [vector_text(size=8, seed=2), "u2", "c", "t"],
        ])

        report = verify(stream, size=8)

        assert report.lines_checked == 2
        assert report.mismatches == []

    def test_changed_values_are_reported(self, make_csv):
        stream = make_csv([["[0.5, 0.1, 1.0, -2]", "u1", "c", "t"]])

        report = verify(stream, size=4)

        assert report.mismatches == [
            VerifyMismatch(line=2, position=1, original_value="0.1", converted_value="0.10000000149011612"),
            VerifyMismatch(line=2, position=2, original_value="1.0", converted_value="1"),
        ]

    def test_line_cap(self, make_csv):
        stream = make_csv([[f"[{i}, 1]", f"u{i}", "c", "t"] for i in range(6)])

        report = verify(stream, size=2, max_lines=3)

        assert report.lines_checked == 3

    def test_size_mismatch_is_fatal(self, make_csv):
        stream = make_csv([
            ["[1, 2]", "u1", "c", "t"],
            ["[1, 2, 3]", "u2", "c", "t"],
        ])

        with pytest.raises(VectorSizeMismatchError) as exc_info:
            verify(stream, size=2)

        assert exc_info.value.observed == 3
        assert exc_info.value.line == 3

    def test_invalid_value_is_fatal(self, make_csv):
        stream = make_csv([["[1, x]", "u1", "c", "t"]])

        with pytest.raises(VectorValueParseError) as exc_info:
            verify(stream, size=2)

        assert exc_info.value.position == 1
        assert exc_info.value.line == 2

    def test_malformed_csv_is_fatal(self):
        with pytest.raises(MalformedInputError):
            verify(io.BytesIO(b""), size=2)
