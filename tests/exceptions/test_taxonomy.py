"""Tests for the pmu-events exception hierarchy."""

from pathlib import Path

import pytest

from pmu_events.exceptions import (
    ConfigurationError,
    InvalidConfigError,
    PmuEventsError,
    SourceError,
    SourceUnavailableError,
    StructureError,
    TokenizeError,
)


class TestHierarchy:
    """Every error can be caught as PmuEventsError."""

    @pytest.mark.parametrize(
        "error",
        [
            SourceUnavailableError(Path("x.json"), "missing"),
            TokenizeError("unterminated string", 3),
            StructureError("x.json", 1, "expected object", "array"),
        ],
    )
    def test_source_errors(self, error):
        assert isinstance(error, SourceError)
        assert isinstance(error, PmuEventsError)

    def test_config_errors(self):
        error = InvalidConfigError("verbosity", "loud", "bad value")
        assert isinstance(error, ConfigurationError)
        assert isinstance(error, PmuEventsError)


class TestMessages:
    """Test message and details rendering."""

    def test_base_with_details(self):
        error = PmuEventsError("Broken", details={"a": "1", "b": "2"})
        assert str(error) == "Broken (a=1, b=2)"

    def test_base_without_details(self):
        assert str(PmuEventsError("Broken")) == "Broken"

    def test_source_unavailable(self):
        error = SourceUnavailableError(Path("/tmp/x.json"), "No such file or directory")
        assert str(error) == (
            "Cannot read event file: /tmp/x.json "
            "(path=/tmp/x.json, reason=No such file or directory)"
        )
        assert error.reason == "No such file or directory"

    def test_source_unavailable_without_path(self):
        error = SourceUnavailableError(None, "no event file found")
        assert error.details["path"] == "<default>"

    def test_tokenize(self):
        error = TokenizeError("unterminated string", 3)
        assert error.line == 3
        assert str(error) == "Malformed JSON at line 3: unterminated string"

    def test_structure(self):
        error = StructureError("hsw.json", 12, "expected string value", "primitive")
        assert str(error) == "hsw.json:12: expected string value, got primitive"
        assert (error.filename, error.line, error.expected, error.got) == (
            "hsw.json", 12, "expected string value", "primitive"
        )
