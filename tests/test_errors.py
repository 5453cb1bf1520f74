"""Tests for error classification and configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from dotenv import set_key

from mdoutline.config import Settings, load_settings
from mdoutline.errors import (
    CacheError,
    DocumentTooLargeError,
    ErrorKind,
    ExtractionTimeoutError,
    InvalidHeaderError,
    ParsingError,
    classify_error,
)


def test_engine_errors_carry_their_kind() -> None:
    """Engine exceptions classify by type."""
    assert classify_error(ExtractionTimeoutError("x")) is ErrorKind.TIMEOUT
    assert classify_error(DocumentTooLargeError(10, 5)) is ErrorKind.DOCUMENT_TOO_LARGE
    assert classify_error(InvalidHeaderError("x")) is ErrorKind.INVALID_HEADER
    assert classify_error(ParsingError("x")) is ErrorKind.PARSING_FAILED
    assert classify_error(CacheError("x")) is ErrorKind.CACHE_ERROR


def test_foreign_errors_classify_by_type_then_message() -> None:
    """Foreign exceptions fall back to message matching, then Unknown."""
    assert classify_error(TimeoutError()) is ErrorKind.TIMEOUT
    assert classify_error(MemoryError()) is ErrorKind.DOCUMENT_TOO_LARGE
    assert classify_error(RuntimeError("Request Timed Out")) is ErrorKind.TIMEOUT
    assert classify_error(ValueError("line 4 is not a header")) is ErrorKind.INVALID_HEADER
    assert classify_error(ValueError("could not parse table")) is ErrorKind.PARSING_FAILED
    assert classify_error(RuntimeError("cache poisoned")) is ErrorKind.CACHE_ERROR
    assert classify_error(KeyError("x")) is ErrorKind.UNKNOWN


def test_document_too_large_message() -> None:
    """The size error reports both the size and the limit."""
    error = DocumentTooLargeError(2048, 1024, uri="big.md")
    assert str(error) == "Document too large: 2048 bytes (max: 1024)"
    assert error.uri == "big.md"


def test_load_settings_from_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """MDOUTLINE_ENV_FILE points settings at a dotenv file."""
    env_path = tmp_path / "mdoutline.env"
    env_path.touch()
    set_key(str(env_path), "MDOUTLINE_SECTION_CACHE_SIZE", "7")
    set_key(str(env_path), "MDOUTLINE_VERBOSE_LOGGING", "true")
    monkeypatch.setenv("MDOUTLINE_ENV_FILE", str(env_path))

    settings = load_settings()
    assert settings.section_cache_size == 7
    assert settings.verbose_logging is True
    assert settings.max_document_bytes == 1024 * 1024


def test_settings_expose_only_used_fields() -> None:
    """Settings carry no deployment environment switch."""
    assert "app_env" not in Settings.model_fields
    assert "app_env" not in Settings(_env_file=None).model_dump()
