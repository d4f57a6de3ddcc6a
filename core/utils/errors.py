"""Custom exceptions for core logic."""

from __future__ import annotations

from pathlib import Path


class LogminError(Exception):
    """Base class for all logmin failures."""


class ConfigError(LogminError):
    """Raised when a stream cannot be opened or settings are invalid."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = path


class TemplateParseError(LogminError):
    """Raised when a template pattern is malformed."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        line_number: int | None = None,
    ) -> None:
        if line_number is not None:
            message = f"{message} (templates line {line_number})"
        super().__init__(message)
        self.pattern = pattern
        self.line_number = line_number


class RecordFormatError(LogminError):
    """Raised when a minimized-log record cannot be decoded."""

    def __init__(self, message: str, *, record_number: int | None = None) -> None:
        if record_number is not None:
            message = f"{message} (record {record_number})"
        super().__init__(message)
        self.record_number = record_number


class IntegrityError(LogminError):
    """Raised when a match does not fit the template it references."""

    def __init__(
        self,
        message: str,
        *,
        template_index: int | None = None,
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        super().__init__(message)
        self.template_index = template_index
        self.expected = expected
        self.actual = actual


class UnmatchedLineError(LogminError):
    """Raised for an unmatched log line when unmatched_mode is error."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number
