"""CLI I/O helpers for opening run streams."""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from core.utils.errors import ConfigError


@dataclass(frozen=True)
class RunPaths:
    """The three stream paths of one run."""

    templates: Path
    full_log: Path
    min_log: Path

    def output_path(self, decode: bool) -> Path:
        return self.full_log if decode else self.min_log

    def input_path(self, decode: bool) -> Path:
        return self.min_log if decode else self.full_log


@dataclass(frozen=True)
class RunStreams:
    """Open byte streams for one run."""

    templates: BinaryIO
    source: BinaryIO
    sink: BinaryIO


def existing_output_files(paths: RunPaths, decode: bool) -> list[Path]:
    """Return the output path if it already exists."""

    output = paths.output_path(decode)
    return [output] if output.exists() else []


def open_input_stream(path: Path) -> BinaryIO:
    """Open an input file for binary reading."""

    try:
        return path.open("rb")
    except OSError as exc:
        raise ConfigError(f"Failed to open input file {path}: {exc.strerror}", path=path) from exc


def open_output_stream(path: Path, *, overwrite: bool) -> BinaryIO:
    """Open an output file for binary writing, refusing to clobber without overwrite."""

    if path.exists() and not overwrite:
        raise ConfigError(
            f"Output file already exists: {path}. Pass --overwrite to write anyway",
            path=path,
        )
    try:
        return path.open("wb")
    except OSError as exc:
        raise ConfigError(f"Failed to open output file {path}: {exc.strerror}", path=path) from exc


def open_run_streams(
    stack: ExitStack, paths: RunPaths, *, decode: bool, overwrite: bool
) -> RunStreams:
    """Open all run streams before processing; inputs are opened before the output."""

    templates = stack.enter_context(open_input_stream(paths.templates))
    source = stack.enter_context(open_input_stream(paths.input_path(decode)))
    sink = stack.enter_context(open_output_stream(paths.output_path(decode), overwrite=overwrite))
    return RunStreams(templates=templates, source=source, sink=sink)
