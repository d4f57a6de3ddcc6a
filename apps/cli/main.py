"""Typer CLI entrypoint for logmin."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Annotated, Literal, NoReturn, cast

import typer

from apps.cli.format_human import render_run_summary
from apps.cli.io import RunPaths, existing_output_files, open_input_stream, open_run_streams
from core.config.settings_loader import load_settings
from core.orchestrator.models import DecodeReport, EncodeReport
from core.orchestrator.pipeline import decode_stream, encode_stream
from core.templates.pattern_parser import load_templates
from core.utils.errors import (
    ConfigError,
    IntegrityError,
    RecordFormatError,
    TemplateParseError,
    UnmatchedLineError,
)

app = typer.Typer(
    help="Log minimizer: factor log lines into templates and values", rich_markup_mode=None
)
logger = logging.getLogger("logmin.cli")
ReportMode = Literal["human", "json", "none"]
_HANDLER_NAME = "logmin.cli.stderr"

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_TEMPLATE = 2
EXIT_RECORD_FORMAT = 3
EXIT_INTEGRITY = 4
EXIT_UNMATCHED = 5


@app.callback()
def cli_callback() -> None:
    """CLI root callback to keep `logmin run` as explicit command form."""


@app.command("run")
def run_command(
    templates_path: Annotated[
        Path, typer.Option("--templates-path", help="Template definitions, one per line.")
    ],
    full_log_path: Annotated[
        Path, typer.Option("--full-log-path", help="Full log (input when encoding).")
    ],
    min_log_path: Annotated[
        Path, typer.Option("--min-log-path", help="Minimized log (input when decoding).")
    ],
    decode: Annotated[
        bool, typer.Option("--decode", help="Rebuild the full log from the minimized log.")
    ] = False,
    overwrite: Annotated[
        bool,
        typer.Option(
            "--overwrite", "--force", "-f", help="Overwrite the output file when it already exists."
        ),
    ] = False,
    config: Annotated[Path | None, typer.Option("--config", help="Settings YAML file.")] = None,
    report: Annotated[str, typer.Option("--report", help="human, json or none.")] = "human",
    log_level: Annotated[str, typer.Option("--log-level")] = "WARNING",
) -> None:
    """Encode a full log into a minimized log, or decode it back with --decode."""

    normalized_report = report.lower().strip()
    if normalized_report not in {"human", "json", "none"}:
        typer.echo("ERROR: --report must be one of: human, json, none.", err=True)
        raise typer.Exit(code=EXIT_CONFIG)
    report_mode = cast(ReportMode, normalized_report)
    _configure_logging(log_level)

    paths = RunPaths(templates=templates_path, full_log=full_log_path, min_log=min_log_path)
    existing = existing_output_files(paths, decode)
    if existing and overwrite:
        names = ", ".join(path.name for path in existing)
        typer.echo(f"INFO: overwriting existing outputs: {names}", err=True)

    run_report: EncodeReport | DecodeReport
    try:
        settings = load_settings(config)
        with ExitStack() as stack:
            streams = open_run_streams(stack, paths, decode=decode, overwrite=overwrite)
            templates = load_templates(streams.templates, settings.encoding)
            if decode:
                run_report = decode_stream(templates, streams.source, streams.sink, settings)
            else:
                run_report = encode_stream(templates, streams.source, streams.sink, settings)
    except ConfigError as exc:
        _fail(EXIT_CONFIG, exc)
    except TemplateParseError as exc:
        _fail(EXIT_TEMPLATE, exc)
    except RecordFormatError as exc:
        _fail(EXIT_RECORD_FORMAT, exc)
    except IntegrityError as exc:
        _fail(EXIT_INTEGRITY, exc)
    except UnmatchedLineError as exc:
        _fail(EXIT_UNMATCHED, exc)

    if isinstance(run_report, EncodeReport) and run_report.unmatched_count:
        typer.echo(
            "WARNING(unmatched): log lines dropped "
            f"(count={run_report.unmatched_count}, mode={settings.unmatched_mode}).",
            err=True,
        )

    if report_mode == "human":
        typer.echo(render_run_summary(run_report), err=True)
    elif report_mode == "json":
        typer.echo(run_report.model_dump_json(), err=True)

    raise typer.Exit(code=EXIT_OK)


@app.command("check-templates")
def check_templates_command(
    templates_path: Annotated[
        Path, typer.Option("--templates-path", help="Template definitions, one per line.")
    ],
    config: Annotated[Path | None, typer.Option("--config", help="Settings YAML file.")] = None,
) -> None:
    """Parse a template file and print each template's index and part layout."""

    try:
        settings = load_settings(config)
        with open_input_stream(templates_path) as stream:
            templates = load_templates(stream, settings.encoding)
    except ConfigError as exc:
        _fail(EXIT_CONFIG, exc)
    except TemplateParseError as exc:
        _fail(EXIT_TEMPLATE, exc)

    for index, template in enumerate(templates):
        typer.echo(f"{index}: {template.describe()} (holes={template.hole_count})")
    typer.echo(f"INFO: {len(templates)} templates parsed", err=True)


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper().strip())
    if not isinstance(level, int):
        level = logging.WARNING

    package_logger = logging.getLogger("logmin")
    for handler in list(package_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            package_logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


def _fail(code: int, exc: Exception) -> NoReturn:
    logger.debug("run failed", exc_info=exc)
    typer.echo(f"ERROR: {type(exc).__name__}: {exc}", err=True)
    raise typer.Exit(code=code)


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
