"""Line pipelines between full logs and minimized logs."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any, BinaryIO

from core.codec.record_codec import RecordReader, encode_record
from core.config.models import LogminSettings
from core.orchestrator.models import DecodeReport, EncodeReport, UnmatchedLine
from core.templates.matcher import materialize, select_template
from core.templates.models import Template
from core.templates.pattern_parser import iter_text_lines
from core.utils.errors import RecordFormatError, UnmatchedLineError

logger = logging.getLogger("logmin.pipeline")


def encode_stream(
    templates: Sequence[Template],
    full_log: BinaryIO,
    min_log: BinaryIO,
    settings: LogminSettings | None = None,
) -> EncodeReport:
    """Encode each full-log line as a record tagged with its first matching template.

    Unmatched lines are dropped with a warning, or abort the run when
    settings.unmatched_mode is "error".
    """

    settings = settings or LogminSettings()
    report = EncodeReport(template_count=len(templates))
    _log_event(logging.INFO, "encode_start", templates=len(templates))

    for line_number, line in enumerate(iter_text_lines(full_log, settings.encoding), start=1):
        report.lines_read += 1
        selected = select_template(templates, line)
        if selected is None:
            _handle_unmatched(report, settings, line_number, line)
            continue

        index, match = selected
        min_log.write(encode_record(index, match, settings.encoding))
        report.records_written += 1
        report.template_hits[index] = report.template_hits.get(index, 0) + 1

    _log_event(
        logging.INFO,
        "encode_done",
        lines=report.lines_read,
        records=report.records_written,
        unmatched=report.unmatched_count,
    )
    return report


def decode_stream(
    templates: Sequence[Template],
    min_log: BinaryIO,
    full_log: BinaryIO,
    settings: LogminSettings | None = None,
) -> DecodeReport:
    """Rebuild full-log lines from minimized records, one output line per record."""

    settings = settings or LogminSettings()
    report = DecodeReport(template_count=len(templates))
    reader = RecordReader(min_log, encoding=settings.encoding)
    _log_event(logging.INFO, "decode_start", templates=len(templates))

    for index, match in reader:
        report.records_read += 1
        if index >= len(templates):
            raise RecordFormatError(
                f"template index {index} out of range ({len(templates)} templates)",
                record_number=reader.record_number,
            )
        text = materialize(match, templates[index], template_index=index)
        full_log.write(text.encode(settings.encoding, errors="surrogateescape") + b"\n")
        full_log.flush()
        report.lines_written += 1
        report.template_hits[index] = report.template_hits.get(index, 0) + 1

    _log_event(logging.INFO, "decode_done", records=report.records_read)
    return report


def _handle_unmatched(
    report: EncodeReport, settings: LogminSettings, line_number: int, line: str
) -> None:
    if settings.unmatched_mode == "error":
        raise UnmatchedLineError(
            f"could not match a template for log line {line_number}", line_number=line_number
        )

    report.unmatched_count += 1
    if len(report.unmatched) < settings.max_reported_unmatched:
        report.unmatched.append(UnmatchedLine(line_number=line_number, text=line))
    _log_event(logging.WARNING, "unmatched_line", line_number=line_number, text=line)


def _log_event(level: int, event: str, **fields: Any) -> None:
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, separators=(",", ":")))
