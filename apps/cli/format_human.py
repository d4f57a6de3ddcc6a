"""Human-readable run summary rendering for CLI output."""

from __future__ import annotations

from core.orchestrator.models import DecodeReport, EncodeReport

_TOP_TEMPLATES = 5
_SAMPLE_WIDTH = 80


def render_run_summary(report: EncodeReport | DecodeReport) -> str:
    """Render a short human-readable summary of one run."""

    lines: list[str] = []
    lines.append("run_summary:")
    lines.append(f"mode={report.mode} templates={report.template_count}")

    if isinstance(report, EncodeReport):
        lines.append(
            f"lines_read={report.lines_read} records_written={report.records_written} "
            f"unmatched={report.unmatched_count}"
        )
    else:
        lines.append(f"records_read={report.records_read} lines_written={report.lines_written}")

    lines.append(f"top_templates: {_top_templates(report.template_hits)}")
    lines.append(f"unused_templates: {_unused_count(report)}")

    if isinstance(report, EncodeReport):
        if report.unmatched:
            for sample in report.unmatched:
                lines.append(f"dropped: line {sample.line_number}: {_shorten(sample.text)}")
            hidden = report.unmatched_count - len(report.unmatched)
            if hidden > 0:
                lines.append(f"dropped: ... {hidden} more")
            lines.append("suggestion: add a catch-all template such as '%s' to keep every line")
        else:
            lines.append("suggestion: none")
    return "\n".join(lines)


def _top_templates(hits: dict[int, int]) -> str:
    if not hits:
        return "none"
    top_items = sorted(hits.items(), key=lambda item: (-item[1], item[0]))[:_TOP_TEMPLATES]
    return ", ".join(f"#{index}={count}" for index, count in top_items)


def _unused_count(report: EncodeReport | DecodeReport) -> int:
    return sum(1 for index in range(report.template_count) if index not in report.template_hits)


def _shorten(text: str) -> str:
    printable = text.encode("unicode_escape", errors="backslashreplace").decode("ascii")
    if len(printable) <= _SAMPLE_WIDTH:
        return printable
    return printable[: _SAMPLE_WIDTH - 3] + "..."
