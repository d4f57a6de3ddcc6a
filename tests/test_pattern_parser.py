from __future__ import annotations

import io

import pytest

from core.templates.models import IntHole, LiteralPart, StringHole
from core.templates.pattern_parser import load_templates, parse_template, parse_templates
from core.utils.errors import TemplateParseError


def test_parse_literal_only_pattern() -> None:
    template = parse_template("server started")

    assert template.parts == (LiteralPart("server started"),)


def test_parse_escaped_percent_stays_literal() -> None:
    template = parse_template("100%% done")

    assert template.parts == (LiteralPart("100% done"),)


def test_parse_holes_are_wrapped_by_literals() -> None:
    template = parse_template("took %d ms for %s")

    assert template.parts == (
        LiteralPart("took "),
        IntHole(),
        LiteralPart(" ms for "),
        StringHole(),
        LiteralPart(""),
    )
    assert template.hole_count == 2


def test_parse_adjacent_holes_get_empty_literal_between() -> None:
    template = parse_template("%d%s")

    assert template.parts == (
        LiteralPart(""),
        IntHole(),
        LiteralPart(""),
        StringHole(),
        LiteralPart(""),
    )


def test_parse_dangling_escape_raises() -> None:
    with pytest.raises(TemplateParseError, match="dangling escape"):
        parse_template("bad%")


def test_parse_unknown_spec_raises() -> None:
    with pytest.raises(TemplateParseError, match="bad param spec %x"):
        parse_template("value %x")


def test_parse_empty_pattern_raises() -> None:
    with pytest.raises(TemplateParseError):
        parse_template("")


def test_parse_templates_skips_blank_lines_and_keeps_order() -> None:
    templates = parse_templates(["%s", "", "   ", "GET %s"])

    assert [template.pattern for template in templates] == ["%s", "GET %s"]


def test_parse_templates_reports_line_number() -> None:
    with pytest.raises(TemplateParseError) as exc_info:
        parse_templates(["ok %d", "", "broken %q"])

    assert exc_info.value.line_number == 3
    assert exc_info.value.pattern == "broken %q"
    assert "templates line 3" in str(exc_info.value)


def test_load_templates_from_byte_stream() -> None:
    stream = io.BytesIO(b"user %s logged in\n\nretry %d\n")

    templates = load_templates(stream)

    assert len(templates) == 2
    assert templates[1].parts == (LiteralPart("retry "), IntHole(), LiteralPart(""))


def test_load_templates_without_trailing_newline() -> None:
    templates = load_templates(io.BytesIO(b"a %d\nb %s"))

    assert [template.pattern for template in templates] == ["a %d", "b %s"]


def test_describe_lists_parts() -> None:
    assert parse_template("id=%d %s").describe() == "'id=' <int> ' ' <token> ''"
