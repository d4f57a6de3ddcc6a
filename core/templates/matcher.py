"""Template matching against raw log lines and text reconstruction."""

from __future__ import annotations

import re
from collections.abc import Sequence

from core.templates.models import (
    IntHole,
    LiteralPart,
    MatchedInt,
    MatchedLiteral,
    MatchedPart,
    MatchedString,
    StringHole,
    Template,
    TemplateMatch,
    TemplatePart,
)
from core.templates.tape import Tape
from core.utils.errors import IntegrityError

_LEADING_INT_RE = re.compile(r"[ \t\n\v\f\r]*[+-]?[0-9]+")
_TOKEN_DELIMITER = " "


def parse_leading_int(text: str) -> tuple[int, int] | None:
    """Parse the longest signed decimal prefix of text.

    Leading whitespace is skipped and counted as consumed.

    Returns:
        (value, consumed_chars), or None when text has no integer prefix.
    """

    match = _LEADING_INT_RE.match(text)
    if match is None:
        return None
    return int(match.group(0)), match.end()


def try_match(template: Template, line: str) -> TemplateMatch | None:
    """Match template parts left to right against line.

    Any failing part rejects the whole template; there is no backtracking.
    Input left over after the last part does not reject the match.
    """

    tape = Tape(line)
    result = TemplateMatch()
    for part in template.parts:
        matched = _match_part(part, tape)
        if matched is None:
            return None
        result.parts.append(matched)
    return result


def select_template(
    templates: Sequence[Template], line: str
) -> tuple[int, TemplateMatch] | None:
    """Return the index and match of the first template that matches line."""

    for index, template in enumerate(templates):
        match = try_match(template, line)
        if match is not None:
            return index, match
    return None


def materialize(match: TemplateMatch, template: Template, template_index: int | None = None) -> str:
    """Rebuild the original line text from match values and template literals."""

    if len(match.parts) != len(template.parts):
        raise IntegrityError(
            "match parts size and template parts size differ",
            template_index=template_index,
            expected=len(template.parts),
            actual=len(match.parts),
        )

    chunks: list[str] = []
    for position, (matched, part) in enumerate(zip(match.parts, template.parts)):
        if isinstance(matched, MatchedLiteral) and isinstance(part, LiteralPart):
            chunks.append(part.text)
        elif isinstance(matched, MatchedInt) and isinstance(part, IntHole):
            chunks.append(str(matched.value))
        elif isinstance(matched, MatchedString) and isinstance(part, StringHole):
            chunks.append(matched.value)
        else:
            raise IntegrityError(
                f"part {position} kind mismatch: {type(matched).__name__} "
                f"against {type(part).__name__}",
                template_index=template_index,
            )
    return "".join(chunks)


def _match_part(part: TemplatePart, tape: Tape) -> MatchedPart | None:
    if isinstance(part, LiteralPart):
        if not tape.startswith(part.text):
            return None
        tape.shift(len(part.text))
        return MatchedLiteral()

    if isinstance(part, IntHole):
        parsed = parse_leading_int(tape.remaining())
        if parsed is None:
            return None
        value, consumed = parsed
        tape.shift(consumed)
        return MatchedInt(value)

    if isinstance(part, StringHole):
        end = tape.find(_TOKEN_DELIMITER)
        if end < 0:
            end = len(tape)
        if end == 0:
            return None
        token = tape.peek(end)
        tape.shift(end)
        return MatchedString(token)

    raise TypeError(f"Unknown template part: {part!r}")
