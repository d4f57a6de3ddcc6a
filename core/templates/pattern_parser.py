"""Pattern parser for printf-like log templates.

Grammar:
- `%d` opens an integer hole.
- `%s` opens a token hole.
- `%%` is a literal percent sign.
- everything else is literal text.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import BinaryIO

from core.templates.models import IntHole, LiteralPart, StringHole, Template, TemplatePart
from core.templates.tape import Tape
from core.utils.errors import TemplateParseError

_ESCAPE = "%"
_HOLE_SPECS: dict[str, type[IntHole] | type[StringHole]] = {
    "d": IntHole,
    "s": StringHole,
}


def parse_template(pattern: str) -> Template:
    """Parse one template pattern into its ordered parts.

    Args:
        pattern: A single non-empty template line without its line terminator.

    Returns:
        Template whose parts start and end with a (possibly empty) LiteralPart.

    Raises:
        TemplateParseError: On an empty pattern, a trailing `%`, or an unknown spec.
    """

    if not pattern:
        raise TemplateParseError("empty template pattern", pattern=pattern)

    tape = Tape(pattern)
    parts: list[TemplatePart] = []
    literal: list[str] = []

    while not tape.exhausted:
        char = tape.peek()
        if char != _ESCAPE:
            literal.append(char)
            tape.shift(1)
            continue

        spec = tape.peek(2)[1:]
        if not spec:
            raise TemplateParseError("dangling escape: '%' is the last character", pattern=pattern)
        if spec == _ESCAPE:
            literal.append(_ESCAPE)
        elif spec in _HOLE_SPECS:
            parts.append(LiteralPart("".join(literal)))
            parts.append(_HOLE_SPECS[spec]())
            literal = []
        else:
            raise TemplateParseError(f"bad param spec %{spec}", pattern=pattern)
        tape.shift(2)

    parts.append(LiteralPart("".join(literal)))
    return Template(parts=tuple(parts), pattern=pattern)


def parse_templates(lines: Iterable[str]) -> list[Template]:
    """Parse template lines in order, skipping blank ones.

    The position of a template in the returned list is its on-disk index.
    """

    templates: list[Template] = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            templates.append(parse_template(line))
        except TemplateParseError as exc:
            raise TemplateParseError(
                str(exc), pattern=line, line_number=line_number
            ) from exc
    return templates


def load_templates(stream: BinaryIO, encoding: str = "utf-8") -> list[Template]:
    """Load the ordered template list from a byte stream."""

    return parse_templates(iter_text_lines(stream, encoding))


def iter_text_lines(stream: BinaryIO, encoding: str = "utf-8") -> Iterator[str]:
    """Yield newline-split lines decoded with surrogateescape.

    Only `\\n` terminates a line; a final unterminated line is still yielded.
    """

    for raw in stream:
        if raw.endswith(b"\n"):
            raw = raw[:-1]
        yield raw.decode(encoding, errors="surrogateescape")
