"""Data models for template patterns and per-line matches."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LiteralPart:
    """Fixed text that must appear verbatim in the log line."""

    text: str = ""


@dataclass(frozen=True)
class IntHole:
    """Signed decimal integer hole (`%d`)."""


@dataclass(frozen=True)
class StringHole:
    """Token hole (`%s`): a maximal run of non-space characters."""


TemplatePart = LiteralPart | IntHole | StringHole


@dataclass(frozen=True)
class Template:
    """One admissible log-line shape.

    Rules:
    - parts[0] is always a LiteralPart (possibly empty).
    - holes are always separated by a LiteralPart, so literals never abut.
    """

    parts: tuple[TemplatePart, ...]
    pattern: str = ""

    @property
    def hole_count(self) -> int:
        return sum(1 for part in self.parts if not isinstance(part, LiteralPart))

    def describe(self) -> str:
        chunks: list[str] = []
        for part in self.parts:
            if isinstance(part, LiteralPart):
                chunks.append(repr(part.text))
            elif isinstance(part, IntHole):
                chunks.append("<int>")
            elif isinstance(part, StringHole):
                chunks.append("<token>")
            else:
                raise TypeError(f"Unknown template part: {part!r}")
        return " ".join(chunks)


@dataclass(frozen=True)
class MatchedLiteral:
    """Marker for a literal part; its text lives in the template."""


@dataclass(frozen=True)
class MatchedInt:
    value: int


@dataclass(frozen=True)
class MatchedString:
    value: str


MatchedPart = MatchedLiteral | MatchedInt | MatchedString


@dataclass
class TemplateMatch:
    """Values taken by a template's parts for one log line, in part order."""

    parts: list[MatchedPart] = field(default_factory=list)
