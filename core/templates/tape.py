"""Read cursor over an immutable text buffer."""

from __future__ import annotations


class Tape:
    """Forward-only cursor used by the pattern parser and the matcher."""

    __slots__ = ("_text", "_pos")

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def remaining(self) -> str:
        return self._text[self._pos :]

    def peek(self, count: int = 1) -> str:
        return self._text[self._pos : self._pos + count]

    def startswith(self, prefix: str) -> bool:
        return self._text.startswith(prefix, self._pos)

    def shift(self, count: int) -> None:
        left = len(self._text) - self._pos
        if count < 0 or count > left:
            raise ValueError(f"Can't shift by {count}, only {left} chars left")
        self._pos += count

    def find(self, char: str) -> int:
        """Return the offset of char from the cursor, or -1."""

        index = self._text.find(char, self._pos)
        return -1 if index < 0 else index - self._pos

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._text)

    def __len__(self) -> int:
        return len(self._text) - self._pos
