"""Runtime settings for encode/decode runs."""

from __future__ import annotations

import codecs
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

UnmatchedMode = Literal["warn", "error"]


class LogminSettings(BaseModel):
    """Settings loaded from YAML.

    Rules:
    - encoding must name a text codec that writes "\\n" as the byte 0x0a.
    - unmatched_mode=warn drops unmatched lines; error aborts the run.
    """

    model_config = ConfigDict(extra="forbid")

    encoding: str = "utf-8"
    unmatched_mode: UnmatchedMode = "warn"
    max_reported_unmatched: int = Field(default=20, ge=0)

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            info = codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {value}") from exc
        if not getattr(info, "_is_text_encoding", True):
            raise ValueError(f"not a text encoding: {value}")
        if "\n".encode(value) != b"\n":
            raise ValueError(f"encoding must write newline as a single 0x0a byte: {value}")
        return value
