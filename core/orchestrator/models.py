"""Run report models for the encode and decode pipelines."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UnmatchedLine(BaseModel):
    """A full-log line that no template matched and that was dropped."""

    model_config = ConfigDict(extra="forbid")

    line_number: int
    text: str


class EncodeReport(BaseModel):
    """Encode run summary.

    Rules:
    - lines_read == records_written + unmatched_count
    - unmatched holds at most max_reported_unmatched samples
    """

    model_config = ConfigDict(extra="forbid")

    mode: Literal["encode"] = "encode"
    template_count: int
    lines_read: int = 0
    records_written: int = 0
    unmatched_count: int = 0
    template_hits: dict[int, int] = Field(default_factory=dict)
    unmatched: list[UnmatchedLine] = Field(default_factory=list)


class DecodeReport(BaseModel):
    """Decode run summary."""

    model_config = ConfigDict(extra="forbid")

    mode: Literal["decode"] = "decode"
    template_count: int
    records_read: int = 0
    lines_written: int = 0
    template_hits: dict[int, int] = Field(default_factory=dict)
