"""Data models for tabular rendering of command output."""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field


class ColumnSpec(BaseModel):
    """A named column extracted from JSON output by a path query."""

    name: str
    path: str
    modifier: Callable[[Any], str] | None = None


class Table(BaseModel):
    """Row-oriented table; rows omit headers whose column ran out of values."""

    headers: list[str] = Field(default_factory=list)
    rows: list[dict[str, str]] = Field(default_factory=list)
