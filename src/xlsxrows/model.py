from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CellType(str, Enum):
    SHARED = "shared"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    FLOAT = "float"
    STRING = "string"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class ReadOptions:
    # Normalised format code (lowercase, first backslash removed) -> cell type.
    # Values may be CellType members or any caller-defined tag.
    formats: dict[str, str] = field(default_factory=dict)
    include_hidden_sheets: bool = True


@dataclass(slots=True, frozen=True)
class CellTime:
    hours: int
    minutes: int
    seconds: int

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


@dataclass(slots=True, frozen=True)
class SheetInfo:
    name: str
    sheet_id: str
    ordinal: int
    state: str = "visible"
