from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Iterator

from .model import ReadOptions, SheetInfo
from .parser.ooxml import Workbook


def open_workbook(source: str | Path | IO[bytes], *, options: ReadOptions | None = None) -> Workbook:
    return Workbook(source, options or ReadOptions())


def list_sheets(source: str | Path | IO[bytes], *, options: ReadOptions | None = None) -> list[SheetInfo]:
    with open_workbook(source, options=options) as workbook:
        return [sheet.info for sheet in workbook.sheets]


def read_rows(
    source: str | Path | IO[bytes],
    sheet: str | None = None,
    *,
    options: ReadOptions | None = None,
) -> Iterator[list[Any]]:
    """Stream the rows of one sheet, the first listed sheet by default."""
    with open_workbook(source, options=options) as workbook:
        if sheet is None:
            sheets = workbook.sheets
            if not sheets:
                return
            target = sheets[0]
        else:
            target = workbook.sheet(sheet)
        yield from target.rows()
