from __future__ import annotations

import logging
import math
import zlib
from datetime import date, datetime, timedelta
from typing import IO, TYPE_CHECKING, Any, Iterator
from xml.etree import ElementTree as ET
from zipfile import BadZipFile

from ..errors import WorkbookFormatError
from ..model import CellTime, CellType, SheetInfo
from .parts import sheet_path
from .tokens import EndElement, StartElement, Token, iter_tokens
from .utils import column_letters, column_names, dimension_row_count, letters_to_index

if TYPE_CHECKING:
    from .ooxml import Workbook

logger = logging.getLogger(__name__)

OOXML_EPOCH = date(1899, 12, 30)
OOXML_EPOCH_DATETIME = datetime(1899, 12, 30)

_UNSET = object()


def parse_time(value: float) -> CellTime:
    hours = math.floor(value * 24)
    minutes = math.floor(value * 24 * 60) % 60
    seconds = math.floor(value * 24 * 60 * 60) % 60
    return CellTime(hours, minutes, seconds)


def densify_row(cell_map: dict[str, Any]) -> list[Any]:
    """Spread a column-letter keyed row over positions ``0..max``."""
    if not cell_map:
        return []
    last = max(letters_to_index(col) for col in cell_map)
    return [cell_map.get(col) for col in column_names()[: last + 1]]


class Sheet:
    def __init__(self, workbook: Workbook, name: str, sheet_id: str, ordinal: int, state: str = "visible") -> None:
        self.workbook = workbook
        self.name = name
        self.sheet_id = sheet_id
        self.ordinal = ordinal
        self.state = state
        self._file: IO[bytes] | None = None
        self._opened = False
        self._row_count: Any = _UNSET

    def __repr__(self) -> str:
        return f"Sheet(name={self.name!r}, sheet_id={self.sheet_id!r}, ordinal={self.ordinal})"

    @property
    def path(self) -> str:
        return sheet_path(self.ordinal)

    @property
    def info(self) -> SheetInfo:
        return SheetInfo(name=self.name, sheet_id=self.sheet_id, ordinal=self.ordinal, state=self.state)

    def _stream(self) -> IO[bytes] | None:
        if not self._opened:
            try:
                self._file = self.workbook.archive.open(self.path)
            except WorkbookFormatError as exc:
                raise WorkbookFormatError(f"Couldn't open sheet {self.ordinal}: {exc}") from exc
            self._opened = True
            if self._file is None:
                logger.debug("Sheet %s has no part at %s", self.name, self.path)
        if self._file is not None:
            self._file.seek(0)
        return self._file

    def _tokens(self) -> Iterator[Token]:
        stream = self._stream()
        if stream is None:
            return
        try:
            yield from iter_tokens(stream)
        except (ET.ParseError, BadZipFile, zlib.error) as exc:
            raise WorkbookFormatError(f"Invalid spreadsheet XML in sheet {self.ordinal}: {exc}") from exc

    @property
    def row_count(self) -> int | None:
        """Row count declared by the sheet's dimension, or ``None`` if unknown."""
        if self._row_count is _UNSET:
            self._row_count = self._scan_row_count()
        return self._row_count

    def _scan_row_count(self) -> int | None:
        for token in self._tokens():
            if not isinstance(token, StartElement):
                continue
            if token.name == "dimension":
                ref = token.attrs.get("ref")
                if ref:
                    return dimension_row_count(ref)
            elif token.name == "sheetData":
                return None
        return None

    def rows(self) -> Iterator[list[Any]]:
        """Yield dense rows; every call starts a fresh pass from the top of the part."""
        # The dimension pre-pass rewinds the shared handle, so it has to run
        # before the row pass starts reading.
        self.row_count
        return SheetRowStream(self).rows()

    def __iter__(self) -> Iterator[list[Any]]:
        return self.rows()

    def string_lookup(self, index: int) -> str:
        return self.workbook.shared_strings.lookup(index)


class SheetRowStream:
    """Rebuilds rows from a sheet's token stream.

    The cell type is resolved once at the ``c`` start tag and applies to every
    text token until the cell closes. Text inside a formula is skipped.
    """

    def __init__(self, sheet: Sheet) -> None:
        self.sheet = sheet
        self.styles = sheet.workbook.styles
        self._cell_map: dict[str, Any] = {}
        self._column: str | None = None
        self._ref: str | None = None
        self._cell_type: str | None = None
        self._element: str | None = None

    def rows(self) -> Iterator[list[Any]]:
        logger.debug("Reading rows of sheet %s", self.sheet.name)
        for token in self.sheet._tokens():  # noqa: SLF001
            if isinstance(token, StartElement):
                self._element = token.name
                if token.name == "row":
                    self._cell_map = {}
                elif token.name == "c":
                    self._start_cell(token.attrs)
            elif isinstance(token, EndElement):
                if token.name == "c":
                    self._cell_type = None
                elif token.name == "row":
                    yield densify_row(self._cell_map)
            elif self._cell_type is not None and self._element != "f":
                self._cell_map[self._column] = self._coerce(token.value)

    def _start_cell(self, attrs: dict[str, str]) -> None:
        ref = attrs.get("r")
        if not ref:
            raise WorkbookFormatError("Invalid spreadsheet XML: cell without a reference.")
        column = column_letters(ref)
        try:
            letters_to_index(column)
        except ValueError as exc:
            raise WorkbookFormatError(f"Invalid spreadsheet XML: bad cell reference {ref!r}.") from exc
        self._ref = ref
        self._column = column
        self._cell_type = self.styles.resolve(attrs.get("t"), attrs.get("s"))

    def _coerce(self, text: str) -> Any:
        cell_type = self._cell_type
        try:
            if cell_type == CellType.SHARED:
                return self.sheet.string_lookup(int(text))
            if cell_type == CellType.BOOLEAN:
                return int(text) != 0
            if cell_type == CellType.DATE:
                return OOXML_EPOCH + timedelta(days=float(text))
            if cell_type == CellType.DATETIME:
                return OOXML_EPOCH_DATETIME + timedelta(days=float(text))
            if cell_type == CellType.TIME:
                return parse_time(float(text))
            if cell_type == CellType.FLOAT:
                return float(text)
        except (ValueError, OverflowError) as exc:
            raise WorkbookFormatError(f"Invalid {cell_type} value {text!r} in cell {self._ref}.") from exc
        return text
