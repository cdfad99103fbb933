from __future__ import annotations

import logging
from pathlib import Path
from typing import IO
from xml.etree import ElementTree as ET

from ..errors import WorkbookFormatError
from ..model import ReadOptions
from .archive import Archive
from .parts import WORKBOOK_PATH
from .shared_strings import SharedStringTable
from .sheet import Sheet
from .styles import StyleResolver
from .utils import local_name

logger = logging.getLogger(__name__)


class Workbook:
    """Sheet catalogue of an ``.xlsx`` package.

    The style resolver and the shared string table are built on first use and
    shared by every sheet of the workbook. Build them before handing sheets to
    other threads; the lazy build is not synchronised.
    """

    def __init__(self, source: str | Path | IO[bytes], options: ReadOptions | None = None) -> None:
        self.options = options or ReadOptions()
        self.archive = Archive(source)
        self._styles: StyleResolver | None = None
        self._shared_strings: SharedStringTable | None = None
        self._sheets: list[Sheet] | None = None

    def __enter__(self) -> Workbook:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def styles(self) -> StyleResolver:
        if self._styles is None:
            self._styles = StyleResolver.from_archive(self.archive, self.options.formats)
        return self._styles

    @property
    def shared_strings(self) -> SharedStringTable:
        if self._shared_strings is None:
            self._shared_strings = SharedStringTable.from_archive(self.archive)
        return self._shared_strings

    @property
    def sheets(self) -> list[Sheet]:
        if self._sheets is None:
            self._sheets = self._read_sheets()
        return list(self._sheets)

    def sheet(self, name: str) -> Sheet:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        raise KeyError(f"Sheet not found in workbook: {name}")

    def _read_sheets(self) -> list[Sheet]:
        payload = self.archive.read(WORKBOOK_PATH)
        if payload is None:
            raise WorkbookFormatError(f"Invalid file, could not open {WORKBOOK_PATH}")
        try:
            root = ET.fromstring(payload)
        except ET.ParseError as exc:
            raise WorkbookFormatError(f"Invalid file, could not parse {WORKBOOK_PATH}: {exc}") from exc

        sheets: list[Sheet] = []
        ordinal = 0
        for elem in root.iter():
            if local_name(elem.tag) != "sheet":
                continue
            ordinal += 1
            state = elem.attrib.get("state", "visible")
            if state != "visible" and not self.options.include_hidden_sheets:
                continue
            sheets.append(
                Sheet(
                    self,
                    name=elem.attrib.get("name", f"Sheet{ordinal}"),
                    sheet_id=elem.attrib.get("sheetId", ""),
                    ordinal=ordinal,
                    state=state,
                )
            )
        logger.debug("Found %d sheets in %s", len(sheets), self.archive.name)
        return sheets

    def close(self) -> None:
        self.archive.close()
