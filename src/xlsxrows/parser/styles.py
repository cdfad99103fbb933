from __future__ import annotations

import logging
from typing import Mapping
from xml.etree import ElementTree as ET

from ..errors import WorkbookFormatError
from ..model import CellType
from .archive import Archive
from .parts import STYLES_PATH
from .utils import iter_children

logger = logging.getLogger(__name__)

BUILTIN_NUMFMTS: dict[int, str] = {
    0: "General",
    1: "0",
    2: "0.00",
    3: "#,##0",
    4: "#,##0.00",
    9: "0%",
    10: "0.00%",
    11: "0.00E+00",
    12: "# ?/?",
    13: "# ??/??",
    14: "mm-dd-yy",
    15: "d-mmm-yy",
    16: "d-mmm",
    17: "mmm-yy",
    18: "h:mm AM/PM",
    19: "h:mm:ss AM/PM",
    20: "h:mm",
    21: "h:mm:ss",
    22: "m/d/yy h:mm",
    37: "#,##0 ;(#,##0)",
    38: "#,##0 ;[Red](#,##0)",
    39: "#,##0.00;(#,##0.00)",
    40: "#,##0.00;[Red](#,##0.00)",
    45: "mm:ss",
    46: "[h]:mm:ss",
    47: "mmss.0",
    48: "##0.0E+0",
    49: "@",
}

RECOGNIZED_FORMATS: dict[str, str] = {
    "yyyy/mm/dd": CellType.DATE,
}


def normalize_format_code(code: str) -> str:
    # Only the first backslash is dropped.
    return code.lower().replace("\\", "", 1)


class StyleResolver:
    """Maps a cell's ``t`` and ``s`` attributes to a cell type.

    ``cell_xfs`` only receives ``xf`` entries that carry a ``numFmtId``, so a
    stylesheet that omits it on some entries shifts every later position
    relative to the style indices cells refer to.
    """

    def __init__(
        self,
        num_formats: Mapping[int, str] | None = None,
        cell_xfs: list[int] | None = None,
        user_formats: Mapping[str, str] | None = None,
    ) -> None:
        self.num_formats: dict[int, str] = dict(num_formats or {})
        self.cell_xfs: tuple[int, ...] = tuple(cell_xfs or ())
        self.user_formats: dict[str, str] = dict(user_formats or {})

    @classmethod
    def from_archive(cls, archive: Archive, user_formats: Mapping[str, str] | None = None) -> StyleResolver:
        payload = archive.read(STYLES_PATH)
        if payload is None:
            logger.debug("No styles part, using General for every cell")
            return cls(user_formats=user_formats)
        try:
            root = ET.fromstring(payload)
        except ET.ParseError as exc:
            raise WorkbookFormatError(f"Invalid file, could not open styles: {exc}") from exc
        return cls.from_element(root, user_formats)

    @classmethod
    def from_element(cls, root: ET.Element, user_formats: Mapping[str, str] | None = None) -> StyleResolver:
        num_formats: dict[int, str] = {}
        for num_fmts in iter_children(root, "numFmts"):
            for num_fmt in iter_children(num_fmts, "numFmt"):
                raw_id = num_fmt.attrib.get("numFmtId")
                code = num_fmt.attrib.get("formatCode")
                if raw_id is None or code is None:
                    continue
                num_formats[_to_int(raw_id)] = code

        cell_xfs: list[int] = []
        for xfs in iter_children(root, "cellXfs"):
            for xf in iter_children(xfs, "xf"):
                raw_id = xf.attrib.get("numFmtId")
                if raw_id is not None:
                    cell_xfs.append(_to_int(raw_id))

        logger.debug("Loaded %d custom number formats and %d cell styles", len(num_formats), len(cell_xfs))
        return cls(num_formats, cell_xfs, user_formats)

    def format_code(self, style_index: str | int | None) -> str | None:
        num_fmt_id = self._num_fmt_id(style_index)
        code = self.num_formats.get(num_fmt_id)
        if code is None:
            code = BUILTIN_NUMFMTS.get(num_fmt_id)
        return code

    def resolve(self, type_attr: str | None, style_index: str | int | None) -> str:
        if type_attr == "s":
            return CellType.SHARED
        if type_attr == "b":
            return CellType.BOOLEAN

        code = self.format_code(style_index)
        if code is None:
            return CellType.STRING
        normalized = normalize_format_code(code)
        if normalized in self.user_formats:
            return self.user_formats[normalized]
        return RECOGNIZED_FORMATS.get(normalized, CellType.STRING)

    def _num_fmt_id(self, style_index: str | int | None) -> int:
        if style_index is None:
            idx = 0
        elif isinstance(style_index, int):
            idx = style_index
        else:
            idx = _to_int(style_index)
        if 0 <= idx < len(self.cell_xfs):
            return self.cell_xfs[idx]
        return 0


def _to_int(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        return 0
