from .api import list_sheets, open_workbook, read_rows
from .errors import WorkbookFormatError
from .model import CellTime, CellType, ReadOptions, SheetInfo
from .parser.ooxml import Workbook
from .parser.sheet import Sheet

__all__ = [
    "CellTime",
    "CellType",
    "ReadOptions",
    "Sheet",
    "SheetInfo",
    "Workbook",
    "WorkbookFormatError",
    "list_sheets",
    "open_workbook",
    "read_rows",
]
