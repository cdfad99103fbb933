from __future__ import annotations


class WorkbookFormatError(Exception):
    """Raised when a workbook package cannot be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
