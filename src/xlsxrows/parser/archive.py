from __future__ import annotations

import logging
import zlib
from pathlib import Path
from typing import IO
from zipfile import BadZipFile, ZipFile

from ..errors import WorkbookFormatError

logger = logging.getLogger(__name__)


class Archive:
    """Named-entry access to the zip container of a workbook package.

    Entry handles handed out by ``open`` stay owned by the archive and are
    closed together with it.
    """

    def __init__(self, source: str | Path | IO[bytes]) -> None:
        if isinstance(source, (str, Path)):
            self.name = str(source)
        else:
            self.name = getattr(source, "name", "<stream>")
        try:
            self._zip_file = ZipFile(source)
        except BadZipFile as exc:
            raise WorkbookFormatError(f"Invalid file, not a zip container: {self.name}") from exc
        self._names = set(self._zip_file.namelist())
        self._handles: list[IO[bytes]] = []
        logger.debug("Opened archive %s with %d entries", self.name, len(self._names))

    def exists(self, path: str) -> bool:
        return path in self._names

    def open(self, path: str) -> IO[bytes] | None:
        if not self.exists(path):
            return None
        try:
            handle = self._zip_file.open(path)
        except (BadZipFile, zlib.error, OSError) as exc:
            raise WorkbookFormatError(f"Invalid file, could not open {path}: {exc}") from exc
        self._handles.append(handle)
        return handle

    def read(self, path: str) -> bytes | None:
        if not self.exists(path):
            return None
        try:
            return self._zip_file.read(path)
        except (BadZipFile, zlib.error, OSError) as exc:
            raise WorkbookFormatError(f"Invalid file, could not read {path}: {exc}") from exc

    def close(self) -> None:
        for handle in self._handles:
            handle.close()
        self._handles.clear()
        self._zip_file.close()
        logger.debug("Closed archive %s", self.name)
