from __future__ import annotations

import logging
import zlib
from typing import IO, Iterable, Iterator
from xml.etree import ElementTree as ET
from zipfile import BadZipFile

from ..errors import WorkbookFormatError
from .archive import Archive
from .parts import SHARED_STRINGS_PATH
from .tokens import EndElement, StartElement, Text, iter_tokens

logger = logging.getLogger(__name__)


class SharedStringTable:
    def __init__(self, values: Iterable[str] = ()) -> None:
        self._values: tuple[str, ...] = tuple(values)

    @classmethod
    def from_archive(cls, archive: Archive) -> SharedStringTable:
        stream = archive.open(SHARED_STRINGS_PATH)
        if stream is None:
            logger.debug("No shared strings part")
            return cls()
        try:
            table = cls.from_stream(stream)
        except (ET.ParseError, BadZipFile, zlib.error) as exc:
            raise WorkbookFormatError(f"Invalid file, could not open shared string file: {exc}") from exc
        finally:
            stream.close()
        logger.debug("Loaded %d shared strings", len(table))
        return table

    @classmethod
    def from_stream(cls, stream: IO[bytes]) -> SharedStringTable:
        values: list[str] = []
        entry: list[str] = []
        for token in iter_tokens(stream):
            if isinstance(token, StartElement):
                if token.name == "si":
                    entry = []
            elif isinstance(token, EndElement):
                if token.name == "si":
                    values.append("".join(entry))
            elif isinstance(token, Text):
                entry.append(token.value)
        return cls(values)

    def lookup(self, index: int) -> str:
        if index < 0 or index >= len(self._values):
            raise WorkbookFormatError(f"File invalid, invalid string table index {index}.")
        return self._values[index]

    def __getitem__(self, index: int) -> str:
        return self.lookup(index)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)
