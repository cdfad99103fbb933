from __future__ import annotations

import re
from functools import cache
from string import ascii_uppercase
from typing import Iterator
from xml.etree import ElementTree as ET

TRAILING_ROW_RE = re.compile(r"(\d+)$")


def local_name(tag: str) -> str:
    if "}" in tag:
        return tag.rsplit("}", 1)[1]
    return tag


def iter_children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    for child in element:
        if local_name(child.tag) == name:
            yield child


@cache
def column_names() -> tuple[str, ...]:
    """Return every column name from ``A`` to ``ZZZ`` in sheet order."""
    singles = list(ascii_uppercase)
    doubles = [prefix + letter for prefix in singles for letter in ascii_uppercase]
    triples = [prefix + letter for prefix in doubles for letter in ascii_uppercase]
    return tuple(singles + doubles + triples)


@cache
def _column_indices() -> dict[str, int]:
    return {name: idx for idx, name in enumerate(column_names())}


def letters_to_index(letters: str) -> int:
    try:
        return _column_indices()[letters]
    except KeyError:
        raise ValueError(f"Invalid column letters: {letters!r}") from None


def index_to_letters(index: int) -> str:
    names = column_names()
    if index < 0 or index >= len(names):
        raise ValueError(f"Column index out of range: {index}")
    return names[index]


def column_letters(ref: str) -> str:
    return ref.rstrip("0123456789")


def dimension_row_count(ref: str) -> int | None:
    match = TRAILING_ROW_RE.search(ref)
    if not match:
        return None
    return int(match.group(1))
