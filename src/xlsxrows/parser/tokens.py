"""Structural token stream over an XML part.

Parts are fed to ``XMLPullParser`` in chunks and turned into three kinds of
events.  Element names have their namespace stripped.  The text of a leaf
element is delivered as a ``Text`` token right before that element's
``EndElement``, the first point at which ElementTree guarantees it is
complete.  Text of elements that have children is indentation and is dropped.
Finished elements are detached from their parent, so a pass over a large
sheet keeps only the currently open elements in memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, Iterator, Union
from xml.etree import ElementTree as ET

from .utils import local_name

CHUNK_SIZE = 64 * 1024


@dataclass(slots=True, frozen=True)
class StartElement:
    name: str
    attrs: dict[str, str]


@dataclass(slots=True, frozen=True)
class EndElement:
    name: str


@dataclass(slots=True, frozen=True)
class Text:
    value: str


Token = Union[StartElement, EndElement, Text]


def iter_tokens(stream: IO[bytes], chunk_size: int = CHUNK_SIZE) -> Iterator[Token]:
    parser = ET.XMLPullParser(events=("start", "end"))
    open_elements: list[ET.Element] = []
    has_children: list[bool] = []

    def drain() -> Iterator[Token]:
        for event, elem in parser.read_events():
            name = local_name(elem.tag)
            if event == "start":
                if has_children:
                    has_children[-1] = True
                open_elements.append(elem)
                has_children.append(False)
                yield StartElement(name, dict(elem.attrib))
                continue

            if not has_children.pop() and elem.text:
                yield Text(elem.text)
            yield EndElement(name)

            open_elements.pop()
            elem.clear()
            if open_elements:
                open_elements[-1].remove(elem)

    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        parser.feed(chunk)
        yield from drain()

    parser.close()
    yield from drain()
