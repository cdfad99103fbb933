from __future__ import annotations

from io import BytesIO
from xml.etree import ElementTree as ET

import pytest

from xlsxrows.parser.tokens import EndElement, StartElement, Text, iter_tokens


def test_token_order_and_local_names() -> None:
    payload = b"""<?xml version="1.0"?>
<sst xmlns="http://schemas.openxmlformats.org/spreadsheetml/2006/main">
  <si><r><t>rich</t></r><r><t>Text</t></r></si>
</sst>
"""
    tokens = list(iter_tokens(BytesIO(payload)))

    assert tokens == [
        StartElement("sst", {}),
        StartElement("si", {}),
        StartElement("r", {}),
        StartElement("t", {}),
        Text("rich"),
        EndElement("t"),
        EndElement("r"),
        StartElement("r", {}),
        StartElement("t", {}),
        Text("Text"),
        EndElement("t"),
        EndElement("r"),
        EndElement("si"),
        EndElement("sst"),
    ]


def test_indentation_is_not_text_but_leaf_whitespace_is() -> None:
    payload = b'<si>\n  <r><t xml:space="preserve"> </t></r>\n</si>'
    texts = [tok.value for tok in iter_tokens(BytesIO(payload)) if isinstance(tok, Text)]

    assert texts == [" "]


def test_attributes_are_passed_through() -> None:
    payload = b'<row r="1"><c r="A1" t="s" s="3"><v>0</v></c></row>'
    starts = [tok for tok in iter_tokens(BytesIO(payload)) if isinstance(tok, StartElement)]

    assert starts[1] == StartElement("c", {"r": "A1", "t": "s", "s": "3"})


def test_small_chunks_do_not_split_text() -> None:
    payload = b"<root><v>123456789</v></root>"
    texts = [tok.value for tok in iter_tokens(BytesIO(payload), chunk_size=3) if isinstance(tok, Text)]

    assert texts == ["123456789"]


def test_malformed_xml_raises_parse_error() -> None:
    with pytest.raises(ET.ParseError):
        list(iter_tokens(BytesIO(b"<root><v>1</root>")))
