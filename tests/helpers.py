from __future__ import annotations

from pathlib import Path
from xml.sax.saxutils import escape
from zipfile import ZipFile

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
DOCUMENT_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'


def quoteattr_body(value: str) -> str:
    return escape(value, {'"': "&quot;"})


def workbook_xml(sheets: list[tuple[str, str]] | list[tuple[str, str, str]]) -> str:
    entries = []
    for idx, sheet in enumerate(sheets, start=1):
        name, sheet_id = sheet[0], sheet[1]
        state = f' state="{sheet[2]}"' if len(sheet) > 2 else ""
        entries.append(f'<sheet name="{escape(name)}" sheetId="{sheet_id}"{state} r:id="rId{idx}"/>')
    return (
        f'{XML_DECL}<workbook xmlns="{SPREADSHEET_NS}" xmlns:r="{DOCUMENT_REL_NS}">'
        f"<sheets>{''.join(entries)}</sheets></workbook>"
    )


def shared_strings_xml(values: list[str]) -> str:
    items = "".join(f"<si><t>{escape(value)}</t></si>" for value in values)
    return f'{XML_DECL}<sst xmlns="{SPREADSHEET_NS}" count="{len(values)}" uniqueCount="{len(values)}">{items}</sst>'


def styles_xml(num_fmts: dict[int, str] | None = None, xfs: list[int | None] | None = None) -> str:
    fmt_items = "".join(
        f'<numFmt numFmtId="{fmt_id}" formatCode="{quoteattr_body(code)}"/>'
        for fmt_id, code in (num_fmts or {}).items()
    )
    xf_items = "".join(
        '<xf fontId="0"/>' if fmt_id is None else f'<xf numFmtId="{fmt_id}" fontId="0"/>' for fmt_id in (xfs or [])
    )
    return (
        f'{XML_DECL}<styleSheet xmlns="{SPREADSHEET_NS}">'
        f"<numFmts>{fmt_items}</numFmts>"
        '<cellStyleXfs><xf numFmtId="0"/></cellStyleXfs>'
        f"<cellXfs>{xf_items}</cellXfs>"
        "</styleSheet>"
    )


def sheet_xml(rows: list[str], dimension: str | None = None) -> str:
    dim = f'<dimension ref="{dimension}"/>' if dimension else ""
    return f'{XML_DECL}<worksheet xmlns="{SPREADSHEET_NS}">{dim}<sheetData>{"".join(rows)}</sheetData></worksheet>'


def row(number: int, *cells: str) -> str:
    return f'<row r="{number}">{"".join(cells)}</row>'


def cell(ref: str, value: str, t: str | None = None, s: int | None = None) -> str:
    attrs = f' r="{ref}"'
    if t is not None:
        attrs += f' t="{t}"'
    if s is not None:
        attrs += f' s="{s}"'
    return f"<c{attrs}><v>{escape(value)}</v></c>"


def write_xlsx(path: Path, parts: dict[str, str | bytes]) -> Path:
    with ZipFile(path, "w") as zf:
        for name, payload in parts.items():
            zf.writestr(name, payload)
    return path
