from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from contextlib import nullcontext
from datetime import date
from pathlib import Path
from typing import IO, Any, ContextManager, Iterable

from .api import open_workbook
from .errors import WorkbookFormatError
from .model import ReadOptions
from .parser.styles import normalize_format_code

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Stream the rows of an .xlsx sheet as CSV or JSON lines")
    parser.add_argument("input", type=Path, help="Input .xlsx file")
    parser.add_argument("-o", "--output", type=Path, help="Output path (default: stdout)")
    parser.add_argument("-s", "--sheet", help="Sheet name (default: first sheet)")
    parser.add_argument("--jsonl", action="store_true", help="Write one JSON array per row")
    parser.add_argument("--list-sheets", action="store_true", help="List sheets and exit")
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        default=[],
        metavar="CODE=TYPE",
        help="Map a normalised number format code to a cell type, e.g. 'dd/mm/yyyy=date'",
    )
    parser.add_argument(
        "--skip-hidden",
        action="store_true",
        help="Leave hidden sheets out of the sheet list",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return parser


def parse_format_args(values: Iterable[str]) -> dict[str, str]:
    formats: dict[str, str] = {}
    for value in values:
        code, sep, cell_type = value.rpartition("=")
        if not sep or not code or not cell_type:
            raise argparse.ArgumentTypeError(f"Expected CODE=TYPE, got {value!r}")
        formats[normalize_format_code(code)] = cell_type
    return formats


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def to_json(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return to_text(value)


def write_rows(rows: Iterable[list[Any]], out: IO[str], *, jsonl: bool) -> int:
    count = 0
    writer = None if jsonl else csv.writer(out, lineterminator="\n")
    for row in rows:
        if writer is None:
            out.write(json.dumps([to_json(value) for value in row], ensure_ascii=False) + "\n")
        else:
            writer.writerow([to_text(value) for value in row])
        count += 1
    return count


def open_output(path: Path | None) -> ContextManager[IO[str]]:
    if path is None:
        return nullcontext(sys.stdout)
    return path.open("w", encoding="utf-8", newline="")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        formats = parse_format_args(args.formats)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))

    options = ReadOptions(formats=formats, include_hidden_sheets=not args.skip_hidden)

    try:
        with open_workbook(args.input, options=options) as workbook:
            if args.list_sheets:
                sheets = workbook.sheets
                with open_output(args.output) as out:
                    for sheet in sheets:
                        out.write(f"{sheet.ordinal}\t{sheet.name}\t{sheet.state}\n")
                return 0

            if args.sheet is not None:
                target = workbook.sheet(args.sheet)
            else:
                sheets = workbook.sheets
                target = sheets[0] if sheets else None
            rows = target.rows() if target is not None else iter(())
            with open_output(args.output) as out:
                count = write_rows(rows, out, jsonl=args.jsonl)
            logger.info("Wrote %d rows", count)
    except (WorkbookFormatError, KeyError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
