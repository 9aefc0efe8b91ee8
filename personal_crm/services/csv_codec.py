"""CSV reader and writer used by contact import and export.

Fields are comma separated. A field wrapped in double quotes may contain
commas, newlines and doubled quotes. Carriage returns outside quoted fields
are ignored, so CRLF input parses like LF input, and the newline that ends
the last line never produces an extra row. The reader is hand-written
because the stdlib reader returns blank lines as empty rows; writing goes
through ``csv.writer`` and joins rows with bare newlines.
"""
from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence


def parse_csv(text: str) -> list[list[str]]:
    """Split ``text`` into rows of string fields.

    Blank lines between rows come back as ``[""]``; blank lines at the end of
    the input are dropped.
    """

    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    in_quotes = False
    row_started = False
    pending_blank_lines = 0

    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if in_quotes:
            if char == '"':
                if index + 1 < length and text[index + 1] == '"':
                    field.append('"')
                    index += 1
                else:
                    in_quotes = False
            else:
                field.append(char)
        elif char == '"':
            in_quotes = True
            row_started = True
        elif char == ",":
            row.append("".join(field))
            field = []
            row_started = True
        elif char == "\n":
            if row_started or field:
                row.append("".join(field))
                rows.extend([""] for _ in range(pending_blank_lines))
                rows.append(row)
                pending_blank_lines = 0
            else:
                pending_blank_lines += 1
            row, field = [], []
            row_started = False
        elif char == "\r":
            pass
        else:
            field.append(char)
            row_started = True
        index += 1

    if row_started or field:
        row.append("".join(field))
        rows.extend([""] for _ in range(pending_blank_lines))
        rows.append(row)
    return rows


def encode_row(fields: Sequence[object]) -> str:
    """Render one row, quoting fields only when required.

    A row holding a single empty field is written as ``""`` so it survives a
    round trip instead of reading back as a blank line.
    """

    buffer = io.StringIO()
    csv.writer(buffer).writerow(fields)
    return buffer.getvalue().removesuffix("\r\n")


def encode_field(value: object) -> str:
    if value is None or value == "":
        return ""
    return encode_row([value])


def encode_rows(rows: Iterable[Sequence[object]]) -> str:
    return "\n".join(encode_row(row) for row in rows)
