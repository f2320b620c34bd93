"""Lenient delimited-text reader for spreadsheet CSV exports.

Sheet exports are not always well formed (stray quotes, ragged rows), so
instead of rejecting a whole payload this reader walks the text with a single
quote-toggle: a quote flips the "inside quotes" flag and is not emitted, a
delimiter outside quotes ends the field, a newline outside quotes ends the row.
Fields are whitespace-trimmed and blank rows are skipped.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Tuple

DELIMITER = ","
QUOTE = '"'


def split_rows(
    text: str, delimiter: str = DELIMITER, quote: str = QUOTE
) -> Iterator[Tuple[int, List[str]]]:
    """Yield ``(line_number, fields)`` for every non-blank row.

    ``line_number`` is the 1-based physical line the row starts on.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    line = 1
    row_start = 1

    def _finish_row():
        fields.append("".join(current).strip())
        current.clear()
        row = list(fields)
        fields.clear()
        return row

    for ch in text:
        if ch == quote:
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current.clear()
        elif ch == "\n" and not in_quotes:
            row = _finish_row()
            if any(row):
                yield row_start, row
            line += 1
            row_start = line
        elif ch == "\r" and not in_quotes:
            continue
        else:
            if ch == "\n":
                line += 1
            current.append(ch)

    if current or fields:
        row = _finish_row()
        if any(row):
            yield row_start, row


def read_dicts(
    text: str, delimiter: str = DELIMITER
) -> Iterator[Tuple[int, Dict[str, str]]]:
    """Header-mode reading: map each data row onto the first row's names.

    Short rows are padded with empty strings; extra trailing fields are
    ignored.
    """
    rows = split_rows(text, delimiter)
    try:
        _, header = next(rows)
    except StopIteration:
        return
    header = [name.lstrip("\ufeff") for name in header]
    for line, values in rows:
        padded = values + [""] * (len(header) - len(values))
        yield line, dict(zip(header, padded))
