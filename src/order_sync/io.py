from __future__ import annotations
from typing import Iterable, List, Sequence, Tuple


HEADER_SCAN_ROWS = 5

NumberedRow = Tuple[int, List[str]]


def parse_csv_numbered(text: str) -> List[NumberedRow]:
    """Split a sheet CSV export into ``(sheet_row, cells)`` pairs.

    ``sheet_row`` is the 1-based record position in the export, counting the
    blank records that are dropped, so it matches the row number shown in the
    spreadsheet. Quoted cells may contain commas, newlines and doubled quotes.
    Cells are trimmed and rows where every cell is empty are dropped.
    Malformed quoting never raises: an unterminated quote swallows the rest of
    the input into the current cell.
    """
    rows: List[NumberedRow] = []
    row: List[str] = []
    cell: List[str] = []
    in_quotes = False
    record = 1
    i = 0
    n = len(text)

    def end_row() -> None:
        if any(c != "" for c in row):
            rows.append((record, list(row)))
        row.clear()

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""
        if in_quotes:
            if ch == '"' and nxt == '"':
                cell.append('"')
                i += 1
            elif ch == '"':
                in_quotes = False
            else:
                cell.append(ch)
        elif ch == '"':
            in_quotes = True
        elif ch == ",":
            row.append("".join(cell).strip())
            cell.clear()
        elif ch == "\n" or (ch == "\r" and nxt == "\n"):
            row.append("".join(cell).strip())
            cell.clear()
            end_row()
            record += 1
            if ch == "\r":
                i += 1
        elif ch != "\r":
            cell.append(ch)
        i += 1

    if cell or row:
        row.append("".join(cell).strip())
        end_row()
    return rows


def parse_csv(text: str) -> List[List[str]]:
    """Rows of trimmed cells, blank rows dropped. See ``parse_csv_numbered``."""
    return [cells for _, cells in parse_csv_numbered(text)]


def find_header_row(rows: Sequence[Sequence[str]], markers: Iterable[str]) -> int:
    """Index of the header row; 0 when none of the first rows carries a marker."""
    needles = [m.lower() for m in markers]
    for i, row in enumerate(rows[:HEADER_SCAN_ROWS]):
        lower = [c.lower() for c in row]
        if any(needle in c for c in lower for needle in needles):
            return i
    return 0


def cell_at(row: Sequence[str], index: int | None) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index]
