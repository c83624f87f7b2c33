"""
Load-time detection for csv-ingest.

Runs once, before the main parse, to fill in a ``CsvParseConfig``:

- ``detect_delimiter()`` guesses the field separator from one line.
- ``detect_combined_datetime_columns()`` finds adjacent date-only and
  time-only columns that can be merged into one timestamp.
- ``sniff_config()`` runs both on a text buffer (header line + first data
  row) and returns a ready-to-use config.

Delimiter detection algorithm:
1. Count tab, semicolon, comma and space outside double-quoted spans. A
   run of consecutive spaces counts as one occurrence.
2. A candidate qualifies with >= 1 occurrence (space needs >= 2).
3. The highest count wins; ties go to tab > semicolon > comma > space.
4. Fallback: comma.
"""

from __future__ import annotations

import io
import logging

from csv_ingest.config import CombinedColumnPair, CsvParseConfig
from csv_ingest.parsers.header import parse_header_line
from csv_ingest.parsers.tokenizer import split_line
from csv_ingest.transforms.timestamps import ColumnType, ColumnTypeInfo, detect_column_type

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = ","

# (delimiter, minimum count), in tie-break priority order
_CANDIDATES: list[tuple[str, int]] = [
    ("\t", 1),
    (";", 1),
    (",", 1),
    (" ", 2),
]


def _count_outside_quotes(line: str) -> dict[str, int]:
    """Count candidate delimiters outside quotes; space runs count once."""
    counts = {delim: 0 for delim, _ in _CANDIDATES}
    inside_quotes = False
    prev_was_space = False
    for ch in line:
        if ch == '"':
            inside_quotes = not inside_quotes
            prev_was_space = False
            continue
        if inside_quotes:
            continue
        if ch == " ":
            if not prev_was_space:
                counts[" "] += 1
            prev_was_space = True
            continue
        prev_was_space = False
        if ch in counts:
            counts[ch] += 1
    return counts


def detect_delimiter(first_line: str) -> str:
    """Detect the field separator of a delimited text line.

    Args:
        first_line: A sample line, usually the header.

    Returns:
        One of ``"\\t"``, ``";"``, ``","`` or ``" "``; ``","`` when no
        candidate qualifies.
    """
    counts = _count_outside_quotes(first_line)

    best: str | None = None
    for delim, threshold in _CANDIDATES:
        count = counts[delim]
        if count < threshold:
            continue
        # Strictly greater: earlier candidates win ties
        if best is None or count > counts[best]:
            best = delim

    return best if best is not None else DEFAULT_DELIMITER


def detect_combined_datetime_columns(
    column_names: list[str],
    column_types: list[ColumnTypeInfo],
) -> list[CombinedColumnPair]:
    """Find adjacent date-only + time-only column pairs.

    Either order is accepted (date then time, or time then date). Pairs
    never overlap: once two columns are paired, scanning resumes after
    them.

    Args:
        column_names: Resolved header names.
        column_types: Detected type per column (same length).

    Returns:
        The pairs found, left to right. ``virtual_name`` follows file
        order, e.g. ``"Time + Date"`` for a time column followed by a date
        column.
    """
    pairs: list[CombinedColumnPair] = []
    i = 0
    while i + 1 < len(column_types):
        left, right = column_types[i].type, column_types[i + 1].type
        if {left, right} == {ColumnType.DATE_ONLY, ColumnType.TIME_ONLY}:
            date_idx, time_idx = (i, i + 1) if left is ColumnType.DATE_ONLY else (i + 1, i)
            pairs.append(
                CombinedColumnPair(
                    date_column_index=date_idx,
                    time_column_index=time_idx,
                    virtual_name=f"{column_names[i]} + {column_names[i + 1]}",
                )
            )
            i += 2
        else:
            i += 1
    return pairs


def sniff_config(text: str, skip_rows: int = 0) -> CsvParseConfig:
    """Build a parse configuration from the start of a text buffer.

    Reads the header line (after *skip_rows* lines) to detect the
    delimiter, then classifies the first data row's non-empty cells to
    discover combined date + time pairs. Pairs are recorded but not
    activated; set ``combined_column_index`` to use one.

    Args:
        text: The file content (or at least its first lines).
        skip_rows: Lines preceding the header.

    Returns:
        A ``CsvParseConfig`` with ``delimiter``, ``skip_rows`` and
        ``combined_columns`` filled in.
    """
    lines = io.StringIO(text)
    for _ in range(skip_rows):
        lines.readline()
    header = lines.readline().rstrip("\n").rstrip("\r")
    first_row = lines.readline().rstrip("\n").rstrip("\r")

    delimiter = detect_delimiter(header)
    names = parse_header_line(header, delimiter)

    types = [ColumnTypeInfo() for _ in names]
    for i, cell in enumerate(split_line(first_row, delimiter)[: len(names)]):
        if cell:
            types[i] = detect_column_type(cell)

    pairs = detect_combined_datetime_columns(names, types)
    logger.info(
        "Sniffed delimiter=%r, %d column(s), %d date+time pair(s)",
        delimiter, len(names), len(pairs),
    )
    return CsvParseConfig(
        delimiter=delimiter,
        skip_rows=skip_rows,
        combined_columns=pairs,
    )
