"""
Header resolution for csv-ingest.

Turns the header line into unique, stable column names:

- If every header token is numeric, the "header" is really a data row and
  all names are synthesized as ``_Column_<i>``.
- Empty tokens become ``_Column_<i>``.
- A name occurring more than once gets a positional, zero-padded suffix on
  **every** occurrence: ``[x, y, x, y]`` -> ``[x_00, y_01, x_02, y_03]``.
"""

from __future__ import annotations

from collections import Counter

from csv_ingest.parsers.tokenizer import split_line
from csv_ingest.transforms.numbers import is_number


def _placeholder(index: int) -> str:
    return f"_Column_{index}"


def parse_header_line(header_line: str, delimiter: str) -> list[str]:
    """Parse a header line into unique column names.

    Args:
        header_line: The header line (trailing ``\\r`` already stripped).
        delimiter: Single-character field separator.

    Returns:
        One name per header token, all distinct.
    """
    parts = split_line(header_line, delimiter)

    if all(is_number(field) for field in parts):
        names = [_placeholder(i) for i in range(len(parts))]
    else:
        names = [field.strip() or _placeholder(i) for i, field in enumerate(parts)]

    counts = Counter(names)
    return [
        f"{name}_{i:02d}" if counts[name] > 1 else name
        for i, name in enumerate(names)
    ]


def has_duplicate_names(header_line: str, delimiter: str) -> bool:
    """Whether the raw header tokens (before resolution) contain repeats."""
    parts = split_line(header_line, delimiter)
    return len(set(parts)) < len(parts)
