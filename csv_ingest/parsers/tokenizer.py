"""
Quote-aware line tokenizer for csv-ingest.

``split_line()`` walks a single line once and emits trimmed fields.

Rules:
- A delimiter only ends a field when outside double quotes.
- A quoted field's value is the text strictly between its quote pair.
  Embedded quotes are not unescaped (``""`` is not special).
- The last field is closed at end of line. A line that ends exactly on a
  delimiter yields one extra empty trailing field.
- An empty line yields no fields at all; callers treat that as a blank
  line to skip, not as a row with one empty cell.
"""

from __future__ import annotations


def split_line(line: str, delimiter: str) -> list[str]:
    """Split one line into trimmed fields.

    Args:
        line: The line without its trailing newline.
        delimiter: Single-character field separator.

    Returns:
        List of trimmed field strings; empty for an empty line.
    """
    parts: list[str] = []
    inside_quotes = False
    quoted_word = False
    start_pos = 0
    quote_start = 0
    quote_end = 0
    last = len(line) - 1

    for pos, ch in enumerate(line):
        if ch == '"':
            if inside_quotes:
                quoted_word = True
                quote_end = pos
            else:
                quote_start = pos + 1
            inside_quotes = not inside_quotes

        part_completed = False
        add_empty = False
        end_pos = pos

        if not inside_quotes and ch == delimiter:
            part_completed = True
        if pos == last:
            part_completed = True
            end_pos = pos + 1
            if ch == delimiter:
                end_pos = pos
                add_empty = True

        if part_completed:
            if quoted_word:
                part = line[quote_start:quote_end]
            else:
                part = line[start_pos:end_pos]
            parts.append(part.strip())
            start_pos = pos + 1
            quoted_word = False
            inside_quotes = False

        if add_empty:
            parts.append("")

    return parts
