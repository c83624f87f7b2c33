"""
Numeric grammar for csv-ingest.

Cells coming out of the tokenizer are already trimmed. A cell is numeric
when it matches one of:

- Signed decimal: ``42``, ``-3.5``, ``.5``, ``+7.``
- Scientific notation: ``1.5e3``, ``2.0E-4``
- Hex integer with a ``0x`` / ``0X`` prefix: ``0xFF``
- Decimal comma (European exports, usually ``;``-delimited): ``1,5``

Everything else is non-numeric, including the empty string, ``nan`` /
``inf`` spellings, thousand separators (``1,234,567``), non-ASCII digits
and literals too large for a finite float (``1e999``).
"""

from __future__ import annotations

import math
import re

_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_HEX = re.compile(r"([+-]?)0[xX]([0-9a-fA-F]+)")
_DECIMAL_COMMA = re.compile(r"[+-]?\d+,\d+", re.ASCII)


def _parse(cell: str) -> float | None:
    if _DECIMAL.fullmatch(cell):
        return float(cell)

    m = _HEX.fullmatch(cell)
    if m:
        try:
            value = float(int(m.group(2), 16))
        except OverflowError:
            return None
        return -value if m.group(1) == "-" else value

    if _DECIMAL_COMMA.fullmatch(cell):
        return float(cell.replace(",", ".", 1))

    return None


def to_number(cell: str) -> float | None:
    """Convert a trimmed cell to a float, or ``None`` if it is not numeric."""
    if not cell:
        return None
    value = _parse(cell)
    if value is None or not math.isfinite(value):
        return None
    return value


def is_number(cell: str) -> bool:
    return to_number(cell) is not None
