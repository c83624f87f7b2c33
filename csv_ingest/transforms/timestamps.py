"""
Column type classification and timestamp conversion for csv-ingest.

A column's grammar is decided once, from its first non-empty data cell,
and recorded as a ``ColumnTypeInfo``. Every later cell of that column is
converted with ``parse_with_type()`` against that fixed grammar; a cell
that does not fit returns ``None`` and the engine demotes just that cell
to the string fallback.

Recognised grammars (checked in this order):

1. **NUMBER** -- see ``transforms.numbers``. Epoch timestamps such as
   ``1700000000.123`` are numbers.
2. **DATETIME** -- one token holding a date and a time separated by
   ``T`` or a space, with optional fractional seconds and an optional
   ``Z`` / ``+HH:MM`` offset. Naive values are read as UTC.
3. **DATE_ONLY** -- ``%Y-%m-%d``, ``%Y/%m/%d``, ``%d/%m/%Y`` or
   ``%m/%d/%Y``. For ``a/b/YYYY`` the order is decided by whichever group
   exceeds 12; when neither does, day-first is used.
4. **TIME_ONLY** -- ``%H:%M:%S`` with an optional fraction, flagged via
   ``has_fractional`` rather than in the format string.
5. **STRING** -- anything else.

All results are epoch seconds (UTC) or, for TIME_ONLY, seconds since
midnight, as floats. Fractional seconds are kept from the cell's digits
directly, so precision is not limited to microseconds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from csv_ingest.transforms.numbers import to_number

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_SECONDS_PER_DAY = 86400.0


class ColumnType(Enum):
    UNDEFINED = "undefined"
    NUMBER = "number"
    DATE_ONLY = "date_only"
    TIME_ONLY = "time_only"
    DATETIME = "datetime"
    STRING = "string"


@dataclass(frozen=True)
class ColumnTypeInfo:
    """Grammar of a column, fixed from its first non-empty cell.

    Attributes:
        type: The detected ``ColumnType``.
        format: strptime-style pattern for date/time grammars (e.g.
            ``"%Y-%m-%d"``); empty for NUMBER / STRING / UNDEFINED.
        has_fractional: For TIME_ONLY and DATETIME, whether the first
            cell carried fractional seconds.
    """

    type: ColumnType = ColumnType.UNDEFINED
    format: str = ""
    has_fractional: bool = False


# ---------------------------------------------------------------------------
# Grammar tables
# ---------------------------------------------------------------------------

# format -> (regex, (year_group, month_group, day_group))
_DATE_GRAMMARS: dict[str, tuple[str, tuple[int, int, int]]] = {
    "%Y-%m-%d": (r"(\d{4})-(\d{1,2})-(\d{1,2})", (1, 2, 3)),
    "%Y/%m/%d": (r"(\d{4})/(\d{1,2})/(\d{1,2})", (1, 2, 3)),
    "%d/%m/%Y": (r"(\d{1,2})/(\d{1,2})/(\d{4})", (3, 2, 1)),
    "%m/%d/%Y": (r"(\d{1,2})/(\d{1,2})/(\d{4})", (3, 1, 2)),
}

_TIME_PATTERN = r"(\d{1,2}):(\d{2}):(\d{2})(?:[.,](\d+))?"
_OFFSET_PATTERN = r"(Z|[+-]\d{2}:?\d{2})?"

_TIME_RE = re.compile(_TIME_PATTERN, re.ASCII)
_DATE_RES = {fmt: re.compile(rx, re.ASCII) for fmt, (rx, _) in _DATE_GRAMMARS.items()}
_DATETIME_RES = {
    fmt: re.compile(rf"{rx}([T ])\s*{_TIME_PATTERN}\s*{_OFFSET_PATTERN}", re.ASCII)
    for fmt, (rx, _) in _DATE_GRAMMARS.items()
}

# Slash formats share a regex; detection decides which one applies.
_SLASH_DAY_FIRST = "%d/%m/%Y"
_SLASH_MONTH_FIRST = "%m/%d/%Y"


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _date_epoch(fmt: str, m: re.Match) -> float | None:
    """UTC midnight epoch seconds for a matched date, or None if invalid."""
    y_idx, mo_idx, d_idx = _DATE_GRAMMARS[fmt][1]
    try:
        day = datetime(
            int(m.group(y_idx)),
            int(m.group(mo_idx)),
            int(m.group(d_idx)),
            tzinfo=timezone.utc,
        )
    except ValueError:
        return None
    return (day - _EPOCH).days * _SECONDS_PER_DAY


def _time_seconds(hour: str, minute: str, second: str, fraction: str | None) -> float | None:
    """Seconds since midnight for matched time fields, or None if invalid."""
    h, mi, s = int(hour), int(minute), int(second)
    if h > 23 or mi > 59 or s > 59:
        return None
    seconds = float(h * 3600 + mi * 60 + s)
    if fraction:
        seconds += float("0." + fraction)
    return seconds


def _offset_seconds(offset: str | None) -> float | None:
    """UTC offset in seconds for ``Z`` / ``+HH:MM`` / ``-HHMM``."""
    if not offset or offset == "Z":
        return 0.0
    digits = offset[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:])
    if hours > 23 or minutes > 59:
        return None
    value = hours * 3600.0 + minutes * 60.0
    return -value if offset[0] == "-" else value


def _slash_format(m: re.Match) -> str:
    """Pick day-first or month-first for an ``a/b/YYYY`` match."""
    first, second = int(m.group(1)), int(m.group(2))
    if second > 12 and first <= 12:
        return _SLASH_MONTH_FIRST
    return _SLASH_DAY_FIRST


def _match_date_format(cell: str, regexes: dict[str, re.Pattern]) -> tuple[str, re.Match] | None:
    for fmt, rx in regexes.items():
        if fmt == _SLASH_MONTH_FIRST:
            continue
        m = rx.fullmatch(cell)
        if m:
            if fmt == _SLASH_DAY_FIRST:
                fmt = _slash_format(m)
            return fmt, m
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def detect_column_type(cell: str) -> ColumnTypeInfo:
    """Classify a single trimmed cell.

    Used on a column's first non-empty data cell; the result is then
    applied to every cell of that column.
    """
    if not cell:
        return ColumnTypeInfo()

    if to_number(cell) is not None:
        return ColumnTypeInfo(ColumnType.NUMBER)

    info = _detect_temporal(cell)
    # Shaped like a date but not a real one (e.g. month 13) -> plain text
    if info is None or parse_with_type(cell, info) is None:
        return ColumnTypeInfo(ColumnType.STRING)
    return info


def _detect_temporal(cell: str) -> ColumnTypeInfo | None:
    found = _match_date_format(cell, _DATETIME_RES)
    if found:
        date_fmt, m = found
        fmt = f"{date_fmt}{m.group(4)}%H:%M:%S"
        if m.group(9) and m.group(9) != "Z":
            fmt += "%z"
        return ColumnTypeInfo(ColumnType.DATETIME, fmt, has_fractional=bool(m.group(8)))

    found = _match_date_format(cell, _DATE_RES)
    if found:
        return ColumnTypeInfo(ColumnType.DATE_ONLY, found[0])

    m = _TIME_RE.fullmatch(cell)
    if m:
        return ColumnTypeInfo(ColumnType.TIME_ONLY, "%H:%M:%S", has_fractional=bool(m.group(4)))

    return None


def parse_with_type(cell: str, info: ColumnTypeInfo) -> float | None:
    """Convert a cell using a previously detected column grammar.

    Returns:
        - NUMBER: the numeric value.
        - DATE_ONLY: UTC midnight as epoch seconds.
        - TIME_ONLY: seconds since midnight (fraction included).
        - DATETIME: epoch seconds.
        - ``None`` for STRING / UNDEFINED columns, or when this particular
          cell does not fit the column's grammar.
    """
    if not cell:
        return None

    if info.type is ColumnType.NUMBER:
        return to_number(cell)

    if info.type is ColumnType.DATE_ONLY:
        rx = _DATE_RES.get(info.format)
        m = rx.fullmatch(cell) if rx else None
        return _date_epoch(info.format, m) if m else None

    if info.type is ColumnType.TIME_ONLY:
        m = _TIME_RE.fullmatch(cell)
        return _time_seconds(*m.groups()) if m else None

    if info.type is ColumnType.DATETIME:
        return _parse_datetime(cell, info.format)

    return None


def _parse_datetime(cell: str, fmt: str) -> float | None:
    date_fmt = fmt[:8]
    rx = _DATETIME_RES.get(date_fmt)
    m = rx.fullmatch(cell) if rx else None
    if not m:
        return None
    day = _date_epoch(date_fmt, m)
    seconds = _time_seconds(m.group(5), m.group(6), m.group(7), m.group(8))
    offset = _offset_seconds(m.group(9))
    if day is None or seconds is None or offset is None:
        return None
    return day + seconds - offset


def parse_combined_datetime(
    date_cell: str,
    time_cell: str,
    date_info: ColumnTypeInfo,
    time_info: ColumnTypeInfo,
) -> float | None:
    """Merge a DATE_ONLY cell and a TIME_ONLY cell into epoch seconds.

    Both cells must be non-empty and parse on their own; otherwise the
    result is ``None`` (never a half-computed value).
    """
    if not date_cell or not time_cell:
        return None
    day = parse_with_type(date_cell, date_info)
    if day is None:
        return None
    seconds = parse_with_type(time_cell, time_info)
    if seconds is None:
        return None
    return day + seconds


# -- Explicit user formats --------------------------------------------------

# Dialog-style tokens (``yyyy-MM-dd hh:mm:ss.zzz``), longest first.
_DIALOG_TOKENS = [
    ("yyyy", "%Y"),
    ("zzz", "%f"),
    ("MM", "%m"),
    ("dd", "%d"),
    ("HH", "%H"),
    ("hh", "%H"),
    ("mm", "%M"),
    ("ss", "%S"),
    ("yy", "%y"),
]
_DIALOG_TOKEN_RE = re.compile("|".join(tok for tok, _ in _DIALOG_TOKENS))


def to_strptime_format(user_format: str) -> str:
    """Translate a dialog-style format to strptime directives.

    Formats that already contain ``%`` directives are returned unchanged.
    """
    if "%" in user_format:
        return user_format
    mapping = dict(_DIALOG_TOKENS)
    return _DIALOG_TOKEN_RE.sub(lambda m: mapping[m.group(0)], user_format)


def format_parse_timestamp(cell: str, user_format: str) -> float | None:
    """Parse a cell with an explicit format, bypassing auto-detection.

    Naive results are interpreted as UTC. Returns ``None`` when the cell
    does not match the format.
    """
    if not cell or not user_format:
        return None
    try:
        parsed = datetime.strptime(cell, to_strptime_format(user_format))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (parsed - _EPOCH).total_seconds()
