"""
Result data model for csv-ingest parsers.

The parse engine returns a ``CsvParseResult``. Its contract:

1. ``columns`` and ``column_names`` line up one-to-one with the header.
2. Each ``CsvColumnData`` keeps two parallel sequences: numeric points for
   cells that fit the column's grammar and string points for everything
   else. A mostly numeric column may therefore carry a few string points;
   the caller decides how to store them.
3. Row-level problems are never raised; they are collected as
   ``CsvParseWarning`` entries in file order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from csv_ingest.transforms.timestamps import ColumnTypeInfo

# (current_line, total_lines) -> False to cancel
ProgressCallback = Callable[[int, int], bool]


class WarningType(Enum):
    WRONG_COLUMN_COUNT = "wrong_column_count"
    INVALID_TIMESTAMP = "invalid_timestamp"
    NON_MONOTONIC_TIME = "non_monotonic_time"
    DUPLICATE_COLUMN_NAMES = "duplicate_column_names"


@dataclass
class CsvParseWarning:
    """A non-fatal problem found while parsing.

    Attributes:
        type: Category of the problem.
        line_number: 1-based physical line number in the input.
        detail: Human-readable description.
    """
    type: WarningType
    line_number: int
    detail: str


@dataclass
class CsvColumnData:
    """Accumulated values of one column.

    Attributes:
        name: Resolved (unique) column name.
        numeric_points: ``(timestamp, value)`` pairs in row order.
        string_points: ``(timestamp, text)`` pairs in row order, for STRING
            columns and for cells that failed to parse as the column type.
        detected_type: The column's grammar, recorded at the end of the run.
    """
    name: str
    numeric_points: list[tuple[float, float]] = field(default_factory=list)
    string_points: list[tuple[float, str]] = field(default_factory=list)
    detected_type: ColumnTypeInfo = field(default_factory=ColumnTypeInfo)


@dataclass
class CsvParseResult:
    """Standardized output of ``parse_csv_data()``.

    Attributes:
        success: ``False`` when the header could not be read or the
            progress callback cancelled the run. A cancelled result still
            carries the rows accepted so far.
        columns: One entry per header column.
        column_names: Resolved column names, same order as ``columns``.
        warnings: Row-level and header-level warnings in file order.
        time_is_non_monotonic: ``True`` once any real timestamp went
            backwards.
        lines_processed: Rows accepted into the columns.
        lines_skipped: Rows rejected (wrong arity or invalid timestamp).
        combined_component_indices: Indices of the two columns forming the
            active date + time pair; empty when no pair is active.
    """
    success: bool = False
    columns: list[CsvColumnData] = field(default_factory=list)
    column_names: list[str] = field(default_factory=list)
    warnings: list[CsvParseWarning] = field(default_factory=list)
    time_is_non_monotonic: bool = False
    lines_processed: int = 0
    lines_skipped: int = 0
    combined_component_indices: set[int] = field(default_factory=set)

    def warnings_of(self, warning_type: WarningType) -> list[CsvParseWarning]:
        """Return the warnings of one type, in file order."""
        return [w for w in self.warnings if w.type is warning_type]
