"""
Row-loop parse engine for csv-ingest.

``parse_csv_data()`` turns a delimited text buffer (or text stream) plus a
``CsvParseConfig`` into a ``CsvParseResult``. It is a pure, synchronous
batch transformation: nothing outlives the call and no module-level state
is touched, so independent parses may run concurrently.

Setup:
  1. Skip ``config.skip_rows`` lines.
  2. Read the header, resolve column names, warn once on duplicates.
  3. Resolve the active combined date + time pair, if any.

Per data line:
  1. Tokenize; blank lines are skipped silently.
  2. Rows with the wrong field count are skipped with a warning.
  3. Columns still UNDEFINED get their grammar from this row's cell, if
     non-empty (first non-empty cell wins, in any row).
  4. Resolve the timestamp: combined pair -> time column -> sample counter.
     Unparseable timestamps skip the row with a warning.
  5. Flag the first backwards step of a real timestamp (row kept).
  6. Append each cell to its column's numeric or string sequence.
  7. Poll the progress callback every 100 physical lines; ``False``
     cancels and returns the partial result with ``success=False``.
"""

from __future__ import annotations

import io
import logging
import math
from typing import TextIO

from csv_ingest.config import CsvParseConfig
from csv_ingest.parsers.base import (
    CsvColumnData,
    CsvParseResult,
    CsvParseWarning,
    ProgressCallback,
    WarningType,
)
from csv_ingest.parsers.header import has_duplicate_names, parse_header_line
from csv_ingest.parsers.tokenizer import split_line
from csv_ingest.transforms.timestamps import (
    ColumnType,
    ColumnTypeInfo,
    detect_column_type,
    format_parse_timestamp,
    parse_combined_datetime,
    parse_with_type,
)

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 100


def _strip_eol(line: str) -> str:
    """Drop the newline and one trailing carriage return."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def _count_remaining_lines(stream: TextIO) -> int:
    """Count lines left in a seekable stream without consuming them."""
    if not stream.seekable():
        return 0
    pos = stream.tell()
    total = sum(1 for _ in stream)
    stream.seek(pos)
    return total


class _ParseState:
    """Mutable state of one parse, owned by a single ``parse_csv_data`` call."""

    def __init__(self, config: CsvParseConfig, result: CsvParseResult, header_line_number: int) -> None:
        self.config = config
        self.result = result
        self.num_columns = len(result.column_names)
        self.column_types = [ColumnTypeInfo() for _ in range(self.num_columns)]
        self.prev_time = -math.inf
        self.line_number = header_line_number
        self.sample_count = 0
        self.pair = None
        self.time_index: int | None = None

        pair = config.active_pair
        if pair is not None:
            if max(pair.date_column_index, pair.time_column_index) < self.num_columns:
                self.pair = pair
                result.combined_component_indices = {
                    pair.date_column_index,
                    pair.time_column_index,
                }
            else:
                logger.warning(
                    "Combined pair '%s' refers to columns beyond the %d header "
                    "column(s); falling back to other time sources",
                    pair.virtual_name, self.num_columns,
                )

        idx = config.time_column_index
        if idx is not None and idx < self.num_columns:
            self.time_index = idx

    # -- Warnings -----------------------------------------------------------

    def warn(self, warning_type: WarningType, detail: str) -> None:
        logger.debug("Line %d: %s", self.line_number, detail)
        self.result.warnings.append(
            CsvParseWarning(type=warning_type, line_number=self.line_number, detail=detail)
        )

    def skip(self, warning_type: WarningType, detail: str) -> None:
        self.warn(warning_type, detail)
        self.result.lines_skipped += 1

    # -- Row handling -------------------------------------------------------

    def process_line(self, line: str) -> None:
        parts = split_line(_strip_eol(line), self.config.delimiter)
        if not parts:
            return

        if len(parts) != self.num_columns:
            self.skip(
                WarningType.WRONG_COLUMN_COUNT,
                f"Expected {self.num_columns} columns, got {len(parts)}",
            )
            return

        for i, cell in enumerate(parts):
            if self.column_types[i].type is ColumnType.UNDEFINED and cell:
                self.column_types[i] = detect_column_type(cell)

        timestamp = self._resolve_timestamp(parts)
        if timestamp is None:
            return

        self._ingest_values(parts, timestamp)
        self.sample_count += 1

    def _resolve_timestamp(self, parts: list[str]) -> float | None:
        """Return the row's timestamp, or None when the row was skipped."""
        if self.pair is not None:
            date_val = parts[self.pair.date_column_index]
            time_val = parts[self.pair.time_column_index]
            ts = parse_combined_datetime(
                date_val,
                time_val,
                self.column_types[self.pair.date_column_index],
                self.column_types[self.pair.time_column_index],
            )
            if ts is None:
                self.skip(
                    WarningType.INVALID_TIMESTAMP,
                    f'Invalid combined timestamp: "{date_val}" + "{time_val}"',
                )
                return None
        elif self.time_index is not None:
            t_str = parts[self.time_index]
            ts = None
            if self.config.custom_time_format:
                ts = format_parse_timestamp(t_str, self.config.custom_time_format)
            else:
                time_type = self.column_types[self.time_index]
                if time_type.type is not ColumnType.STRING:
                    ts = parse_with_type(t_str, time_type)
            if ts is None:
                self.skip(WarningType.INVALID_TIMESTAMP, f'Invalid timestamp: "{t_str}"')
                return None
        else:
            return float(self.sample_count)

        if ts < self.prev_time and not self.result.time_is_non_monotonic:
            self.result.time_is_non_monotonic = True
            self.warn(WarningType.NON_MONOTONIC_TIME, "Time is not monotonically increasing")
        self.prev_time = ts
        return ts

    def _ingest_values(self, parts: list[str], timestamp: float) -> None:
        skip = self.result.combined_component_indices
        for i, cell in enumerate(parts):
            if i in skip:
                continue
            col_type = self.column_types[i]
            if not cell or col_type.type is ColumnType.UNDEFINED:
                continue
            column = self.result.columns[i]
            value = None
            if col_type.type is not ColumnType.STRING:
                value = parse_with_type(cell, col_type)
            if value is None:
                column.string_points.append((timestamp, cell))
            else:
                column.numeric_points.append((timestamp, value))

    def finalize(self, success: bool) -> CsvParseResult:
        for column, col_type in zip(self.result.columns, self.column_types):
            column.detected_type = col_type
        self.result.lines_processed = self.sample_count
        self.result.success = success
        return self.result


def parse_csv_data(
    source: str | TextIO,
    config: CsvParseConfig | None = None,
    progress: ProgressCallback | None = None,
) -> CsvParseResult:
    """Parse delimited text into typed, time-indexed columns.

    Args:
        source: The whole text as a string, or a text stream positioned at
            the start of the data.
        config: Parsing configuration; defaults to ``CsvParseConfig()``.
        progress: Optional ``progress(current_line, total_lines)`` callback,
            polled every 100 physical lines. Returning ``False`` cancels.

    Returns:
        ``CsvParseResult``. ``success`` is ``False`` when the header could
        not be read (all other fields empty) or when the run was cancelled
        (fields hold the partial data). Malformed rows never raise; they
        show up in ``warnings``.
    """
    if config is None:
        config = CsvParseConfig()
    stream = io.StringIO(source) if isinstance(source, str) else source
    result = CsvParseResult()

    for _ in range(config.skip_rows):
        if not stream.readline():
            logger.info("Input ended while skipping %d leading row(s)", config.skip_rows)
            return result

    header_line = stream.readline()
    if not header_line:
        logger.info("No header line found; nothing to parse")
        return result
    header_line = _strip_eol(header_line)

    result.column_names = parse_header_line(header_line, config.delimiter)
    result.columns = [CsvColumnData(name=name) for name in result.column_names]

    state = _ParseState(config, result, header_line_number=config.skip_rows + 1)
    if has_duplicate_names(header_line, config.delimiter):
        state.warn(
            WarningType.DUPLICATE_COLUMN_NAMES,
            "Duplicate column names detected; suffixes added",
        )

    total_lines = config.total_lines
    if progress is not None and total_lines <= 0:
        total_lines = _count_remaining_lines(stream)

    logger.info(
        "Parsing %d column(s), delimiter=%r, time source=%s",
        state.num_columns,
        config.delimiter,
        _describe_time_source(state),
    )

    for line in stream:
        state.line_number += 1
        state.process_line(line)

        if progress is not None and state.line_number % PROGRESS_INTERVAL == 0:
            if not progress(state.line_number, total_lines):
                logger.info("Parse cancelled at line %d", state.line_number)
                return state.finalize(success=False)

    state.finalize(success=True)
    logger.info(
        "Parsed %d row(s), skipped %d, %d warning(s)%s",
        result.lines_processed,
        result.lines_skipped,
        len(result.warnings),
        " (time is non-monotonic)" if result.time_is_non_monotonic else "",
    )
    return result


def _describe_time_source(state: _ParseState) -> str:
    if state.pair is not None:
        return f"combined '{state.pair.virtual_name}'"
    if state.time_index is not None:
        return f"column '{state.result.column_names[state.time_index]}'"
    return "sample counter"
