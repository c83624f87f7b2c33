"""
csv-ingest: delimited-text ingestion and type inference for time series.

Public API surface:

- ``parse_csv_data(source, config, progress)`` -- the core engine. Takes a
  text buffer or text stream and a ``CsvParseConfig`` and returns a
  ``CsvParseResult`` with typed, time-indexed columns and warnings.

- ``inspect_file(path)`` -- load-time detection. Sniffs the delimiter and
  any adjacent date + time column pairs and returns a ``CsvParseConfig``
  to review or edit before parsing.

- ``parse_file(path, config, progress)`` -- convenience wrapper: reads the
  file, sniffs a config when none is given, and runs the engine.

- ``export_result(result, output_dir, ...)`` -- write the parsed columns
  as CSV or Parquet tables.
"""

from __future__ import annotations

import logging
from pathlib import Path

from csv_ingest.config import CombinedColumnPair, CsvParseConfig, load_config, save_config
from csv_ingest.detect import detect_combined_datetime_columns, detect_delimiter, sniff_config
from csv_ingest.export import export_result, result_to_frames
from csv_ingest.parsers.base import (
    CsvColumnData,
    CsvParseResult,
    CsvParseWarning,
    ProgressCallback,
    WarningType,
)
from csv_ingest.parsers.engine import parse_csv_data
from csv_ingest.parsers.header import parse_header_line
from csv_ingest.parsers.tokenizer import split_line
from csv_ingest.transforms.timestamps import ColumnType, ColumnTypeInfo

__all__ = [
    "parse_csv_data",
    "parse_file",
    "inspect_file",
    "export_result",
    "result_to_frames",
    "detect_delimiter",
    "detect_combined_datetime_columns",
    "sniff_config",
    "split_line",
    "parse_header_line",
    "load_config",
    "save_config",
    "CsvParseConfig",
    "CombinedColumnPair",
    "CsvParseResult",
    "CsvColumnData",
    "CsvParseWarning",
    "WarningType",
    "ColumnType",
    "ColumnTypeInfo",
    "ProgressCallback",
]

logger = logging.getLogger(__name__)


def _read_text(path: str | Path) -> str:
    # newline="" keeps "\r\n" intact; the engine strips the "\r" itself
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return f.read()


def inspect_file(path: str | Path, skip_rows: int = 0) -> CsvParseConfig:
    """Detect a parse configuration for a delimited text file.

    Args:
        path: Path to the file.
        skip_rows: Lines preceding the header.

    Returns:
        A ``CsvParseConfig`` with the detected delimiter and date + time
        pairs (not activated).

    Raises:
        OSError: If the file cannot be read.
    """
    logger.info("inspect_file() -- path=%s", path)
    return sniff_config(_read_text(path), skip_rows=skip_rows)


def parse_file(
    path: str | Path,
    config: CsvParseConfig | None = None,
    progress: ProgressCallback | None = None,
) -> CsvParseResult:
    """Read a delimited text file and parse it.

    Args:
        path: Path to the file (UTF-8, an optional BOM is dropped).
        config: Parsing configuration. When ``None``, one is sniffed from
            the file (delimiter only; rows indexed by sample counter).
        progress: Optional progress callback, see ``parse_csv_data``.

    Returns:
        The ``CsvParseResult``.

    Raises:
        OSError: If the file cannot be read.
    """
    text = _read_text(path)
    if config is None:
        config = sniff_config(text)
    if progress is not None and config.total_lines <= 0:
        config = config.model_copy(update={"total_lines": text.count("\n")})

    logger.info("parse_file() -- path=%s, delimiter=%r", path, config.delimiter)
    return parse_csv_data(text, config, progress)
