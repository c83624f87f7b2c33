"""
Exporter for csv-ingest.

Flattens a ``CsvParseResult`` into long-form pandas tables and writes them
to an output directory as CSV or Parquet.

Tables:
  numeric   -- one row per numeric point: (column, timestamp, value)
  string    -- one row per string point:  (column, timestamp, value)
  _warnings -- one row per parse warning: (type, line_number, detail)
  _meta     -- one row per column, see ``meta.build_meta_table``

Output file naming convention:
  {table_name}.{format}  -- e.g., "numeric.parquet", "_meta.csv"

Long form keeps every column's own timestamps, so columns that skipped
different rows (empty cells, string fallbacks) need no alignment.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Literal

import pandas as pd

from csv_ingest.exceptions import ExportError
from csv_ingest.meta import build_meta_table
from csv_ingest.parsers.base import CsvParseResult

logger = logging.getLogger(__name__)


def result_to_frames(result: CsvParseResult) -> dict[str, pd.DataFrame]:
    """Convert a parse result into long-form DataFrames.

    Returns:
        Dict with keys ``numeric``, ``string`` and ``_warnings``. Columns
        appear in header order, points in row order.
    """
    numeric_rows = [
        (column.name, ts, value)
        for column in result.columns
        for ts, value in column.numeric_points
    ]
    string_rows = [
        (column.name, ts, text)
        for column in result.columns
        for ts, text in column.string_points
    ]
    warning_rows = [(w.type.value, w.line_number, w.detail) for w in result.warnings]

    numeric = pd.DataFrame(numeric_rows, columns=["column", "timestamp", "value"])
    numeric = numeric.astype({"column": str, "timestamp": "float64", "value": "float64"})
    string = pd.DataFrame(string_rows, columns=["column", "timestamp", "value"])
    string = string.astype({"column": str, "timestamp": "float64", "value": str})
    warnings = pd.DataFrame(warning_rows, columns=["type", "line_number", "detail"])
    warnings = warnings.astype({"type": str, "line_number": "int64", "detail": str})

    return {"numeric": numeric, "string": string, "_warnings": warnings}


def _to_csv(df: pd.DataFrame, path: Path) -> None:
    # BOM so spreadsheet tools pick up UTF-8 column names
    df.to_csv(path, index=False, encoding="utf-8-sig")


def _to_parquet(df: pd.DataFrame, path: Path) -> None:
    df.to_parquet(path, index=False, engine="pyarrow")


_WRITERS: dict[str, Callable[[pd.DataFrame, Path], None]] = {
    "csv": _to_csv,
    "parquet": _to_parquet,
}


def export_result(
    result: CsvParseResult,
    output_dir: str | Path,
    output_format: Literal["csv", "parquet"] = "parquet",
    source_path: str | Path | None = None,
) -> list[str]:
    """Write the parsed columns, warnings and ``_meta`` table to disk.

    Args:
        result: The parse result to export. A cancelled (partial) result is
            written as-is, with a logged warning.
        output_dir: Target directory, created with parents when missing.
        output_format: "csv" or "parquet".
        source_path: Original input file, recorded in ``_meta``.

    Returns:
        Paths written, as strings: numeric, string, _warnings, _meta.

    Raises:
        ExportError: For an unknown *output_format* or a failed write.
    """
    writer = _WRITERS.get(output_format)
    if writer is None:
        raise ExportError(
            f"Unsupported output format: '{output_format}' "
            f"(expected one of {sorted(_WRITERS)})"
        )
    if not result.success:
        logger.warning("Exporting an unsuccessful (partial) parse result")

    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)

    tables = result_to_frames(result)
    tables["_meta"] = build_meta_table(result, source_path)

    paths: list[str] = []
    for name, frame in tables.items():
        path = target / f"{name}.{output_format}"
        try:
            writer(frame, path)
        except Exception as exc:
            raise ExportError(f"Could not write table '{name}' to {path}: {exc}") from exc
        logger.info("Wrote %s: %d row(s)", path.name, len(frame))
        paths.append(str(path))

    return paths
