"""
Meta table builder for csv-ingest.

Builds the flat ``_meta`` table written alongside the exported columns.
One row per parsed column.

Purpose:
  The ``_meta`` table is DESCRIPTIVE -- it records what the parser found
  (detected grammar, how many cells landed in each sequence, which columns
  were consumed as date/time components) together with source lineage
  (file name, hash, processing time).
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from csv_ingest.parsers.base import CsvParseResult

logger = logging.getLogger(__name__)

META_COLUMNS = [
    "column_index", "column_name", "detected_type", "type_format",
    "has_fractional", "numeric_points", "string_points", "is_time_component",
    "source_file", "source_hash", "processed_at",
]


def _sha256_of(path: Path) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        while True:
            block = f.read(1 << 16)
            if not block:
                break
            digest.update(block)
    return digest.hexdigest()


def _source_lineage(source_path: str | Path | None) -> tuple[str, str]:
    """Return ``(file_name, sha256)``; both empty for in-memory input."""
    if source_path is None:
        return "", ""
    path = Path(source_path)
    try:
        return path.name, _sha256_of(path)
    except FileNotFoundError:
        logger.warning("Cannot hash missing source file %s; leaving source_hash empty", path)
        return path.name, ""


def build_meta_table(
    result: CsvParseResult,
    source_path: str | Path | None = None,
) -> pd.DataFrame:
    """Build the flat ``_meta`` table.

    Args:
        result: A finished (or cancelled) parse result.
        source_path: The file the result came from. When ``None`` (parsed
            from an in-memory buffer) the source columns are left empty.

    Returns:
        DataFrame with one row per column and the ``META_COLUMNS`` schema.
    """
    source_file, source_hash = _source_lineage(source_path)
    stamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
    components = result.combined_component_indices

    records = [
        (
            idx,
            column.name,
            column.detected_type.type.value,
            column.detected_type.format,
            column.detected_type.has_fractional,
            len(column.numeric_points),
            len(column.string_points),
            idx in components,
            source_file,
            source_hash,
            stamp,
        )
        for idx, column in enumerate(result.columns)
    ]

    logger.info("_meta: %d column row(s) for %s", len(records), source_file or "<buffer>")
    return pd.DataFrame(records, columns=META_COLUMNS)
