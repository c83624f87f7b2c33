"""
Demo script: parse delimited text files via the public API.

Usage:
    uv run python scripts/run_parse.py data.csv [more.csv ...]
    uv run python scripts/run_parse.py data.csv --combine --export parquet

For each file, the delimiter and any date + time column pairs are
detected first. ``--combine`` uses the first detected pair as the time
source. ``--export FORMAT`` writes the parsed tables under outputs/<name>/
and saves the config used next to them as outputs/<name>.yaml.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

OUTPUT_ROOT = Path("outputs")

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_parse")


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _parse_args(argv: list[str]) -> tuple[list[str], bool, str | None]:
    """Split argv into (input files, --combine flag, --export format).

    The token after ``--export`` is always consumed as the format.

    Raises:
        ValueError: If ``--export`` is the last argument.
    """
    files: list[str] = []
    combine = False
    export_format: str | None = None
    it = iter(argv)
    for arg in it:
        if arg == "--combine":
            combine = True
        elif arg == "--export":
            export_format = next(it, None)
            if export_format is None:
                raise ValueError("--export needs a format (csv or parquet)")
        else:
            files.append(arg)
    return files, combine, export_format


def _progress(current: int, total: int) -> bool:
    if current % 10_000 == 0:
        log.info("  ... line %s / %s", f"{current:,}", f"{total:,}")
    return True


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    import csv_ingest

    try:
        input_files, combine, export_format = _parse_args(sys.argv[1:])
    except ValueError as exc:
        log.error("%s", exc)
        sys.exit(2)

    if not input_files:
        log.error("No input files given")
        sys.exit(2)

    for input_path in input_files:
        if not Path(input_path).exists():
            log.warning("SKIP  %s  (file not found)", input_path)
            continue

        log.info("=" * 70)
        log.info("Processing: %s", input_path)

        config = csv_ingest.inspect_file(input_path)
        log.info("  delimiter   : %r", config.delimiter)
        for pair in config.combined_columns:
            log.info("  date+time   : %s", pair.virtual_name)
        if combine and config.combined_columns:
            config = config.model_copy(update={"combined_column_index": 0})
        log.info("=" * 70)

        result = csv_ingest.parse_file(input_path, config, progress=_progress)

        for column in result.columns:
            log.info(
                "  %-30s %-10s %8s numeric  %8s string",
                column.name,
                column.detected_type.type.value,
                f"{len(column.numeric_points):,}",
                f"{len(column.string_points):,}",
            )
        for warning in result.warnings:
            log.warning("  line %d: %s", warning.line_number, warning.detail)

        if export_format:
            name = Path(input_path).stem
            written = csv_ingest.export_result(
                result,
                OUTPUT_ROOT / name,
                output_format=export_format,
                source_path=input_path,
            )
            csv_ingest.save_config(config, OUTPUT_ROOT / f"{name}.yaml")
            log.info("  wrote %d file(s)", len(written))

        log.info("Done: %s (%d rows, %d skipped)\n", input_path,
                 result.lines_processed, result.lines_skipped)

    log.info("All files processed.")


if __name__ == "__main__":
    main()
