"""
Configuration models and YAML I/O for csv-ingest.

This module defines the Pydantic models that describe how one delimited
text buffer is parsed, plus helpers for saving and reloading them so a
file can be re-parsed later with the same choices.

Key models:
- CombinedColumnPair: Two adjacent columns (date + time) that can act as
  one virtual timestamp source.
- CsvParseConfig: Delimiter, time source, custom format, rows to skip and
  the detected combined pairs.

Key functions:
- load_config(path) -> CsvParseConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.

Time source selection, in priority order:
1. ``combined_column_index`` points at an entry of ``combined_columns``.
2. ``time_column_index`` names a column holding the timestamp.
3. Neither: rows are indexed by a generated sample counter.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from csv_ingest.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


class CombinedColumnPair(BaseModel):
    """Adjacent date-only and time-only columns merged into one timestamp."""

    date_column_index: int = Field(..., ge=0)
    time_column_index: int = Field(..., ge=0)
    virtual_name: str = Field(..., description='e.g. "Date + Time"')

    @model_validator(mode="after")
    def _check_distinct(self) -> CombinedColumnPair:
        if self.date_column_index == self.time_column_index:
            raise ValueError(
                "date_column_index and time_column_index must differ "
                f"(both are {self.date_column_index})"
            )
        return self


class CsvParseConfig(BaseModel):
    """Settings for a single parse.

    Attributes:
        delimiter: Single-character field separator.
        time_column_index: Column holding the timestamp. ``None`` (or any
            negative value) means rows are numbered 0, 1, 2, ...
        custom_time_format: Explicit strptime-style (or
            ``yyyy-MM-dd hh:mm:ss`` style) format for the time column.
            ``None`` means auto-detect.
        skip_rows: Lines to skip before the header.
        total_lines: Line count hint for progress reporting; 0 = unknown.
        combined_columns: Date + time column pairs found in the file.
        combined_column_index: Which pair to use as the time source;
            ``None`` (or negative) means no pair is active.
    """

    delimiter: str = Field(",", min_length=1, max_length=1)
    time_column_index: int | None = None
    custom_time_format: str | None = None
    skip_rows: int = Field(0, ge=0)
    total_lines: int = Field(0, ge=0)
    combined_columns: list[CombinedColumnPair] = Field(default_factory=list)
    combined_column_index: int | None = None

    @field_validator("time_column_index", "combined_column_index")
    @classmethod
    def _negative_means_unset(cls, value: int | None) -> int | None:
        if value is not None and value < 0:
            return None
        return value

    @field_validator("custom_time_format")
    @classmethod
    def _blank_format_means_auto(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def active_pair(self) -> CombinedColumnPair | None:
        """The combined pair selected as the time source, if any."""
        idx = self.combined_column_index
        if idx is None or idx >= len(self.combined_columns):
            return None
        return self.combined_columns[idx]


_YAML_HEADER = (
    "# csv-ingest parse configuration\n"
    "# Edit this file to change the delimiter, time column or format.\n\n"
)


def load_config(path: str | Path) -> CsvParseConfig:
    """Load and validate a saved parse configuration.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConfigValidationError: If the file is empty or not a YAML mapping.
        pydantic.ValidationError: If a value breaks the model constraints.
    """
    cfg_path = Path(path)
    if not cfg_path.is_file():
        raise FileNotFoundError(f"Parse config not found: {cfg_path}")

    raw = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    if raw is None:
        raise ConfigValidationError(f"Parse config is empty: {cfg_path}")
    if not isinstance(raw, dict):
        raise ConfigValidationError(
            f"Parse config must be a mapping, got {type(raw).__name__}: {cfg_path}"
        )

    config = CsvParseConfig.model_validate(raw)
    logger.info(
        "Loaded parse config %s (delimiter=%r, %d date+time pair(s))",
        cfg_path, config.delimiter, len(config.combined_columns),
    )
    return config


def save_config(config: CsvParseConfig, path: str | Path) -> None:
    """Write *config* as commented YAML, creating parent directories."""
    cfg_path = Path(path)
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    body = yaml.dump(
        config.model_dump(mode="json"),
        allow_unicode=True,
        default_flow_style=False,
        sort_keys=False,
    )
    cfg_path.write_text(_YAML_HEADER + body, encoding="utf-8")
    logger.info("Saved parse config to %s", cfg_path)
