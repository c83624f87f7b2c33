"""
Unit tests for configuration models and YAML I/O (csv_ingest.config).
"""

from __future__ import annotations

import pytest
import yaml
from pydantic import ValidationError

from csv_ingest.config import CombinedColumnPair, CsvParseConfig, load_config, save_config
from csv_ingest.exceptions import ConfigValidationError, CsvIngestError


def _pair(date_idx: int = 0, time_idx: int = 1) -> CombinedColumnPair:
    return CombinedColumnPair(
        date_column_index=date_idx, time_column_index=time_idx, virtual_name="Date + Time"
    )


# ---------------------------------------------------------------------------
# Model validation
# ---------------------------------------------------------------------------

class TestCsvParseConfig:
    """Tests for CsvParseConfig validation and defaults."""

    def test_defaults(self):
        config = CsvParseConfig()
        assert config.delimiter == ","
        assert config.time_column_index is None
        assert config.custom_time_format is None
        assert config.skip_rows == 0
        assert config.total_lines == 0
        assert config.combined_columns == []
        assert config.active_pair is None

    def test_negative_indices_mean_unset(self):
        config = CsvParseConfig(time_column_index=-1, combined_column_index=-1)
        assert config.time_column_index is None
        assert config.combined_column_index is None

    def test_blank_custom_format_means_auto(self):
        assert CsvParseConfig(custom_time_format="  ").custom_time_format is None

    @pytest.mark.parametrize("delimiter", ["", ",,"])
    def test_delimiter_must_be_one_character(self, delimiter):
        with pytest.raises(ValidationError):
            CsvParseConfig(delimiter=delimiter)

    def test_negative_skip_rows_rejected(self):
        with pytest.raises(ValidationError):
            CsvParseConfig(skip_rows=-1)

    def test_active_pair(self):
        config = CsvParseConfig(combined_columns=[_pair()], combined_column_index=0)
        assert config.active_pair == _pair()

    def test_active_pair_index_out_of_range(self):
        config = CsvParseConfig(combined_columns=[_pair()], combined_column_index=3)
        assert config.active_pair is None


class TestCombinedColumnPair:
    """Tests for CombinedColumnPair validation."""

    def test_same_index_rejected(self):
        with pytest.raises(ValidationError, match="must differ"):
            _pair(2, 2)

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            _pair(-1, 0)


# ---------------------------------------------------------------------------
# YAML I/O
# ---------------------------------------------------------------------------

class TestConfigIO:
    """Tests for save_config() / load_config()."""

    def test_round_trip(self, tmp_path):
        config = CsvParseConfig(
            delimiter=";",
            time_column_index=2,
            custom_time_format="%d/%m/%Y %H:%M:%S",
            skip_rows=3,
            combined_columns=[_pair()],
            combined_column_index=0,
        )
        path = tmp_path / "cfg.yaml"
        save_config(config, path)
        assert load_config(path) == config

    def test_saved_file_has_header_comment(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        save_config(CsvParseConfig(delimiter="\t"), path)
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# csv-ingest parse configuration")
        assert yaml.safe_load(text)["delimiter"] == "\t"

    def test_save_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "cfg.yaml"
        save_config(CsvParseConfig(), path)
        assert path.exists()

    def test_load_partial_mapping_uses_defaults(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("delimiter: ';'\n", encoding="utf-8")
        config = load_config(path)
        assert config.delimiter == ";"
        assert config.skip_rows == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="empty"):
            load_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(CsvIngestError, match="mapping"):
            load_config(path)

    def test_schema_violation(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("skip_rows: -4\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)
