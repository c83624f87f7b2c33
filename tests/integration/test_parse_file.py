"""
Integration tests: parse files end-to-end through the public API.

Files are written to ``tmp_path`` with the encodings and line endings seen
in real exports (UTF-8 BOM, CRLF), then inspected, parsed and exported.
"""

from __future__ import annotations

import pandas as pd
import pytest

import csv_ingest
from csv_ingest import (
    ColumnType,
    CsvParseConfig,
    WarningType,
    export_result,
    inspect_file,
    load_config,
    parse_file,
    save_config,
)
from tests.conftest import COMBINED_DATETIME_CSV, EUROPEAN_CSV, make_counter_csv

pytestmark = pytest.mark.integration

T0 = 1705314625.0


class TestInspectFile:
    """inspect_file() on files written to disk."""

    def test_combined_pair_detected(self, write_csv):
        config = inspect_file(write_csv(COMBINED_DATETIME_CSV))
        assert config.delimiter == ","
        assert [p.virtual_name for p in config.combined_columns] == ["Date + Time"]

    def test_bom_and_crlf(self, write_csv):
        text = "Date;Time;Value\r\n2024-01-15;10:30:25;1,5\r\n"
        config = inspect_file(write_csv(text, encoding="utf-8-sig"))
        assert config.delimiter == ";"
        assert config.combined_columns[0].date_column_index == 0

    def test_skip_rows(self, write_csv):
        config = inspect_file(write_csv("exported by logger\n" + EUROPEAN_CSV), skip_rows=1)
        assert config.delimiter == ";"
        assert config.skip_rows == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            inspect_file(tmp_path / "nope.csv")


class TestParseFile:
    """parse_file() with sniffed and explicit configurations."""

    def test_sniffed_config(self, write_csv):
        result = parse_file(write_csv(EUROPEAN_CSV))
        assert result.success
        assert result.column_names == ["a", "b"]
        assert result.columns[0].numeric_points == [(0.0, 1.5), (1.0, 4.0)]

    def test_bom_not_part_of_first_name(self, write_csv):
        result = parse_file(write_csv("time,v\r\n1,2\r\n", encoding="utf-8-sig"))
        assert result.column_names == ["time", "v"]
        assert result.columns[1].numeric_points == [(0.0, 2.0)]

    def test_activated_combined_pair(self, write_csv):
        path = write_csv(COMBINED_DATETIME_CSV)
        config = inspect_file(path).model_copy(update={"combined_column_index": 0})
        result = parse_file(path, config)
        assert result.combined_component_indices == {0, 1}
        assert result.columns[2].detected_type.type is ColumnType.NUMBER
        assert result.columns[2].numeric_points[0][0] == pytest.approx(T0)

    def test_progress_and_cancel(self, write_csv):
        path = write_csv(make_counter_csv(250))
        seen = []

        def progress(current, total):
            seen.append(current)
            return current < 200

        result = parse_file(path, progress=progress)
        assert seen == [100, 200]
        assert result.success is False
        assert result.lines_processed == 199

    def test_warnings_surface(self, write_csv):
        result = parse_file(write_csv("t,v\n1,1\n2\n0,3\n"), CsvParseConfig(time_column_index=0))
        assert [w.type for w in result.warnings] == [
            WarningType.WRONG_COLUMN_COUNT,
            WarningType.NON_MONOTONIC_TIME,
        ]


class TestEndToEnd:
    """inspect -> save config -> reload -> parse -> export."""

    def test_full_round(self, write_csv, tmp_path):
        src = write_csv(COMBINED_DATETIME_CSV, name="sensor.csv")
        config = inspect_file(src).model_copy(update={"combined_column_index": 0})

        cfg_path = tmp_path / "sensor.yaml"
        save_config(config, cfg_path)
        reloaded = load_config(cfg_path)
        assert reloaded == config

        result = parse_file(src, reloaded)
        written = export_result(result, tmp_path / "out", output_format="parquet", source_path=src)
        assert len(written) == 4

        numeric = pd.read_parquet(tmp_path / "out" / "numeric.parquet", engine="pyarrow")
        assert numeric["value"].tolist() == pytest.approx([23.5, 23.6, 23.7])
        meta = pd.read_parquet(tmp_path / "out" / "_meta.parquet", engine="pyarrow")
        assert set(meta["source_file"]) == {"sensor.csv"}
        assert meta["is_time_component"].tolist() == [True, True, False]

    def test_public_api_exports(self):
        for name in csv_ingest.__all__:
            assert hasattr(csv_ingest, name), name
