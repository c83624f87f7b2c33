"""
Unit tests for load-time detection (csv_ingest.detect).

Covers delimiter auto-detection, adjacent date + time pair detection and
config sniffing from small inline CSV strings.
"""

from __future__ import annotations

import pytest

from csv_ingest.detect import detect_combined_datetime_columns, detect_delimiter, sniff_config
from csv_ingest.transforms.timestamps import ColumnType, ColumnTypeInfo
from tests.conftest import COMBINED_DATETIME_CSV, EUROPEAN_CSV

DATE = ColumnTypeInfo(ColumnType.DATE_ONLY, "%Y-%m-%d")
TIME = ColumnTypeInfo(ColumnType.TIME_ONLY, "%H:%M:%S")
NUMBER = ColumnTypeInfo(ColumnType.NUMBER)


class TestDetectDelimiter:
    """Tests for detect_delimiter()."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("a,b,c", ","),
            ("a;b;c", ";"),
            ("a\tb\tc", "\t"),
            ("a b c d", " "),
        ],
    )
    def test_single_candidate(self, line, expected):
        assert detect_delimiter(line) == expected

    def test_tab_beats_comma_on_tie(self):
        assert detect_delimiter("a\tb,c") == "\t"

    def test_semicolon_beats_comma_on_tie(self):
        assert detect_delimiter("a;b,c") == ";"

    def test_highest_count_wins(self):
        assert detect_delimiter("a;b,c,d") == ","

    def test_delimiters_inside_quotes_ignored(self):
        assert detect_delimiter('"a,b"\tc\td') == "\t"

    def test_consecutive_spaces_count_once(self):
        """Two space runs qualify even though each run has several spaces."""
        assert detect_delimiter("time    x    y") == " "

    def test_single_space_run_does_not_qualify(self):
        assert detect_delimiter("time    value") == ","

    def test_default_comma(self):
        assert detect_delimiter("singlevalue") == ","

    def test_empty_line_defaults_to_comma(self):
        assert detect_delimiter("") == ","


class TestDetectCombinedDateTimeColumns:
    """Tests for detect_combined_datetime_columns()."""

    def test_adjacent_pair(self):
        pairs = detect_combined_datetime_columns(["Date", "Time", "Value"], [DATE, TIME, NUMBER])
        assert len(pairs) == 1
        assert pairs[0].date_column_index == 0
        assert pairs[0].time_column_index == 1
        assert pairs[0].virtual_name == "Date + Time"

    def test_reversed_order(self):
        pairs = detect_combined_datetime_columns(["Time", "Date", "Value"], [TIME, DATE, NUMBER])
        assert len(pairs) == 1
        assert pairs[0].date_column_index == 1
        assert pairs[0].time_column_index == 0
        assert pairs[0].virtual_name == "Time + Date"

    def test_non_adjacent_no_pair(self):
        pairs = detect_combined_datetime_columns(["Date", "Value", "Time"], [DATE, NUMBER, TIME])
        assert pairs == []

    def test_multiple_pairs(self):
        pairs = detect_combined_datetime_columns(
            ["Date1", "Time1", "Date2", "Time2"], [DATE, TIME, DATE, TIME]
        )
        assert [(p.date_column_index, p.time_column_index) for p in pairs] == [(0, 1), (2, 3)]

    def test_pairs_do_not_overlap(self):
        """DATE, TIME, DATE: the middle time column is consumed once."""
        pairs = detect_combined_datetime_columns(["d1", "t", "d2"], [DATE, TIME, DATE])
        assert len(pairs) == 1
        assert pairs[0].date_column_index == 0

    def test_two_dates_not_paired(self):
        assert detect_combined_datetime_columns(["a", "b"], [DATE, DATE]) == []


class TestSniffConfig:
    """Tests for sniff_config()."""

    def test_detects_combined_pair(self):
        config = sniff_config(COMBINED_DATETIME_CSV)
        assert config.delimiter == ","
        assert len(config.combined_columns) == 1
        assert config.combined_columns[0].virtual_name == "Date + Time"
        # Detected, not activated
        assert config.active_pair is None

    def test_semicolon_file(self):
        config = sniff_config(EUROPEAN_CSV)
        assert config.delimiter == ";"
        assert config.combined_columns == []

    def test_skip_rows(self):
        config = sniff_config("# meta\n" + COMBINED_DATETIME_CSV, skip_rows=1)
        assert config.skip_rows == 1
        assert len(config.combined_columns) == 1

    def test_header_only(self):
        config = sniff_config("a\tb\n")
        assert config.delimiter == "\t"
        assert config.combined_columns == []

    def test_empty_text(self):
        config = sniff_config("")
        assert config.delimiter == ","
