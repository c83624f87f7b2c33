"""
Parsers sub-package for csv-ingest.

Turns raw delimited text into typed, time-indexed columns.

- base.py defines the result data model (CsvParseResult, CsvColumnData,
  CsvParseWarning, WarningType).
- tokenizer.py implements the quote-aware line splitter.
- header.py resolves the header line into unique column names.
- engine.py drives the row loop (parse_csv_data).

Column grammar detection and timestamp conversion live in
``csv_ingest.transforms``; delimiter and date + time pair detection live in
``csv_ingest.detect``.
"""
