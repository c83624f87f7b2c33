"""
Transforms sub-package for csv-ingest.

Cell-level conversions used by the parse engine:
  - numbers.py: Numeric grammar (decimal, scientific, hex, decimal comma).
  - timestamps.py: Column type classification and date/time to epoch
    seconds conversion.

Each transform works on one trimmed cell and returns ``None`` instead of
raising when the cell does not fit, so the engine can demote a single cell
without dropping its row.
"""
