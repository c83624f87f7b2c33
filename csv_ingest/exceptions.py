"""
Custom exception hierarchy for csv-ingest.

The parse engine itself never raises for malformed data: bad rows become
``CsvParseWarning`` entries on the result. These exceptions cover the
library surface around it (configuration files and export).
"""


class CsvIngestError(Exception):
    """Base exception for all csv-ingest errors."""


class ConfigValidationError(CsvIngestError):
    """Raised when a saved parse configuration cannot be used.

    This can happen if:
    - The YAML file is empty.
    - The YAML content is not a mapping.
    """


class ExportError(CsvIngestError):
    """Raised when the exporter fails to write output files.

    For example, permission errors, disk full, or unsupported format.
    """
