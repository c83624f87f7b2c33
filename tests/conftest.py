"""
Shared test fixtures for csv-ingest tests.

Sample CSV contents used by more than one test module are defined here as
module-level constants; ``write_csv`` writes one to a temporary file.
"""

from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Sample inputs -- edit here if the canonical samples change
# ---------------------------------------------------------------------------
COMBINED_DATETIME_CSV = (
    "Date,Time,Temperature\n"
    "2024-01-15,10:30:25.000,23.5\n"
    "2024-01-15,10:30:26.000,23.6\n"
    "2024-01-15,10:30:27.000,23.7\n"
)

EUROPEAN_CSV = "a;b\n1,5;2,3\n4,0;5,7\n"


def make_counter_csv(rows: int) -> str:
    """Single-column CSV with *rows* integer data lines."""
    return "x\n" + "".join(f"{i}\n" for i in range(rows))


@pytest.fixture
def write_csv(tmp_path):
    """Write text to ``tmp_path/<name>`` and return the path."""

    def _write(text: str, name: str = "data.csv", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_bytes(text.encode(encoding))
        return path

    return _write


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (parses files end-to-end)",
    )
