# Test fixtures package
from tests.fixtures.fakes import (
    BrokenDetector,
    FakeDetector,
    FakeProbes,
)
from tests.fixtures.sample_data import (
    SAMPLE_SETTINGS,
    SAMPLE_SETTINGS_QUIET,
    SAMPLE_EVENTS,
)

__all__ = [
    "BrokenDetector",
    "FakeDetector",
    "FakeProbes",
    "SAMPLE_SETTINGS",
    "SAMPLE_SETTINGS_QUIET",
    "SAMPLE_EVENTS",
]
