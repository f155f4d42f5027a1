"""Shared pytest fixtures for opencode-notify tests."""

import copy
import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add scripts to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "scripts"))

from probe import ProbeResult  # noqa: E402
from tests.fixtures.fakes import FakeDetector, FakeProbes  # noqa: E402
from tests.fixtures.sample_data import (  # noqa: E402
    SAMPLE_SETTINGS,
    SAMPLE_SETTINGS_QUIET,
)


# =============================================================================
# PROBE FIXTURES
# =============================================================================


@pytest.fixture
def fake_probes(mocker):
    """Route focus detector probes to a FakeProbes instance."""
    import focus

    probes = FakeProbes()
    mocker.patch.object(focus, "run_command", probes.run_command)
    mocker.patch.object(focus, "command_exists", probes.command_exists)
    return probes


@pytest.fixture
def mock_delivery(mocker):
    """Mock notify.run_command so nothing is actually shown or played."""
    import notify

    return mocker.patch.object(
        notify, "run_command",
        new=AsyncMock(return_value=ProbeResult(output="")),
    )


# =============================================================================
# DETECTOR FIXTURES
# =============================================================================


@pytest.fixture
def focused_detector():
    return FakeDetector(focused=True)


@pytest.fixture
def unfocused_detector():
    return FakeDetector(focused=False)


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================


@pytest.fixture
def settings():
    """All events on, sound on."""
    return copy.deepcopy(SAMPLE_SETTINGS)


@pytest.fixture
def quiet_settings():
    """Only error and question events on, sound off."""
    return copy.deepcopy(SAMPLE_SETTINGS_QUIET)


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point OPENCODE_NOTIFY_CONFIG at a temp file; write JSON via .write()."""
    path = tmp_path / "opencode-notifications.json"
    monkeypatch.setenv("OPENCODE_NOTIFY_CONFIG", str(path))

    class ConfigFile:
        def __init__(self):
            self.path = path

        def write(self, data):
            text = data if isinstance(data, str) else json.dumps(data)
            path.write_text(text)
            return path

    return ConfigFile()


@pytest.fixture
def sender():
    """Delivery collaborator stand-in."""
    return AsyncMock()


# =============================================================================
# ENVIRONMENT FIXTURES
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment marker the detector factory reads."""
    for var in ("XDG_SESSION_TYPE", "DISPLAY", "TMUX_PANE"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
