"""
Settings loading for opencode-notify.

Reads a JSON file and merges it over the defaults. A missing or invalid
file means defaults; a value of the wrong type falls back to its default.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

EVENT_TYPES = ('complete', 'error', 'permission', 'question')

DEFAULT_SETTINGS = {
    'events': {event: True for event in EVENT_TYPES},
    'sound': {'enabled': True},
}

CONFIG_FILENAME = 'opencode-notifications.json'


def get_config_path() -> Path:
    """Config file path, overridable with OPENCODE_NOTIFY_CONFIG."""
    override = os.environ.get('OPENCODE_NOTIFY_CONFIG')
    if override:
        return Path(override).expanduser()
    return Path.home() / '.config' / 'opencode' / CONFIG_FILENAME


def _merge_section(defaults: dict, parsed) -> dict:
    section = dict(defaults)
    if not isinstance(parsed, dict):
        return section
    for key, default in defaults.items():
        value = parsed.get(key)
        if isinstance(value, bool):
            section[key] = value
        elif value is not None:
            logger.debug(f"Ignoring non-boolean setting {key}={value!r}")
    return section


def load_settings(path: Optional[Path] = None) -> dict:
    """Load settings, falling back to defaults."""
    settings_file = path or get_config_path()
    try:
        parsed = json.loads(settings_file.read_text())
    except FileNotFoundError:
        return copy.deepcopy(DEFAULT_SETTINGS)
    except (OSError, ValueError) as e:
        logger.debug(f"Invalid settings file {settings_file}: {e}")
        return copy.deepcopy(DEFAULT_SETTINGS)

    if not isinstance(parsed, dict):
        return copy.deepcopy(DEFAULT_SETTINGS)

    return {
        section: _merge_section(defaults, parsed.get(section))
        for section, defaults in DEFAULT_SETTINGS.items()
    }


def is_event_enabled(settings: dict, event_type: str) -> bool:
    """Check if notifications for an event type are on."""
    if event_type not in EVENT_TYPES:
        return False
    return bool(settings.get('events', {}).get(event_type, False))


def is_sound_enabled(settings: dict) -> bool:
    return bool(settings.get('sound', {}).get('enabled', False))
