"""
Terminal focus detection.

Detectors capture an identity for the terminal window once at startup, then
re-query on every event to answer "is the user looking at the terminal?".
Any failure answers "no", so a broken probe never silences notifications.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, NamedTuple, Optional, Protocol

from probe import command_exists, run_command

logger = logging.getLogger(__name__)

# Identity returned by the fallback detector
UNSUPPORTED_ID = 'unsupported'


class FocusDetector(Protocol):
    """A display-server or multiplexer specific focus check."""

    name: str

    async def init(self) -> Optional[str]:
        """Capture the terminal identity, or None if detection is unsupported."""
        ...

    async def is_focused(self, terminal_id: Optional[str]) -> bool:
        """Check if the terminal identified by terminal_id has focus."""
        ...


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Environment markers that drive detector selection."""

    session_type: Optional[str] = None
    display: Optional[str] = None
    tmux_pane: Optional[str] = None

    @classmethod
    def from_environ(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> 'EnvironmentSnapshot':
        env = os.environ if environ is None else environ
        return cls(
            session_type=env.get('XDG_SESSION_TYPE') or None,
            display=env.get('DISPLAY') or None,
            tmux_pane=env.get('TMUX_PANE') or None,
        )


class X11FocusDetector:
    """X11 focus detection via xdotool's active window id."""

    name = 'X11 (xdotool)'

    async def init(self) -> Optional[str]:
        if not await command_exists('xdotool'):
            logger.debug("xdotool not found, focus detection unsupported")
            return None
        return await self._active_window()

    async def is_focused(self, terminal_id: Optional[str]) -> bool:
        if not terminal_id:
            return False
        return await self._active_window() == terminal_id

    async def _active_window(self) -> Optional[str]:
        result = await run_command(['xdotool', 'getactivewindow'])
        return result.output if result.ok else None


class TmuxFocusDetector:
    """Wraps another detector and adds tmux session/window checks.

    Notifications are suppressed only when the terminal window is focused,
    the tmux session holding our pane is attached, and the pane's window is
    the active one in that session.
    """

    name = 'Tmux'

    def __init__(self, pane_id: str, inner: FocusDetector):
        self.pane_id = pane_id
        self.inner = inner

    async def init(self) -> Optional[str]:
        # tmux adds no identity of its own, only extra gating
        if not await command_exists('tmux'):
            logger.debug("tmux not found, tmux checks will report unfocused")
        return await self.inner.init()

    async def is_focused(self, terminal_id: Optional[str]) -> bool:
        if not await self.inner.is_focused(terminal_id):
            return False

        if await self._query('#{?session_attached,1,0}') != '1':
            logger.debug(f"tmux session of {self.pane_id} is detached")
            return False

        return await self._query('#{window_active}') == '1'

    async def _query(self, fmt: str) -> str:
        result = await run_command(
            ['tmux', 'display-message', '-t', self.pane_id, '-p', fmt]
        )
        return result.output if result.ok else '0'


class AlwaysNotifyDetector:
    """Fallback for platforms without a focus signal: never focused."""

    name = 'Fallback (always notify)'

    async def init(self) -> Optional[str]:
        return UNSUPPORTED_ID

    async def is_focused(self, terminal_id: Optional[str]) -> bool:
        return False


def create_focus_detector(env: EnvironmentSnapshot) -> FocusDetector:
    """Pick the detector for this environment.

    tmux wrapping always goes outside the display-server detector.
    """
    if env.session_type == 'x11' or env.display:
        base = X11FocusDetector()
    else:
        base = AlwaysNotifyDetector()

    if env.tmux_pane:
        return TmuxFocusDetector(env.tmux_pane, base)
    return base


class FocusState(NamedTuple):
    detector: FocusDetector
    terminal_id: Optional[str]


async def init_focus_detection(
    env: Optional[EnvironmentSnapshot] = None
) -> FocusState:
    """Build the detector for this process and capture the terminal id."""
    if env is None:
        env = EnvironmentSnapshot.from_environ()
    detector = create_focus_detector(env)
    terminal_id = await detector.init()
    logger.debug(f"Focus detector: {describe(detector)}, "
                 f"terminal id: {terminal_id}")
    return FocusState(detector, terminal_id)


def describe(detector: FocusDetector) -> str:
    """Human readable composition, e.g. 'Tmux -> X11 (xdotool)'."""
    if isinstance(detector, TmuxFocusDetector):
        return f"{detector.name} -> {describe(detector.inner)}"
    return detector.name
