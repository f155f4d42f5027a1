"""
Notification gate: decides per event whether to notify.

Order of checks: event enabled, then terminal focus, then delivery.
"""

import logging
from typing import Optional, Protocol

from focus import FocusDetector, describe
from notify import (
    EventContext,
    get_event_sound,
    get_notification_content,
    send_notification,
)
from settings import is_event_enabled, is_sound_enabled

logger = logging.getLogger(__name__)

class Sender(Protocol):
    """Delivers one notification, never raising on delivery failure."""

    async def __call__(self, title: str, body: str,
                       icon: Optional[str] = None,
                       play_sound_effect: bool = False,
                       sound_id: Optional[str] = None) -> None:
        ...


class NotificationGate:
    """Sends notifications only when the terminal is not focused."""

    def __init__(self, settings: dict, detector: FocusDetector,
                 terminal_id: Optional[str],
                 sender: Sender = send_notification):
        self.settings = settings
        self.detector = detector
        self.terminal_id = terminal_id
        self.sender = sender

    async def is_terminal_focused(self) -> bool:
        """Ask the detector about focus. No identity means not focused."""
        if self.terminal_id is None:
            return False
        try:
            return await self.detector.is_focused(self.terminal_id)
        except Exception as e:
            logger.debug(f"Focus check failed in {describe(self.detector)}: {e}")
            return False

    async def maybe_notify(self, event_type: str,
                           context: Optional[EventContext] = None) -> bool:
        """Notify for event_type unless disabled or the terminal has focus.

        Returns True if a notification was dispatched.
        """
        if not is_event_enabled(self.settings, event_type):
            logger.debug(f"Event {event_type} disabled, skipping")
            return False

        if await self.is_terminal_focused():
            logger.debug(f"Terminal focused, suppressing {event_type}")
            return False

        content = get_notification_content(event_type, context)
        try:
            await self.sender(
                content.title,
                content.body,
                icon=content.icon,
                play_sound_effect=is_sound_enabled(self.settings),
                sound_id=get_event_sound(event_type),
            )
        except Exception as e:
            logger.debug(f"Delivery of {event_type} failed: {e}")
        return True
