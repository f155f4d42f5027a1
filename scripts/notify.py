"""
Desktop notification delivery via notify-send, with optional sound through
canberra-gtk-play. Delivery is best effort: every failure is swallowed.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from probe import PROBE_TIMEOUT, run_command

logger = logging.getLogger(__name__)

APP_NAME = 'OpenCode'

ELLIPSIS = '…'

# Body length caps
MAX_BODY_LENGTH = 100
MAX_PATTERN_LENGTH = 60


class NotificationContent(NamedTuple):
    title: str
    body: str
    icon: str


NOTIFICATION_DEFAULTS = {
    'complete': NotificationContent(
        'OpenCode Ready', 'Task completed', 'dialog-information'),
    'error': NotificationContent(
        'OpenCode Error', 'An error occurred', 'dialog-error'),
    'permission': NotificationContent(
        'OpenCode Permission', 'Action requires approval', 'dialog-password'),
    'question': NotificationContent(
        'OpenCode Question', 'Your input is needed', 'dialog-question'),
}

# freedesktop sound theme ids
EVENT_SOUNDS = {
    'complete': 'dialog-information',
    'error': 'dialog-error',
    'permission': 'dialog-warning',
    'question': 'dialog-question',
}


@dataclass
class EventContext:
    """Optional details from a host event, used for the notification body."""

    error_message: Optional[str] = None
    permission_name: Optional[str] = None
    permission_patterns: List[str] = field(default_factory=list)
    question_text: Optional[str] = None
    question_header: Optional[str] = None


def truncate(text: str, max_length: int) -> str:
    """Collapse whitespace and cut to max_length, ending with an ellipsis."""
    cleaned = re.sub(r'\s+', ' ', text).strip()
    if len(cleaned) <= max_length:
        return cleaned
    return cleaned[:max_length - 1] + ELLIPSIS


def get_notification_content(
    event_type: str, context: Optional[EventContext] = None
) -> NotificationContent:
    """Title, body and icon for an event, with the body filled from context."""
    defaults = NOTIFICATION_DEFAULTS[event_type]
    if context is None:
        return defaults

    body = defaults.body

    if event_type == 'error':
        if context.error_message:
            body = truncate(context.error_message, MAX_BODY_LENGTH)

    elif event_type == 'permission':
        if context.permission_name:
            pattern = (context.permission_patterns[0]
                       if context.permission_patterns else None)
            if pattern:
                body = (f"{context.permission_name}: "
                        f"{truncate(pattern, MAX_PATTERN_LENGTH)}")
            else:
                body = f"{context.permission_name} requested"

    elif event_type == 'question':
        if context.question_text:
            body = truncate(context.question_text, MAX_BODY_LENGTH)
        elif context.question_header:
            body = truncate(context.question_header, MAX_BODY_LENGTH)

    return defaults._replace(body=body)


def get_event_sound(event_type: str) -> str:
    return EVENT_SOUNDS[event_type]


async def play_sound(sound_id: str) -> None:
    """Play a freedesktop theme sound, ignoring failures."""
    result = await run_command(['canberra-gtk-play', '-i', sound_id],
                               timeout=PROBE_TIMEOUT)
    if not result.ok:
        logger.debug(f"Sound {sound_id} not played: {result.error}")


async def _show(title: str, body: str, icon: Optional[str]) -> None:
    cmd = ['notify-send', '-a', APP_NAME, '-u', 'normal']
    if icon:
        cmd += ['-i', icon]
    cmd += [title, body]

    result = await run_command(cmd, timeout=PROBE_TIMEOUT)
    if result.ok:
        logger.debug(f"Notification sent: {title}")
    else:
        logger.debug(f"Notification failed: {result.error}")


async def send_notification(title: str, body: str,
                            icon: Optional[str] = None,
                            play_sound_effect: bool = False,
                            sound_id: Optional[str] = None) -> None:
    """Show a desktop notification and, if asked, play a sound alongside."""
    tasks = [_show(title, body, icon)]
    if play_sound_effect and sound_id:
        tasks.append(play_sound(sound_id))

    results = await asyncio.gather(*tasks, return_exceptions=True)
    for r in results:
        if isinstance(r, Exception):
            logger.debug(f"Notification delivery error: {r}")
