#!/usr/bin/env python3
"""
opencode-notify Hook Handler - Receives OpenCode events on stdin and sends
desktop notifications when the terminal is not focused.

The host writes one JSON event per line, e.g.
    {"type": "session.idle", "properties": {}}
The process stays alive until stdin closes so the terminal identity is
captured once, at startup.
"""

import asyncio
import json
import logging
import os
import sys
from typing import Optional, Tuple

from focus import describe, init_focus_detection
from gate import NotificationGate
from notify import (
    NOTIFICATION_DEFAULTS,
    EventContext,
    get_event_sound,
    get_notification_content,
    send_notification,
)
from settings import is_sound_enabled, load_settings

# Debug logging (set OPENCODE_NOTIFY_DEBUG=1 to enable)
_debug = os.environ.get('OPENCODE_NOTIFY_DEBUG', '0') == '1'
logging.basicConfig(
    level=logging.DEBUG if _debug else logging.WARNING,
    format='[opencode-notify] %(levelname)s: %(message)s',
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def read_event(line: str) -> dict:
    """Parse one line of JSON. Anything but an object gives {}."""
    try:
        data = json.loads(line) if line.strip() else {}
    except ValueError:
        logger.debug(f"Ignoring malformed event: {line[:80]!r}")
        return {}
    return data if isinstance(data, dict) else {}


def _dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _str(value) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _permission_context(props: dict) -> EventContext:
    patterns = props.get('patterns')
    if not isinstance(patterns, list):
        patterns = []
    return EventContext(
        permission_name=_str(props.get('permission')),
        permission_patterns=[p for p in patterns if isinstance(p, str)],
    )


def map_event(data: dict) -> Optional[Tuple[str, Optional[EventContext]]]:
    """Map a host event to (event_type, context), or None if not relevant."""
    event = data.get('type')
    props = _dict(data.get('properties'))

    if event == 'session.idle':
        return 'complete', None

    if event == 'session.error':
        error = _dict(props.get('error'))
        message = (_str(_dict(error.get('data')).get('message'))
                   or _str(error.get('name')))
        return 'error', EventContext(error_message=message)

    # Legacy permission event from older OpenCode versions
    if event == 'permission.updated':
        return 'permission', None

    if event == 'permission.asked':
        return 'permission', _permission_context(props)

    # permission.ask hook input carries its fields at the top level
    if event == 'permission.ask':
        return 'permission', _permission_context(props or data)

    if event == 'question.asked':
        questions = props.get('questions')
        first = (_dict(questions[0])
                 if isinstance(questions, list) and questions else {})
        return 'question', EventContext(
            question_text=_str(first.get('question')),
            question_header=_str(first.get('header')),
        )

    return None


async def handle_event(gate: NotificationGate, data: dict) -> bool:
    """Route one event through the gate. Returns True if notified."""
    mapped = map_event(data)
    if mapped is None:
        return False
    event_type, context = mapped
    try:
        return await gate.maybe_notify(event_type, context)
    except Exception as e:
        logger.warning(f"Failed to handle {data.get('type')}: {e}")
        return False


def _decode(line) -> str:
    # Raw bytes from stdin; undecodable input turns into replacement chars
    if isinstance(line, bytes):
        return line.decode('utf-8', errors='replace')
    return line


async def run_event_loop(gate: NotificationGate, stream=None) -> int:
    """Read events until EOF, handling each as its own task.

    Returns the number of notifications sent.
    """
    stream = stream or sys.stdin.buffer
    loop = asyncio.get_running_loop()
    pending = set()
    sent = 0

    def _finished(task):
        nonlocal sent
        pending.discard(task)
        if not task.cancelled() and task.result():
            sent += 1

    while True:
        line = await loop.run_in_executor(None, stream.readline)
        if not line:
            break
        data = read_event(_decode(line))
        if data:
            task = asyncio.create_task(handle_event(gate, data))
            pending.add(task)
            task.add_done_callback(_finished)

    if pending:
        await asyncio.wait(list(pending))
    return sent


async def create_gate() -> NotificationGate:
    settings = load_settings()
    detector, terminal_id = await init_focus_detection()
    return NotificationGate(settings, detector, terminal_id)


async def status() -> dict:
    """Current detector composition, terminal id and focus state."""
    gate = await create_gate()
    return {
        'detector': describe(gate.detector),
        'terminal_id': gate.terminal_id,
        'focused': await gate.is_terminal_focused(),
    }


async def send_test_notification(event_type: str) -> dict:
    """Send a sample notification, bypassing focus detection."""
    if event_type not in NOTIFICATION_DEFAULTS:
        return {'status': 'error', 'message': f'unknown event: {event_type}'}
    settings = load_settings()
    content = get_notification_content(event_type)
    await send_notification(
        content.title,
        content.body,
        icon=content.icon,
        play_sound_effect=is_sound_enabled(settings),
        sound_id=get_event_sound(event_type),
    )
    return {'status': 'ok', 'event': event_type}


async def serve() -> None:
    gate = await create_gate()
    sent = await run_event_loop(gate)
    logger.debug(f"Input closed, {sent} notification(s) sent")


def main():
    """Main entry point."""
    command = sys.argv[1] if len(sys.argv) > 1 else None

    if command == 'status':
        print(json.dumps(asyncio.run(status())))
        sys.exit(0)

    if command == 'test':
        event_type = sys.argv[2] if len(sys.argv) > 2 else 'complete'
        result = asyncio.run(send_test_notification(event_type))
        print(json.dumps(result))
        sys.exit(0 if result.get('status') == 'ok' else 1)

    if command == 'check':
        import setup_check
        sys.exit(0 if setup_check.main() else 1)

    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error(f"Event loop stopped: {e}")

    # Always exit 0 to not block OpenCode
    sys.exit(0)


if __name__ == '__main__':
    main()
