"""
Command probe - runs read-only external queries with a timeout.

Every external tool (xdotool, tmux, notify-send) is optional. Callers get a
ProbeResult back and never see process-exec exceptions.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 5.0  # seconds


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single probe: trimmed stdout, or the reason it failed."""

    output: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def unavailable(cls, reason: str) -> 'ProbeResult':
        return cls(output=None, error=reason)


async def run_command(args: Sequence[str],
                      timeout: float = PROBE_TIMEOUT) -> ProbeResult:
    """Run a command and return its trimmed stdout.

    Non-zero exit, timeout, a missing binary and any other OS error all
    come back as a failed ProbeResult.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except FileNotFoundError:
        logger.debug(f"Probe binary not found: {args[0]}")
        return ProbeResult.unavailable('not found')
    except OSError as e:
        logger.debug(f"Probe failed to start {args[0]}: {e}")
        return ProbeResult.unavailable(str(e))

    try:
        stdout, _ = await asyncio.wait_for(process.communicate(), timeout)
    except asyncio.TimeoutError:
        logger.debug(f"Probe timed out after {timeout}s: {' '.join(args)}")
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
        return ProbeResult.unavailable('timeout')

    if process.returncode != 0:
        logger.debug(f"Probe exited {process.returncode}: {' '.join(args)}")
        return ProbeResult.unavailable(f'exit {process.returncode}')

    return ProbeResult(output=stdout.decode('utf-8', errors='replace').strip())


async def command_exists(binary: str) -> bool:
    """Check if a binary resolves on PATH."""
    result = await run_command(['which', binary])
    return result.ok and bool(result.output)
