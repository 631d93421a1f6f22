"""
Idle session reaper.

Background task that periodically evicts registry entries whose last
activity is older than the session TTL. Stored files are left on disk.
"""

import asyncio
import logging
from datetime import timedelta

from .registry import SessionRegistry

logger = logging.getLogger(__name__)


async def run_idle_reaper(
    registry: SessionRegistry,
    interval_seconds: float,
    max_idle: timedelta,
    shutdown_event: asyncio.Event,
) -> None:
    """
    Sweep idle sessions every interval_seconds until shutdown_event is set.

    Args:
        registry: Registry to sweep
        interval_seconds: Delay between sweeps
        max_idle: Idle time after which a session is evicted
        shutdown_event: Set to stop the loop

    Note:
        A failing sweep is logged and the loop waits for the next interval.
    """
    while not shutdown_event.is_set():
        try:
            # Wait for cleanup interval or shutdown signal
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval_seconds)
            # If we get here, shutdown was signaled
            break
        except TimeoutError:
            pass

        try:
            evicted = registry.sweep_idle(max_idle)
        except Exception:
            logger.exception("Idle session sweep failed")
            continue
        if evicted > 0:
            logger.info("Evicted %d idle upload sessions", evicted)
