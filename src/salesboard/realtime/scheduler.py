"""Periodic target cycle checks tied to the web server lifecycle."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Optional

from salesboard.domain.cycle_reset import CycleResetEngine, ResetPassResult
from salesboard.realtime.broadcast import BroadcastHub

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 60 * 60.0


class CycleScheduler:
    """Runs the reset engine at start-up and then on a fixed interval.

    Created once per process and driven through ``start``/``stop``. Only one
    pass runs at a time: a pass requested while another is in flight is
    skipped, and a slow pass simply delays the next tick.
    """

    def __init__(
        self,
        engine: CycleResetEngine,
        hub: BroadcastHub,
        interval: float = DEFAULT_INTERVAL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the scheduler.

        Args:
            engine: Cycle reset engine
            hub: Broadcast hub notified of every transition
            interval: Seconds between passes
            sleep: Awaitable sleep, replaceable in tests
        """
        self.engine = engine
        self.hub = hub
        self.interval = interval
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self._in_progress = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    async def start(self) -> None:
        """Initialize cycles, run a first pass, then keep checking every interval."""
        if self.running:
            return
        try:
            await self.initialize()
            await self.run_pass()
        except Exception:
            logger.exception("Initial target cycle pass failed")
        self._task = asyncio.create_task(self._run())
        logger.info("Target cycle checks scheduled every %.0f seconds", self.interval)

    async def stop(self) -> None:
        """Cancel the periodic task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def initialize(self) -> ResetPassResult:
        """Establish cycle state for entities that have none."""
        result = self.engine.initialize_target_cycles()
        if result.initialized:
            await self.hub.broadcast(
                "target_cycles_initialized",
                [cycle.to_payload() for cycle in result.initialized],
            )
        return result

    async def run_pass(self) -> Optional[ResetPassResult]:
        """Run one reset pass and announce every closed period.

        Returns:
            The pass result, or None if another pass was already running
        """
        if self._in_progress:
            logger.warning("Target cycle pass already in progress; skipping")
            return None

        self._in_progress = True
        try:
            # Synchronous on the loop thread: the engine shares the app's one session
            result = self.engine.check_and_reset()
            for transition in result.transitions:
                await self.hub.broadcast("target_cycle_reset", transition.to_payload())
            return result
        finally:
            self._in_progress = False

    async def _run(self) -> None:
        while True:
            await self._sleep(self.interval)
            try:
                await self.run_pass()
            except Exception:
                logger.exception("Scheduled target cycle pass failed")
