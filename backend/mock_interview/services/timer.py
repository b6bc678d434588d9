"""
Per-question countdown.

`QuestionTimer` counts whole seconds down from the current question's time
limit. `tick()` is the single step; when the server runs inside an event
loop, `start()` also schedules an asyncio task that ticks once per second.
Reaching zero stops the timer and calls `on_expire` exactly once. The task
runs `on_expire` in a worker thread, since expiry submits an answer and
waits on AI calls.
"""
import asyncio
from typing import Callable, Optional

from mock_interview.utils.logger import setup_logger

logger = setup_logger("timer")


class QuestionTimer:
    def __init__(self, on_expire: Callable[[], None], interval: float = 1.0) -> None:
        self.on_expire = on_expire
        self.interval = interval
        self.remaining = 0
        self.is_running = False
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._expiring: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def start(self, seconds: int) -> None:
        """Restart the countdown at `seconds`."""
        self.stop()
        self.remaining = seconds
        self.is_running = True
        logger.debug(f"[TIMER] Started at {seconds}s")

        generation = self._generation
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Called from the expiry worker thread: hand the new task to the loop
            if self._loop is not None and not self._loop.is_closed():
                self._loop.call_soon_threadsafe(self._spawn, self._loop, generation)
            # No loop at all (tests, scripts): the owner drives tick() itself
            return
        self._spawn(loop, generation)

    def stop(self) -> None:
        self.is_running = False
        self._generation += 1
        task, self._task = self._task, None
        # The expiring task is the one that led here (expiry -> next question -> start)
        if task is None or task.done() or task is self._expiring:
            return
        loop = task.get_loop()
        if loop.is_closed():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            task.cancel()
        else:
            loop.call_soon_threadsafe(task.cancel)

    def tick(self) -> bool:
        """
        Advance the countdown by one second.

        Returns:
            True if this tick expired the timer
        """
        if not self._countdown():
            return False
        self.on_expire()
        return True

    def _countdown(self) -> bool:
        if not self.is_running:
            return False

        self.remaining = max(0, self.remaining - 1)
        if self.remaining > 0:
            return False

        self.is_running = False
        logger.info("[TIMER] Time is up")
        return True

    def _spawn(self, loop: asyncio.AbstractEventLoop, generation: int) -> None:
        if generation != self._generation or not self.is_running:
            return
        self._loop = loop
        self._task = loop.create_task(self._run(generation))

    async def _run(self, generation: int) -> None:
        while self.is_running and generation == self._generation:
            await asyncio.sleep(self.interval)
            if generation != self._generation or not self._countdown():
                continue

            self._expiring = asyncio.current_task()
            try:
                await asyncio.to_thread(self.on_expire)
            except Exception as e:
                logger.error(f"[TIMER] Expiry handler failed: {e}")
            finally:
                self._expiring = None
            return
