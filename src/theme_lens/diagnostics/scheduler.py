import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

logger = logging.getLogger(__name__)

RunChecks = Callable[[list[str], bool], Awaitable[None]]

DEFAULT_DELAY = 0.1


class CheckScheduler:
    """Debounces check runs.

    ``schedule`` accumulates trigger locations and restarts the timer;
    ``force`` accumulates them and flushes right away. Either way a run
    receives every location collected since the previous run.
    """

    def __init__(self, run: RunChecks, delay: float = DEFAULT_DELAY) -> None:
        self._run = run
        self._delay = delay
        self._pending: dict[str, None] = {}
        self._pending_full = False
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> list[str]:
        return list(self._pending)

    def schedule(self, locations: Iterable[str], full: bool = False) -> None:
        self._accumulate(locations, full)
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().call_later(self._delay, self._flush)
        logger.debug("Scheduled checks for %d location(s)", len(self._pending))

    def force(self, locations: Iterable[str], full: bool = False) -> asyncio.Task[None] | None:
        self._accumulate(locations, full)
        self._cancel_timer()
        return self._flush()

    async def wait_idle(self) -> None:
        """Wait until no timer is armed and no run is in flight."""
        while self._timer is not None or self._tasks:
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
            else:
                await asyncio.sleep(self._delay)

    async def close(self) -> None:
        self._cancel_timer()
        self._pending.clear()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _accumulate(self, locations: Iterable[str], full: bool) -> None:
        self._pending.update(dict.fromkeys(locations))
        self._pending_full = self._pending_full or full

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _flush(self) -> asyncio.Task[None] | None:
        self._timer = None
        if not self._pending:
            return None
        locations, full = list(self._pending), self._pending_full
        self._pending.clear()
        self._pending_full = False
        task = asyncio.get_running_loop().create_task(self._execute(locations, full))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _execute(self, locations: list[str], full: bool) -> None:
        try:
            await self._run(locations, full)
        except Exception:
            logger.exception("Check run failed for %s", ", ".join(locations))
