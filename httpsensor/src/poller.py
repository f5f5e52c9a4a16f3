"""
Reading poller -- periodic refresh of a single cached Reading.

Owns the cache of the last successful :class:`Reading` and a cancellable
asyncio task that refreshes it every ``refresh_interval_s`` seconds.
``start()`` launches an immediate warm-up fetch so the cache is populated
before the first tick elapses.

Fetch failures are logged at WARNING level and leave the cache untouched;
they never propagate out of the poller. Each tick runs its fetch as a
separate task, so a slow request never delays the next tick. When fetches
overlap, the most recently issued successful fetch wins: a response that
arrives after a newer one has been cached is discarded.

CHANGELOG:
- 2026-10-17: Initial creation (STORY-003)
- 2026-10-17: Cancellable tick task with stop() (STORY-006)

TODO:
- None
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from httpsensor.src.fetcher import FetchError, fetch_reading
from httpsensor.src.reading import Reading

logger = logging.getLogger(__name__)

# Default seconds between refresh ticks.
DEFAULT_REFRESH_INTERVAL_S: int = 30

FetchFunc = Callable[[str], Awaitable[Reading]]
UpdateCallback = Callable[[Reading], None]


class ReadingPoller:
    """Polls a sensor endpoint and caches the latest successful reading.

    Args:
        url: Sensor endpoint URL, passed unchanged to *fetch*.
        refresh_interval_s: Seconds between refresh ticks. Must be > 0.
        on_update: Called with the new reading after every successful
            refresh. Exceptions it raises are logged, not propagated.
        fetch: Coroutine function ``fetch(url) -> Reading`` that raises
            :class:`FetchError` on failure.

    Raises:
        ValueError: If *refresh_interval_s* is not positive.
    """

    def __init__(
        self,
        url: str,
        refresh_interval_s: float = DEFAULT_REFRESH_INTERVAL_S,
        *,
        on_update: UpdateCallback | None = None,
        fetch: FetchFunc = fetch_reading,
    ) -> None:
        if refresh_interval_s <= 0:
            raise ValueError(
                f"refresh_interval_s must be > 0 (got: {refresh_interval_s})"
            )

        self._url = url
        self._refresh_interval_s = refresh_interval_s
        self._on_update = on_update
        self._fetch = fetch

        self._reading = Reading()

        # Sequence numbers: last fetch issued, last fetch written to cache.
        self._issued: int = 0
        self._written: int = 0

        self._tick_task: asyncio.Task | None = None
        self._fetch_tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Cache access
    # ------------------------------------------------------------------

    @property
    def reading(self) -> Reading:
        """The cached reading (``Reading()`` until a fetch succeeds)."""
        return self._reading

    @property
    def refresh_interval_ms(self) -> int:
        """Tick period in milliseconds."""
        return int(self._refresh_interval_s * 1000)

    @property
    def running(self) -> bool:
        """Whether the tick task is armed."""
        return self._tick_task is not None and not self._tick_task.done()

    def get_current_temperature(self) -> float:
        """Return the cached temperature."""
        return self._reading.temperature

    def get_current_humidity(self) -> float:
        """Return the cached humidity."""
        return self._reading.humidity

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def refresh(self) -> bool:
        """Run one fetch and update the cache on success.

        Returns:
            ``True`` if the cache was replaced, ``False`` if the fetch
            failed or its result was superseded by a newer fetch.
        """
        self._issued += 1
        seq = self._issued

        try:
            reading = await self._fetch(self._url)
        except FetchError as exc:
            logger.warning("Refresh from %s failed: %s", self._url, exc)
            return False

        if seq < self._written:
            logger.debug(
                "Discarding stale reading from fetch #%d (cache holds #%d)",
                seq,
                self._written,
            )
            return False

        self._written = seq
        self._reading = reading

        if self._on_update is not None:
            try:
                self._on_update(reading)
            except Exception:
                logger.exception("Update callback failed for %s", self._url)

        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> asyncio.Task:
        """Fetch once immediately, then arm the repeating tick task.

        Must be called from a running event loop.

        Returns:
            The tick task. Cancelling it (or calling :meth:`stop`) ends
            the polling.

        Raises:
            RuntimeError: If the poller is already running.
        """
        if self.running:
            raise RuntimeError("Poller is already running")

        loop = asyncio.get_running_loop()
        self._spawn_fetch(loop)
        self._tick_task = loop.create_task(
            self._tick_loop(), name=f"poller-tick:{self._url}"
        )
        logger.debug(
            "Polling %s every %dms", self._url, self.refresh_interval_ms
        )
        return self._tick_task

    async def stop(self) -> None:
        """Cancel the tick task and any in-flight fetches.

        Safe to call more than once or before :meth:`start`.
        """
        tasks = list(self._fetch_tasks)
        if self._tick_task is not None:
            tasks.append(self._tick_task)
            self._tick_task = None

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _tick_loop(self) -> None:
        """Spawn a fetch every refresh interval, forever."""
        loop = asyncio.get_running_loop()
        while True:
            await asyncio.sleep(self._refresh_interval_s)
            self._spawn_fetch(loop)

    def _spawn_fetch(self, loop: asyncio.AbstractEventLoop) -> None:
        """Run :meth:`refresh` as its own task so ticks never wait on it."""
        task = loop.create_task(self._guarded_refresh())
        self._fetch_tasks.add(task)
        task.add_done_callback(self._fetch_tasks.discard)

    async def _guarded_refresh(self) -> None:
        """Refresh, logging anything unexpected so the task never errors."""
        try:
            await self.refresh()
        except Exception:
            logger.exception("Unexpected error refreshing %s", self._url)
