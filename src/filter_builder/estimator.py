"""
CountEstimator — debounced, stale-safe "matching records" count.

Every :meth:`CountEstimator.request` restarts a debounce timer. When the
timer fires, a request is issued with a new sequence number. A response is
applied only if its sequence number is still the latest issued; anything
older is discarded on arrival, success or failure alike.

Usage::

    estimator = CountEstimator(client, on_change=render_badge)
    estimator.request({"bool": {"must": [{"term": {"owner": "alice"}}]}})
    ...
    await estimator.aclose()
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from .exceptions import CountFetchError
from .formats.search import is_match_all
from .settings import FilterBuilderSettings

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("filter_builder.count")


class CountQuery(BaseModel):
    """Request handed to the count service: count only, no documents."""

    model_config = ConfigDict(frozen=True)

    query_filter: dict[str, Any]
    query: str = ""
    search_index: str = "all"
    page_number: int = 0
    page_size: int = 0
    include_deleted: bool = False
    track_total_hits: bool = True
    fetch_source: bool = False


@runtime_checkable
class CountClient(Protocol):
    """Black-box count service: a non-negative total or an exception."""

    async def count(self, query: CountQuery) -> int:
        ...


class CountEstimate(NamedTuple):
    """Snapshot published to listeners; ``count`` is None while unknown."""

    count: int | None
    busy: bool


class CountEstimator:
    """Debounced asynchronous count of documents matching a search filter."""

    def __init__(
        self,
        client: CountClient,
        *,
        settings: FilterBuilderSettings | None = None,
        on_change: Callable[[CountEstimate], None] | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or FilterBuilderSettings()
        self._on_change = on_change

        self._count: int | None = None
        self._busy = False
        self._last_error: CountFetchError | None = None
        self._sequence = 0

        self._pending: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()

    # ── State ────────────────────────────────────────────────────────

    @property
    def count(self) -> int | None:
        return self._count

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def estimate(self) -> CountEstimate:
        return CountEstimate(self._count, self._busy)

    @property
    def last_error(self) -> CountFetchError | None:
        return self._last_error

    @property
    def sequence(self) -> int:
        """Number of requests issued so far."""
        return self._sequence

    # ── Requests ─────────────────────────────────────────────────────

    def request(self, search_filter: dict[str, Any] | None) -> None:
        """Schedule a count for *search_filter* after the debounce window.

        Must be called from inside the running event loop. ``None`` or a
        match-all filter cancels pending work and resets the count to
        unknown without issuing a request.
        """
        self._cancel_pending()
        if search_filter is None or is_match_all(search_filter):
            # Supersede whatever is in flight.
            self._sequence += 1
            self._publish(None, busy=False)
            return
        loop = asyncio.get_running_loop()
        self._pending = loop.create_task(self._debounced(search_filter))
        self._publish(self._count, busy=True)

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no request is in flight."""
        while True:
            tasks = [t for t in (self._pending, *self._inflight) if t is not None]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel the pending timer and every in-flight request."""
        self._cancel_pending()
        tasks = list(self._inflight)
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._inflight.clear()
        self._publish(self._count, busy=False)

    # ── Internals ────────────────────────────────────────────────────

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _debounced(self, search_filter: dict[str, Any]) -> None:
        await asyncio.sleep(self._settings.debounce_seconds)

        # Past this point the task is an issued request and no longer
        # cancellable by a newer edit.
        task = asyncio.current_task()
        if task is not None:
            self._pending = None
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

        self._sequence += 1
        await self._fetch(self._sequence, search_filter)

    async def _fetch(self, sequence: int, search_filter: dict[str, Any]) -> None:
        query = CountQuery(
            query_filter={"query": search_filter},
            search_index=self._settings.search_index,
            include_deleted=self._settings.include_deleted,
        )
        logger.debug("Issuing count request #%d", sequence)
        try:
            total = await self._client.count(query)
            if isinstance(total, bool) or not isinstance(total, int) or total < 0:
                raise CountFetchError(f"Count service returned {total!r}")
        except Exception as exc:
            if sequence != self._sequence:
                logger.debug("Discarding failure of stale count request #%d", sequence)
                return
            logger.warning("Count request #%d failed: %s", sequence, exc)
            self._last_error = (
                exc if isinstance(exc, CountFetchError) else CountFetchError(str(exc))
            )
            self._publish(None, busy=self._pending is not None)
            return

        if sequence != self._sequence:
            logger.debug("Discarding stale count response #%d", sequence)
            return
        self._last_error = None
        self._publish(total, busy=self._pending is not None)

    def _publish(self, count: int | None, *, busy: bool) -> None:
        if (count, busy) == (self._count, self._busy):
            return
        self._count = count
        self._busy = busy
        if self._on_change is not None:
            self._on_change(CountEstimate(count, busy))
