"""Query/pagination model: UI-level query state to wire params, and a single-flight query session."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable

from loguru import logger

from jobbrowser.jobs.client import JobBrowserClient
from jobbrowser.jobs.models import JobFilter, JobInfo, QueryJobsParams, SearchSpec, SortSpec, TimeSpan
from jobbrowser.utils.exceptions import JobBrowserError

MS_PER_DAY = 24 * 60 * 60 * 1000
DEFAULT_QUERY_TIMEOUT_MS = 30000


def now_ms() -> int:
    return int(time.time() * 1000)


def last_n_days_time_span(days: int, *, now: int | None = None) -> TimeSpan:
    """Window ``[now - days, now]`` in epoch milliseconds."""
    if days < 0:
        raise ValueError("days must be >= 0")
    to = now_ms() if now is None else now
    return TimeSpan(from_=to - days * MS_PER_DAY, to=to)


def _default_sort() -> tuple[SortSpec, ...]:
    return (SortSpec(key="created", direction="descending"),)


@dataclass(slots=True, frozen=True)
class QueryState:
    """UI-level query parameters. Every ``with_*`` returns a new state."""

    time_range_days: int = 7
    page: int = 0
    page_size: int = 20
    filter: JobFilter = field(default_factory=JobFilter)
    sort: tuple[SortSpec, ...] = field(default_factory=_default_sort)
    search: SearchSpec | None = None
    admin: bool = False

    def __post_init__(self) -> None:
        if self.time_range_days < 0:
            raise ValueError("time_range_days must be >= 0")
        if self.page < 0:
            raise ValueError("page must be >= 0")
        if self.page_size <= 0:
            raise ValueError("page_size must be > 0")

    @property
    def offset(self) -> int:
        return self.page * self.page_size

    def with_filter(self, **changes: Any) -> QueryState:
        """Merge filter dimensions and go back to the first page."""
        return replace(self, filter=self.filter.merged(**changes), page=0)

    def with_page(self, page: int) -> QueryState:
        return replace(self, page=page)

    def with_page_size(self, page_size: int) -> QueryState:
        return replace(self, page_size=page_size, page=0)

    def with_time_range_days(self, days: int) -> QueryState:
        return replace(self, time_range_days=days, page=0)

    def with_search(self, terms: list[str] | None) -> QueryState:
        return replace(self, search=SearchSpec(terms=list(terms)) if terms else None, page=0)

    def with_admin(self, admin: bool) -> QueryState:
        return replace(self, admin=admin, page=0)


def build_query_params(
    state: QueryState,
    *,
    timeout_ms: int = DEFAULT_QUERY_TIMEOUT_MS,
    now: int | None = None,
) -> QueryJobsParams:
    """Derive wire params. The time window is recomputed on every call."""
    return QueryJobsParams(
        time_span=last_n_days_time_span(state.time_range_days, now=now),
        offset=state.offset,
        limit=state.page_size,
        timeout=timeout_ms,
        sort=list(state.sort) or None,
        search=state.search,
        filter=None if state.filter.is_empty() else state.filter,
        admin=state.admin or None,
    )


class FetchPhase(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"


@dataclass(slots=True, frozen=True)
class QueryView:
    """What the caller displays. Replaced as a whole, never patched."""

    jobs: tuple[JobInfo, ...] = ()
    found_count: int = 0
    total_count: int = 0
    error: JobBrowserError | None = None

    def page_count(self, page_size: int) -> int:
        if page_size <= 0:
            return 0
        return -(-self.found_count // page_size)


class JobQuerySession:
    """
    One logical job listing with at most one query in flight.

    ``refresh()`` while a fetch is outstanding is dropped (returns False)
    rather than queued, so a slow older reply can never overwrite a newer one.
    The phase check and the transition to FETCHING happen with no await in
    between, which makes them atomic under the event loop.

    ``reset()`` starts a new generation: a reply (or failure) belonging to a
    fetch started before the reset is discarded and never reaches the view.
    """

    def __init__(
        self,
        client: JobBrowserClient,
        *,
        state: QueryState | None = None,
        timeout_ms: int = DEFAULT_QUERY_TIMEOUT_MS,
        clock: Callable[[], int] = now_ms,
    ):
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be > 0")
        self.client = client
        self.state = state or QueryState()
        self.timeout_ms = timeout_ms
        self._clock = clock
        self._phase = FetchPhase.IDLE
        self._view = QueryView()
        self._generation = 0

    @property
    def phase(self) -> FetchPhase:
        return self._phase

    @property
    def is_fetching(self) -> bool:
        return self._phase is FetchPhase.FETCHING

    @property
    def view(self) -> QueryView:
        return self._view

    @property
    def page_count(self) -> int:
        return self._view.page_count(self.state.page_size)

    def update(self, state: QueryState) -> None:
        """Replace the query state. Callers trigger ``refresh()`` themselves."""
        self.state = state

    def reset(self) -> None:
        """Forget displayed results (e.g. after the credential is cleared)."""
        self._generation += 1
        self._view = QueryView()

    async def refresh(self) -> bool:
        """
        Run one query for the current state.

        Returns False when dropped because another fetch is in flight, or when
        ``reset()`` ran while this fetch was outstanding.
        On failure the displayed jobs are emptied, counts keep their prior
        values, the error is recorded on the view and re-raised.
        """
        if self._phase is FetchPhase.FETCHING:
            logger.debug("Job query dropped: a fetch is already in flight")
            return False

        params = build_query_params(self.state, timeout_ms=self.timeout_ms, now=self._clock())
        generation = self._generation
        self._phase = FetchPhase.FETCHING
        logger.debug(
            f"Job query started: offset={params.offset} limit={params.limit} "
            f"window=[{params.time_span.from_}, {params.time_span.to}]"
        )
        try:
            result = await self.client.query_jobs_with(params)
        except (Exception, asyncio.CancelledError) as exc:
            if generation == self._generation:
                error = exc if isinstance(exc, JobBrowserError) else None
                self._view = replace(self._view, jobs=(), error=error)
            if not isinstance(exc, asyncio.CancelledError):
                logger.warning(f"Job query failed: {exc}")
            raise
        finally:
            self._phase = FetchPhase.IDLE

        if generation != self._generation:
            logger.debug("Job query reply discarded: session was reset while fetching")
            return False

        self._view = QueryView(
            jobs=tuple(result.jobs),
            found_count=result.found_count,
            total_count=result.total_count,
        )
        logger.debug(
            f"Job query finished: {len(result.jobs)} job(s), found={result.found_count} total={result.total_count}"
        )
        return True
