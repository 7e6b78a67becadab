"""Fetch coordinator: turns fetch triggers into observable list state.

Every trigger gets a new generation number. Only the completion whose
generation is still the latest may commit; anything older is discarded on
arrival. This replaces locking: all work runs on one event loop and the
only suspension point is the store call.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Protocol

from plantlog.plants.plant_models import PlantRecord
from plantlog.query.filters import FilterCriteria, criteria_from_params, is_filtered
from plantlog.utils.logging import get_logger

logger = get_logger(__name__)

HEADER_ALL = "My Plant Collection"
HEADER_FILTERED = "Filtered Plant Results"

FETCH_ERROR_MESSAGE = "Unable to load plants. Please try again."

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_FAILED = "failed"


class PlantFetcher(Protocol):
    async def fetch(self, criteria: Optional[FilterCriteria] = None) -> List[PlantRecord]:
        ...


@dataclass(frozen=True)
class FetchState:
    """Snapshot of the list view. Replaced wholesale, never edited in place."""

    status: str  # idle | loading | ready | failed
    records: List[PlantRecord] = field(default_factory=list)
    header_label: Optional[str] = None
    error: Optional[str] = None
    generation: int = 0

    @classmethod
    def idle(cls) -> "FetchState":
        return cls(status=STATUS_IDLE)

    @classmethod
    def loading(cls, generation: int) -> "FetchState":
        return cls(status=STATUS_LOADING, generation=generation)

    @classmethod
    def ready(cls, records: List[PlantRecord], header_label: str, generation: int) -> "FetchState":
        return cls(status=STATUS_READY, records=list(records), header_label=header_label, generation=generation)

    @classmethod
    def failed(cls, message: str, generation: int) -> "FetchState":
        return cls(status=STATUS_FAILED, error=message, generation=generation)

    @property
    def is_loading(self) -> bool:
        return self.status in (STATUS_IDLE, STATUS_LOADING)

    @property
    def is_empty(self) -> bool:
        return self.status == STATUS_READY and not self.records


StateListener = Callable[[FetchState], None]


class FetchCoordinator:
    """
    Orchestrates re-entrant plant fetches for one list view.

    Triggers come from focus events and filter changes. Overlapping fetches
    are allowed; the most recently triggered one always wins.
    """

    def __init__(self, executor: PlantFetcher, *, cancel_superseded: bool = False):
        self.executor = executor
        self.cancel_superseded = cancel_superseded
        self._state = FetchState.idle()
        self._generation = 0
        self._listeners: List[StateListener] = []
        self._pending: Optional[asyncio.Task] = None
        self._focused = False
        self._params: Optional[Mapping[str, Any]] = None

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def focused(self) -> bool:
        return self._focused

    @property
    def params(self) -> Optional[Mapping[str, Any]]:
        """Filter params delivered by the last focus or filter-change event."""
        return self._params

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, state: FetchState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"State listener failed: {e}", exc_info=True)

    async def trigger(self, criteria: Optional[FilterCriteria] = None) -> FetchState:
        """
        Start a fetch and commit its outcome if it is still the latest.

        Args:
            criteria: Exact-match criteria; empty or None means all plants

        Returns:
            The coordinator state once this fetch has settled (which is a
            newer fetch's state if this one was superseded)
        """
        self._generation += 1
        generation = self._generation
        criteria = dict(criteria or {})
        self._commit(FetchState.loading(generation))

        try:
            records = await self.executor.fetch(criteria)
        except Exception as e:
            if generation != self._generation:
                logger.debug(f"Discarding failure of stale fetch #{generation} (latest #{self._generation})")
                return self._state
            logger.error(f"Error fetching plants: {e}", exc_info=True)
            self._commit(FetchState.failed(FETCH_ERROR_MESSAGE, generation))
            return self._state

        if generation != self._generation:
            logger.debug(f"Discarding stale fetch #{generation} (latest #{self._generation})")
            return self._state

        header = HEADER_FILTERED if is_filtered(criteria) else HEADER_ALL
        self._commit(FetchState.ready(records, header, generation))
        return self._state

    def schedule(self, criteria: Optional[FilterCriteria] = None) -> asyncio.Task:
        """
        Fire-and-forget trigger for event callbacks. Needs a running loop.

        With cancel_superseded, the previous in-flight fetch is cancelled;
        without it the previous fetch runs to completion and is discarded.
        """
        if self.cancel_superseded and self._pending is not None and not self._pending.done():
            logger.debug(f"Cancelling superseded fetch #{self._generation}")
            self._pending.cancel()
        task = asyncio.get_running_loop().create_task(self.trigger(criteria))
        self._pending = task
        return task

    def on_focus(self, params: Optional[Mapping[str, Any]] = None) -> asyncio.Task:
        """The list view became focused: re-fetch with its navigation params."""
        self._focused = True
        self._params = params
        logger.debug(f"List view focused with filter parameters: {params}")
        return self.schedule(criteria_from_params(params))

    def on_blur(self) -> None:
        self._focused = False

    def on_filters_changed(self, params: Optional[Mapping[str, Any]]) -> Optional[asyncio.Task]:
        """Remember new filter params; re-fetch right away only while focused."""
        self._params = params
        if not self._focused:
            return None
        return self.schedule(criteria_from_params(params))
