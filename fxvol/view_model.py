"""
View model for the surface dashboard.

The dashboard's state lives in one immutable ViewState snapshot owned by
a SurfaceViewModel. Controls never touch the snapshot directly; they call
change-intent methods (select_pair, select_mode, select_tab, refresh)
and read back the new snapshot.

Fetch policy:
    - changing tab/pair/mode while the surface tab is active triggers a fetch
    - coming back to the surface tab fetches again (nothing is cached)
    - refresh fetches the current selection again
    - every fetch gets a generation number; a result that arrives after a
      newer fetch has started is dropped, so the latest request always wins
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, Optional

from . import config
from .gateway import fetch_volatility_surface, validate_selection
from .monitor import ConnectionMonitor
from .surface import VolatilitySurface

logger = logging.getLogger(__name__)

DEFAULT_ERROR = "Failed to load volatility data"
TAB_IDS = [tab_id for tab_id, _ in config.TABS]


@dataclass(frozen=True)
class ViewState:
    active_tab: str = config.SURFACE_TAB
    connected: bool = False
    mode: str = config.DEFAULT_MODE
    pair: str = config.DEFAULT_PAIR
    surface: Optional[VolatilitySurface] = None
    loading: bool = False
    error: Optional[str] = None
    generation: int = 0

    @property
    def title(self) -> str:
        return f"{self.pair} Volatility Surface - {config.MODE_LABELS[self.mode]}"


class SurfaceViewModel:
    """
    Owns the dashboard state and runs surface fetches.

    Parameters
    ----------
    fetcher : callable(pair, mode) -> VolatilitySurface
              (default: gateway.fetch_volatility_surface)
    monitor : optional ConnectionMonitor backing poll_connection()
    state : initial snapshot (default: ViewState())
    """

    def __init__(
        self,
        fetcher: Callable[[str, str], VolatilitySurface] = None,
        monitor: Optional[ConnectionMonitor] = None,
        state: Optional[ViewState] = None,
    ):
        self._fetch = fetcher if fetcher is not None else fetch_volatility_surface
        self.monitor = monitor
        self._state = state if state is not None else ViewState()
        self._lock = threading.Lock()

    @property
    def state(self) -> ViewState:
        with self._lock:
            return self._state

    def _update(self, **changes) -> ViewState:
        with self._lock:
            self._state = replace(self._state, **changes)
            return self._state

    # ── change intents ──────────────────────────────────────────────────

    def select_tab(self, tab: str) -> ViewState:
        if tab not in TAB_IDS:
            raise ValueError(f"Unknown tab: {tab}")
        if tab == self.state.active_tab:
            return self.state

        state = self._update(active_tab=tab)
        if tab == config.SURFACE_TAB:
            return self.load()
        return state

    def select_pair(self, pair: str) -> ViewState:
        validate_selection(pair, self.state.mode)
        if pair == self.state.pair:
            return self.state
        self._update(pair=pair)
        return self._load_if_visible()

    def select_mode(self, mode: str) -> ViewState:
        validate_selection(self.state.pair, mode)
        if mode == self.state.mode:
            return self.state
        self._update(mode=mode)
        return self._load_if_visible()

    def refresh(self) -> ViewState:
        return self._load_if_visible()

    def set_connected(self, connected: bool) -> ViewState:
        return self._update(connected=bool(connected))

    def poll_connection(self) -> ViewState:
        """Run one health check through the monitor, if there is one."""
        if self.monitor is None:
            return self.state
        return self.set_connected(self.monitor.poll())

    # ── fetching ────────────────────────────────────────────────────────

    def _load_if_visible(self) -> ViewState:
        if self.state.active_tab != config.SURFACE_TAB:
            return self.state
        return self.load()

    def begin_load(self) -> int:
        """Mark a fetch as in flight and return its generation."""
        with self._lock:
            generation = self._state.generation + 1
            self._state = replace(self._state, loading=True, error=None, generation=generation)
            return generation

    def finish_load(
        self,
        generation: int,
        surface: Optional[VolatilitySurface] = None,
        error: Optional[str] = None,
    ) -> bool:
        """
        Store a fetch result. Returns False (and changes nothing) if a
        newer fetch has started since `generation` was issued.
        """
        with self._lock:
            if generation != self._state.generation:
                logger.debug(
                    f"Dropping stale surface result (generation {generation}, "
                    f"current {self._state.generation})"
                )
                return False
            self._state = replace(
                self._state,
                loading=False,
                surface=None if error is not None else surface,
                error=error,
            )
            return True

    def load(self) -> ViewState:
        """Fetch the surface for the current selection."""
        generation = self.begin_load()
        snapshot = self.state

        try:
            surface = self._fetch(snapshot.pair, snapshot.mode)
        except Exception as e:
            logger.error(f"Surface load failed for {snapshot.pair} ({snapshot.mode}): {e}")
            self.finish_load(generation, error=str(e) or DEFAULT_ERROR)
        else:
            self.finish_load(generation, surface=surface)

        return self.state
