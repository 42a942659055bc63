# playback.py
"""
Timed playback of an already computed timeline.

Playback only walks the finished trace, one entry per tick. Stopping it,
or starting a new run, never touches the simulation results.
"""

import logging
import time
from typing import Callable, Iterator, MutableMapping, Optional, Sequence

import config

logger = logging.getLogger(__name__)


class Playback:
    """
    Cancellable, restartable cursor over a sequence of trace entries.

    Attributes:
        timeline (tuple): The entries being played, never modified
        interval (float): Seconds between ticks when driven by run()
    """

    def __init__(self, timeline: Sequence, interval: float = config.PLAYBACK_INTERVAL):
        if interval < 0:
            raise ValueError("Playback interval cannot be negative")
        self.timeline = tuple(timeline)
        self.interval = interval
        self._cursor = 0
        self._cancelled = False

    @property
    def cursor(self) -> int:
        """Number of entries shown so far."""
        return self._cursor

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def finished(self) -> bool:
        return self._cursor >= len(self.timeline)

    @property
    def current(self):
        """Most recently shown entry, None before the first tick."""
        return self.timeline[self._cursor - 1] if self._cursor else None

    @property
    def current_time(self) -> int:
        entry = self.current
        return entry.time if entry is not None else 0

    def cancel(self):
        if not self._cancelled:
            logger.debug("Playback cancelled at %d/%d", self._cursor, len(self.timeline))
        self._cancelled = True

    def restart(self):
        """Rewind to the first entry and allow playback again."""
        self._cursor = 0
        self._cancelled = False

    def ticks(self) -> Iterator:
        """Yield remaining entries one at a time until finished or cancelled."""
        while not self._cancelled and not self.finished:
            entry = self.timeline[self._cursor]
            self._cursor += 1
            yield entry

    def run(self, on_tick: Callable, sleep: Callable[[float], None] = time.sleep) -> int:
        """
        Drive playback with a fixed wall-clock pause after each entry.

        Args:
            on_tick: Called with each entry as it becomes current
            sleep: Pause function, replaceable in tests

        Returns:
            int: Number of entries shown during this call
        """
        shown = 0
        for entry in self.ticks():
            on_tick(entry)
            shown += 1
            if not self.finished:
                sleep(self.interval)
        return shown


def start_playback(state: MutableMapping, timeline: Sequence,
                   interval: Optional[float] = None, key: str = "playback") -> Playback:
    """
    Replace whatever playback is stored under key with a fresh one.

    The previous playback is cancelled first so two runs never overlap.
    """
    previous = state.get(key)
    if previous is not None:
        previous.cancel()
    playback = Playback(timeline, config.PLAYBACK_INTERVAL if interval is None else interval)
    state[key] = playback
    return playback
