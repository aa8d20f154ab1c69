"""Progress observers for a playing song.

Observers receive the tick position from the playback thread and may read the
shared pause flag and elapsed time on their own schedule.
"""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from threading import Event, Thread
from typing import Optional, override

from autostrum.shared import PlaybackShared


def format_elapsed(micros: int) -> str:
    """Render elapsed microseconds as mm:ss."""
    whole_secs = micros // 1_000_000
    return f"{whole_secs // 60:02}:{whole_secs % 60:02}"


class ProgressSink(metaclass=ABCMeta):
    """Receives the position of the song being played."""

    @abstractmethod
    def begin(self, total_ticks: int) -> None:
        """Called at the start of every play-through."""
        raise NotImplementedError()

    @abstractmethod
    def update(self, tick: int) -> None:
        """Called with a non-decreasing tick position."""
        raise NotImplementedError()

    @abstractmethod
    def finish(self) -> None:
        """Called when a play-through ends, naturally or not."""
        raise NotImplementedError()


class NullProgress(ProgressSink):
    """Ignores all progress."""

    @override
    def begin(self, total_ticks: int) -> None:
        pass

    @override
    def update(self, tick: int) -> None:
        pass

    @override
    def finish(self) -> None:
        pass


class LogProgress(ProgressSink):
    """Logs the position periodically from a background thread.

    The thread only reads the latest tick and the shared handle, so the
    playback thread never waits on it.
    """

    def __init__(self, shared: PlaybackShared, interval: float = 5.0) -> None:
        self._shared = shared
        self._interval = interval
        self._total = 0
        self._tick = 0
        self._halt = Event()
        self._thread: Optional[Thread] = None

    def status(self) -> str:
        state = "paused" if self._shared.paused else "playing"
        elapsed = format_elapsed(self._shared.elapsed_micros)
        return f"[{state}] {elapsed} {self._tick}/{self._total}"

    def _run(self, halt: Event) -> None:
        while not halt.wait(self._interval):
            logging.info("%s", self.status())

    @override
    def begin(self, total_ticks: int) -> None:
        self.finish()
        self._total = total_ticks
        self._tick = 0
        self._halt = Event()
        self._thread = Thread(
            target=self._run, args=(self._halt,), name="progress", daemon=True
        )
        self._thread.start()

    @override
    def update(self, tick: int) -> None:
        self._tick = tick

    @override
    def finish(self) -> None:
        if self._thread is not None:
            self._halt.set()
            self._thread.join()
            self._thread = None
            logging.info("%s", self.status())
