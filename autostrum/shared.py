"""State shared between the playback thread and a progress observer.

Exactly two values cross threads: the pause flag and the elapsed time. The
playback thread is the only writer of the elapsed counter and publishes it by
rebinding an int, which readers observe atomically; the pause flag is an
Event. Neither needs a lock.
"""

from __future__ import annotations

from threading import Event

from autostrum.base import Resettable


class PlaybackShared(Resettable):
    """Handle passed by reference to the scheduler and to observers."""

    def __init__(self) -> None:
        self._paused = Event()
        self._elapsed_micros = 0

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    def set_paused(self, paused: bool) -> None:
        if paused:
            self._paused.set()
        else:
            self._paused.clear()

    def toggle_pause(self) -> bool:
        """Flip the pause flag.

        Returns:
            The new value of the flag.
        """
        self.set_paused(not self.paused)
        return self.paused

    @property
    def elapsed_micros(self) -> int:
        """Song time played so far in the current iteration."""
        return self._elapsed_micros

    def set_elapsed(self, micros: int) -> None:
        self._elapsed_micros = micros

    def reset(self) -> None:
        """Unpause and rewind the elapsed counter."""
        self._paused.clear()
        self._elapsed_micros = 0
