"""Base classes and exceptions for the autostrum player.

This module provides the abstract lifecycle classes shared by the
collaborators and the exception taxonomy used throughout the package.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod


class Closeable(metaclass=ABCMeta):
    """Abstract base class for objects that need explicit resource cleanup."""

    @abstractmethod
    def close(self) -> None:
        """Close this to free resources and deny further use."""
        raise NotImplementedError()


class Resettable(metaclass=ABCMeta):
    """Abstract base class for objects that can be reset to their initial state."""

    @abstractmethod
    def reset(self) -> None:
        """Reset this to a known good state for further use."""
        raise NotImplementedError()


class AutostrumError(Exception):
    """Root of all errors raised by autostrum."""


class ConfigError(AutostrumError):
    """A song or setting that cannot be played at all.

    Raised before any input is injected.
    """


class SongParseError(ConfigError):
    """The MIDI data could not be decoded."""


class UnsupportedTimingError(ConfigError):
    """The MIDI file uses timecode (SMPTE) division instead of ticks per beat."""

    def __init__(self, division: int) -> None:
        super().__init__(f"Timecode timing is not supported (division {division})")
        self.division = division


class InjectionError(AutostrumError):
    """Synthetic input could not be delivered to the target.

    Fatal for the song being played, but not for the rest of a queue.
    """
