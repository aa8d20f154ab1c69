"""Playback settings and their validation."""

from __future__ import annotations

from dataclasses import dataclass

from autostrum import constants
from autostrum.base import ConfigError


def hold_from_fps(min_fps: int) -> float:
    """How long to hold a strum key so a target running at min_fps sees it.

    The target reads input once per frame, so the key stays down for one
    frame at the lowest expected frame rate (whole milliseconds).

    Raises:
        ConfigError: If the frame rate is not positive.
    """
    if min_fps <= 0:
        raise ConfigError(f"Minimum FPS must be positive, got {min_fps}")
    return (1000 // min_fps) / 1000


@dataclass(frozen=True)
class PlayerSettings:
    """Knobs for one song's playback."""

    loop: bool = False
    """Replay the song until interrupted."""

    wait_for_start: bool = True
    """Hold off playing until the Start control is pressed."""

    hold_seconds: float = hold_from_fps(constants.DEFAULT_MIN_FPS)
    """How long each strum key stays pressed."""

    pause_poll_seconds: float = constants.DEFAULT_PAUSE_POLL
    """Interval between control polls while paused or waiting to start."""

    debounce_seconds: float = constants.DEFAULT_DEBOUNCE
    """Time after a pause toggle during which further toggles are ignored."""

    def __post_init__(self) -> None:
        if self.hold_seconds < 0:
            raise ConfigError(f"Hold time must not be negative: {self.hold_seconds}")
        if self.pause_poll_seconds <= 0:
            raise ConfigError(f"Pause poll interval must be positive: {self.pause_poll_seconds}")
        if self.debounce_seconds < 0:
            raise ConfigError(f"Debounce must not be negative: {self.debounce_seconds}")
