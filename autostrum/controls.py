"""Live snapshot of the user's playback controls.

The scheduler polls a ControlSource at every tick; it never blocks on it.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from enum import Enum, auto, unique
from typing import FrozenSet


@unique
class Control(Enum):
    """User intents the scheduler reacts to."""

    Start = auto()
    TogglePause = auto()
    Interrupt = auto()


class ControlSource(metaclass=ABCMeta):
    """Reports which controls are held right now."""

    @abstractmethod
    def pressed(self) -> FrozenSet[Control]:
        raise NotImplementedError()
