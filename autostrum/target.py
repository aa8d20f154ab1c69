"""Screen geometry of the playback target.

Finding the target window is left to the caller; this module only turns a
located window into absolute pointer coordinates for each string and fret.
"""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from typing import Tuple, override

from autostrum import constants
from autostrum.base import ConfigError
from autostrum.fretboard import StringPos


@dataclass(frozen=True)
class Window:
    """On-screen origin and size of the target."""

    x: int
    y: int
    width: int
    height: int

    @staticmethod
    def parse(text: str) -> Window:
        """Parse a window given as "X,Y,WIDTH,HEIGHT".

        Raises:
            ConfigError: If the text is malformed or the size is not positive.
        """
        parts = text.split(",")
        try:
            x, y, width, height = (int(part.strip()) for part in parts)
        except ValueError as e:
            raise ConfigError(f"Invalid window geometry {text!r}: expected X,Y,W,H") from e
        if width <= 0 or height <= 0:
            raise ConfigError(f"Invalid window size {width}x{height}")
        return Window(x=x, y=y, width=width, height=height)


class TargetLocator(metaclass=ABCMeta):
    """Supplies the current geometry of the playback target."""

    @abstractmethod
    def locate(self) -> Window:
        raise NotImplementedError()


class FixedLocator(TargetLocator):
    """A target whose geometry is known in advance."""

    def __init__(self, window: Window) -> None:
        self._window = window

    @override
    def locate(self) -> Window:
        return self._window


class FretLayout:
    """Maps string positions to screen coordinates inside a window.

    The offsets were measured on a reference-sized target and are scaled
    to the actual window size.
    """

    def __init__(self, window: Window) -> None:
        ref_width, ref_height = constants.REFERENCE_SIZE
        self._window = window
        self._scale_x = window.width / ref_width
        self._scale_y = window.height / ref_height
        self._left = int(constants.STRINGS_LEFT * self._scale_x)
        self._top = int(constants.FRETS_TOP * self._scale_y)
        self._string = int(constants.STRING_SPACING * self._scale_x)
        self._fret = int(constants.FRET_SPACING * self._scale_y)

    def point(self, pos: StringPos) -> Tuple[int, int]:
        """Absolute coordinates of the fret on the given string."""
        x = self._window.x + self._left + pos.string * self._string
        y = self._window.y + self._top + pos.fret * self._fret
        logging.debug(
            "x: %d y: %d | scale_x %.3f scale_y %.3f", x, y, self._scale_x, self._scale_y
        )
        return x, y

    def reset_point(self) -> Tuple[int, int]:
        """Coordinates of the control that returns every string to open."""
        return self.point(StringPos(string=constants.RESET_STRING, fret=0))
