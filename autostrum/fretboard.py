"""String and fret assignment for the six-string instrument.

Each string covers a window of 16 consecutive pitches starting at its open
pitch. Within one tick group each string can sound only once, so a chord is
spread over distinct strings; among the strings that can play a pitch the one
used least recently is chosen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from autostrum import constants
from autostrum.base import Resettable


@dataclass(frozen=True)
class StringPos:
    """A position on the fretboard as a string and fret combination."""

    string: int
    """The string number (0 is the lowest string)."""
    fret: int
    """Semitones above the open string (0 is open)."""


def string_window(string: int) -> range:
    """The pitches a string can play, from open to the highest fret."""
    low = constants.OPEN_PITCHES[string]
    return range(low, low + constants.NUM_FRETS)


def clamp_note(note: int) -> int:
    """Force a pitch into the playable window."""
    return max(constants.MIN_NOTE, min(constants.MAX_NOTE, note))


@dataclass
class StringState:
    """Mutable per-string bookkeeping."""

    fret: int = 0
    """Fret currently held down on the target."""
    used: bool = False
    """Whether the string already sounded in the current tick group."""
    last_used: int = 0
    """Usage stamp of the last time the string was chosen (0 = never)."""


@dataclass
class StringResolver(Resettable):
    """Assigns pitches to strings, one tick group at a time."""

    strings: List[StringState] = field(
        default_factory=lambda: [StringState() for _ in range(constants.NUM_STRINGS)]
    )
    _stamp: int = 0

    def reset(self) -> None:
        """Return every string to open, unused and never used."""
        self.strings = [StringState() for _ in range(constants.NUM_STRINGS)]
        self._stamp = 0

    def new_group(self) -> None:
        """Allow every string to sound again (time has advanced)."""
        for state in self.strings:
            state.used = False

    def candidates(self, note: int) -> List[int]:
        """Unused strings whose window contains the pitch, least recently used first."""
        found = [
            index
            for index, state in enumerate(self.strings)
            if not state.used and note in string_window(index)
        ]
        # sorted is stable, so equal stamps keep the lower string first
        return sorted(found, key=lambda index: self.strings[index].last_used)

    def resolve(self, note: int) -> Optional[StringPos]:
        """Pick a string for a pitch and mark it used for this group.

        Args:
            note: A pitch already transposed and clamped to the window.

        Returns:
            The chosen position, or None if no unused string can play it.
        """
        found = self.candidates(note)
        if not found:
            logging.warning("No suitable string found for note %d", note)
            return None
        string = found[0]
        self._stamp += 1
        state = self.strings[string]
        state.used = True
        state.last_used = self._stamp
        return StringPos(string=string, fret=note - constants.OPEN_PITCHES[string])

    def needs_fret(self, pos: StringPos) -> bool:
        """Whether the target must be clicked to move the string to this fret.

        Clicking the fret that is already held would release it instead.
        """
        return self.strings[pos.string].fret != pos.fret

    def set_fret(self, pos: StringPos) -> None:
        self.strings[pos.string].fret = pos.fret
