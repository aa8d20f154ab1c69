"""Constants for the virtual instrument, its screen layout and playback pacing."""

from typing import List, Tuple

MIN_NOTE = 40
"""Lowest pitch the instrument can play (open low E)."""

MAX_NOTE = 79
"""Highest pitch the instrument can play (high E, fret 15)."""

MAX_SHIFT = 127
"""Largest transposition magnitude considered by the optimizer."""

NUM_STRINGS = 6
"""Number of strings on the instrument."""

NUM_FRETS = 16
"""Fret positions per string, including the open position 0."""

OPEN_PITCHES: List[int] = [40, 45, 50, 55, 59, 64]
"""Open-string pitches from the lowest string (index 0) upwards."""

STRUM_KEYS: List[str] = ["q", "w", "e", "r", "t", "y"]
"""Key that strums each string, indexed by string."""

RESET_STRING = NUM_STRINGS
"""Pseudo string index of the on-screen control that returns every string to open."""

DEFAULT_TEMPO = 500000
"""MIDI default tempo in microseconds per beat (120 bpm)."""

DEFAULT_MIN_FPS = 40
"""Default lowest frame rate of the target, which bounds the strum hold time."""

DEFAULT_PAUSE_POLL = 0.1
"""Seconds between control polls while paused or waiting to start."""

DEFAULT_DEBOUNCE = 0.2
"""Seconds a pause toggle is ignored after the previous toggle."""

DEFAULT_DB_PATH = "autostrum.db"
"""Default location of the track selection database."""

# Screen geometry of the instrument, measured on a reference target.
REFERENCE_SIZE: Tuple[int, int] = (2560, 1440)
"""Width and height the layout offsets below were measured at."""

STRINGS_LEFT = 460.0
"""Offset from the left edge of the target to the lowest string."""

FRETS_TOP = 130.0
"""Offset from the top edge of the target to the open position."""

STRING_SPACING = 44.0
"""Distance between string centres."""

FRET_SPACING = 82.0
"""Distance between fret centres."""

DRUM_CHANNEL = 9
"""Zero-based MIDI channel reserved for percussion."""
