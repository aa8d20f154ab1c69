"""Plays MIDI songs on a six-string virtual instrument through synthetic input."""

from autostrum.base import (
    AutostrumError,
    ConfigError,
    InjectionError,
    SongParseError,
    UnsupportedTimingError,
)
from autostrum.config import PlayerSettings
from autostrum.player import PlayOutcome, Player, PlayerState
from autostrum.song import Song

__all__ = [
    "AutostrumError",
    "ConfigError",
    "InjectionError",
    "PlayOutcome",
    "Player",
    "PlayerSettings",
    "PlayerState",
    "Song",
    "SongParseError",
    "UnsupportedTimingError",
]
