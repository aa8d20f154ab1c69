"""Parsed songs and their owning byte buffer.

A Song is built only from its raw bytes, which it keeps alongside the decoded
view. Every failure to decode is reported as a SongParseError before anything
else happens, and timecode-based files are refused up front.
"""

from __future__ import annotations

import io
import logging
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, List, Optional, Tuple

import mido
from mido.frozen import freeze_message

from autostrum import instruments
from autostrum.base import SongParseError, UnsupportedTimingError
from autostrum.midi import AnyMessage

type TrackEvent = Tuple[int, AnyMessage]
"""A delta time in ticks paired with the message it precedes."""

type Track = Tuple[TrackEvent, ...]

_PARSE_ERRORS = (OSError, EOFError, ValueError, KeyError, IndexError, struct.error)


@dataclass(frozen=True)
class TrackInfo:
    """Summary of one track, used to choose which tracks to play."""

    index: int
    name: str
    instrument: str
    program: Optional[int]
    program_name: str
    note_count: int


def _freeze_track(track: mido.MidiTrack) -> Track:
    return tuple((msg.time, freeze_message(msg)) for msg in track)


def _check_division(ticks_per_beat: int) -> None:
    # mido unpacks the division as a signed short, so SMPTE divisions
    # (high bit set) show up as negative values.
    if ticks_per_beat <= 0 or ticks_per_beat & 0x8000:
        raise UnsupportedTimingError(ticks_per_beat)


@dataclass(frozen=True)
class Song:
    """An immutable decoded MIDI file together with the bytes it came from."""

    name: str
    """Identifier of the song, usually its path."""

    data: bytes = field(repr=False)
    """The raw file contents."""

    ticks_per_beat: int
    """Metrical timing resolution."""

    format: int
    """The MIDI file type (0, 1 or 2)."""

    tracks: Tuple[Track, ...] = field(repr=False)
    """Per-track sequences of (delta ticks, message)."""

    @classmethod
    def parse(cls, data: bytes, name: str = "<memory>") -> Song:
        """Decode a complete MIDI file.

        Args:
            data: The raw file contents.
            name: Identifier used in logs and as the track store key.

        Returns:
            The decoded song.

        Raises:
            SongParseError: If the data is not a well-formed MIDI file.
            UnsupportedTimingError: If the file uses timecode division.
        """
        try:
            midi = mido.MidiFile(file=io.BytesIO(data))
        except _PARSE_ERRORS as e:
            raise SongParseError(f"Failed to parse MIDI data for {name}: {e}") from e
        _check_division(midi.ticks_per_beat)
        if midi.type != 1:
            logging.warning("Format not parallel (type %d): %s", midi.type, name)
        tracks = tuple(_freeze_track(track) for track in midi.tracks)
        return cls(
            name=name,
            data=bytes(data),
            ticks_per_beat=midi.ticks_per_beat,
            format=midi.type,
            tracks=tracks,
        )

    @classmethod
    def load(cls, path: Path | str) -> Song:
        """Read and decode a MIDI file from disk.

        Raises:
            SongParseError: If the file cannot be read or decoded.
            UnsupportedTimingError: If the file uses timecode division.
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise SongParseError(f"Failed to read MIDI file {path}: {e}") from e
        return cls.parse(data, name=str(path))

    @property
    def num_tracks(self) -> int:
        return len(self.tracks)

    def note_pitches(self) -> List[int]:
        """Every note-on key in the song, whatever the track selection."""
        return [
            msg.note
            for track in self.tracks
            for _, msg in track
            if msg.type == "note_on"
        ]

    def final_tick(self) -> int:
        """The absolute tick of the last event of the longest track."""
        return max((sum(delta for delta, _ in track) for track in self.tracks), default=0)

    def describe_tracks(self) -> List[TrackInfo]:
        """Summarize every track with its names and instrument."""
        infos = []
        for index, track in enumerate(self.tracks):
            name: Optional[str] = None
            instrument: Optional[str] = None
            program: Optional[int] = None
            channel: Optional[int] = None
            note_count = 0
            for _, msg in track:
                match msg.type:
                    case "track_name" if name is None:
                        name = msg.name
                    case "instrument_name" if instrument is None:
                        instrument = msg.name
                    case "program_change" if program is None:
                        program = msg.program
                        channel = msg.channel
                    case "note_on":
                        note_count += 1
                    case _:
                        pass
            infos.append(
                TrackInfo(
                    index=index,
                    name=name or instruments.UNKNOWN,
                    instrument=instrument or instruments.UNKNOWN,
                    program=program,
                    program_name=instruments.program_name(program, channel),
                    note_count=note_count,
                )
            )
        return infos


def format_track_table(song: Song, selection: AbstractSet[int]) -> str:
    """Render one line per track, marking the selected ones with '*'."""
    lines = [f"{'':2}{'#':>3}  {'Track Name':24} {'Program':28} {'Instrument':20} Notes"]
    for info in song.describe_tracks():
        mark = "*" if info.index in selection else " "
        lines.append(
            f"{mark:2}{info.index:>3}  {info.name[:24]:24} {info.program_name[:28]:28} "
            f"{info.instrument[:20]:20} {info.note_count}"
        )
    return "\n".join(lines)
