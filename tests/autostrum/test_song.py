"""Tests for decoding songs."""

from pathlib import Path

import mido
import pytest

from autostrum.base import ConfigError, SongParseError, UnsupportedTimingError
from autostrum.song import Song, format_track_table
from tests.autostrum.fakes import make_song, note_off, note_on, tempo

HEADER = b"MThd\x00\x00\x00\x06\x00\x01\x00\x01"
END_TRACK = b"MTrk\x00\x00\x00\x04\x00\xff\x2f\x00"


def test_parse_keeps_buffer_and_view() -> None:
    song = make_song([[tempo(500000), note_on(60, time=10), note_off(60, time=20)]])
    assert song.ticks_per_beat == 480
    assert song.format == 1
    assert song.num_tracks == 1
    assert Song.parse(song.data).tracks == song.tracks
    deltas = [delta for delta, _ in song.tracks[0]]
    assert deltas[:3] == [0, 10, 20]


def test_garbage_is_a_parse_error() -> None:
    with pytest.raises(SongParseError):
        Song.parse(b"definitely not a midi file")


def test_truncated_track_is_a_parse_error() -> None:
    truncated = HEADER + b"\x01\xe0" + b"MTrk\x00\x00\x00\x10\x00\x90"
    with pytest.raises(SongParseError):
        Song.parse(truncated)


def test_timecode_division_is_rejected() -> None:
    # -25 frames per second, 40 ticks per frame
    data = HEADER + b"\xe7\x28" + END_TRACK
    with pytest.raises(UnsupportedTimingError):
        Song.parse(data)


def test_config_errors_share_a_base() -> None:
    assert issubclass(SongParseError, ConfigError)
    assert issubclass(UnsupportedTimingError, ConfigError)


def test_minimal_metrical_file() -> None:
    song = Song.parse(HEADER + b"\x00\x60" + END_TRACK)
    assert song.ticks_per_beat == 96
    assert song.note_pitches() == []
    assert song.final_tick() == 0


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SongParseError):
        Song.load(tmp_path / "missing.mid")


def test_load_from_disk(tmp_path: Path) -> None:
    song = make_song([[note_on(64, time=5)]])
    path = tmp_path / "song.mid"
    path.write_bytes(song.data)
    loaded = Song.load(path)
    assert loaded.name == str(path)
    assert loaded.note_pitches() == [64]


def test_note_pitches_ignore_selection_and_velocity() -> None:
    song = make_song(
        [
            [note_on(60), note_on(60, time=10, velocity=0)],
            [note_on(40, time=5), note_off(40, time=5)],
        ]
    )
    assert sorted(song.note_pitches()) == [40, 60, 60]
    assert song.final_tick() == 10


def test_describe_tracks() -> None:
    song = make_song(
        [
            [
                mido.MetaMessage("track_name", name="Lead", time=0),
                mido.Message("program_change", program=25, time=0),
                note_on(60),
                note_on(62, time=10),
            ],
            [
                mido.MetaMessage("instrument_name", name="Kit", time=0),
                mido.Message("program_change", channel=9, program=0, time=0),
                note_on(36, time=0),
            ],
            [],
        ]
    )
    infos = song.describe_tracks()
    assert [info.index for info in infos] == [0, 1, 2]
    assert infos[0].name == "Lead"
    assert infos[0].program == 25
    assert infos[0].program_name == "Acoustic Guitar (steel)"
    assert infos[0].note_count == 2
    assert infos[1].instrument == "Kit"
    assert infos[1].program_name == "Standard Drum Kit"
    assert infos[2].name == "Unknown"
    assert infos[2].program_name == "Unknown"

    table = format_track_table(song, {0})
    lines = table.splitlines()
    assert len(lines) == 4
    assert lines[1].startswith("*")
    assert "Lead" in lines[1]
    assert not lines[2].startswith("*")
