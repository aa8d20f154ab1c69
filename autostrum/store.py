"""Persistence of the tracks chosen for each song."""

from __future__ import annotations

import logging
import sqlite3
from typing import AbstractSet, Iterable, List, Optional

from autostrum.base import Closeable, ConfigError
from autostrum.song import Song

_SCHEMA = """
CREATE TABLE IF NOT EXISTS track_selections (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    path TEXT NOT NULL UNIQUE,
    tracks TEXT
);
"""


def encode_tracks(tracks: Iterable[int]) -> str:
    return ",".join(str(track) for track in tracks)


def decode_tracks(text: str) -> List[int]:
    """Parse a comma separated list, skipping anything that is not an index."""
    return [int(part) for part in text.split(",") if part.strip().isdigit()]


class TrackStore(Closeable):
    """Saved track selections keyed by song path, in a SQLite database."""

    def __init__(self, path: str) -> None:
        """Open or create the database.

        Raises:
            ConfigError: If the database cannot be opened or initialized.
        """
        try:
            self._conn = sqlite3.connect(path)
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error as e:
            raise ConfigError(f"Cannot open track database {path}: {e}") from e

    def load(self, song_path: str) -> Optional[List[int]]:
        """The saved selection for a song, or None if none was saved."""
        row = self._conn.execute(
            "SELECT tracks FROM track_selections WHERE path = ?;", (song_path,)
        ).fetchone()
        if row is None:
            return None
        else:
            return decode_tracks(row[0] or "")

    def save(self, song_path: str, tracks: Iterable[int]) -> None:
        encoded = encode_tracks(sorted(tracks))
        logging.debug("Saving tracks for %s: %s", song_path, encoded)
        with self._conn:
            self._conn.execute(
                "INSERT INTO track_selections (path, tracks) VALUES (?, ?) "
                "ON CONFLICT(path) DO UPDATE SET tracks = excluded.tracks;",
                (song_path, encoded),
            )

    def close(self) -> None:
        self._conn.close()


def default_selection(song: Song, saved: Optional[Iterable[int]]) -> AbstractSet[int]:
    """All tracks when nothing was saved, otherwise the saved tracks the song has."""
    if saved is None:
        return frozenset(range(song.num_tracks))
    else:
        return frozenset(track for track in saved if 0 <= track < song.num_tracks)


def parse_tracks(text: str) -> List[int]:
    """Parse a "0,2,3" style list of track indices typed by the user.

    Raises:
        ConfigError: If an entry is not a non-negative integer.
    """
    tracks = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit():
            raise ConfigError(f"Invalid track index {part!r}")
        tracks.append(int(part))
    return tracks


def choose_selection(
    song: Song, store: TrackStore, requested: Optional[str] = None
) -> AbstractSet[int]:
    """Pick the tracks to play and remember the choice for next time.

    Args:
        song: The song being queued.
        store: Where selections are saved.
        requested: Tracks given explicitly, or None to reuse the saved ones.
    """
    if requested is not None:
        selection = default_selection(song, parse_tracks(requested))
    else:
        selection = default_selection(song, store.load(song.name))
    store.save(song.name, selection)
    return selection
