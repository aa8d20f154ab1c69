"""Absolute-time ordering of a song's events.

Tracks store their events as delta ticks; playback needs one queue of all
events ordered by absolute tick. Events on the same tick are ordered by track
index and then by their position within the track.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import AbstractSet, List, Optional

from autostrum.midi import AnyMessage, is_meta_msg
from autostrum.song import Song


@dataclass(frozen=True, order=True)
class TimedEvent:
    """A message placed at an absolute tick."""

    tick: int
    """Absolute position in ticks from the start of the song."""

    track: int
    """Index of the track the message came from."""

    index: int
    """Position of the message within its track."""

    message: AnyMessage = field(compare=False)
    """The decoded message."""


@dataclass
class EventHeap:
    """A priority queue of timed events, earliest first."""

    unwrap: List[TimedEvent]

    @staticmethod
    def empty() -> EventHeap:
        """Create an empty event heap."""
        return EventHeap([])

    def push(self, ev: TimedEvent) -> None:
        heapq.heappush(self.unwrap, ev)

    def pop(self) -> Optional[TimedEvent]:
        """Pop the earliest event from the heap."""
        if self.unwrap:
            return heapq.heappop(self.unwrap)
        else:
            return None

    def null(self) -> bool:
        return not self.unwrap


def build_timeline(song: Song, selection: AbstractSet[int]) -> EventHeap:
    """Merge the tracks of a song into one absolute-time queue.

    Meta events are kept from every track so tempo changes apply whichever
    tracks are played. Channel events are kept only for selected tracks.

    Args:
        song: The decoded song.
        selection: Indices of the tracks whose notes should be played.

    Returns:
        A fresh heap; calling this again with the same inputs gives an
        equivalent heap.
    """
    heap = EventHeap.empty()
    for track_index, track in enumerate(song.tracks):
        should_play = track_index in selection
        tick = 0
        for index, (delta, msg) in enumerate(track):
            tick += delta
            if not should_play and not is_meta_msg(msg):
                continue
            heap.push(TimedEvent(tick=tick, track=track_index, index=index, message=msg))
    return heap
