"""Tests for building the absolute-time event queue."""

from typing import List, Tuple

import mido
from hypothesis import given
from hypothesis import strategies as st

from autostrum.song import Song
from autostrum.timeline import EventHeap, TimedEvent, build_timeline
from tests.autostrum.fakes import make_song, note_off, note_on, tempo
from tests.autostrum.hypo import configure_hypo

configure_hypo()


def drain(heap: EventHeap) -> List[TimedEvent]:
    events = []
    while True:
        ev = heap.pop()
        if ev is None:
            return events
        events.append(ev)


def keys(events: List[TimedEvent]) -> List[Tuple[int, int, int]]:
    return [(ev.tick, ev.track, ev.index) for ev in events]


def two_track_song() -> Song:
    return make_song(
        [
            [
                mido.MetaMessage("track_name", name="Lead", time=0),
                tempo(500000),
                note_on(60, time=0),
                note_off(60, time=240),
            ],
            [
                mido.MetaMessage("track_name", name="Bass", time=0),
                mido.Message("program_change", program=33, time=0),
                note_on(40, time=120),
                tempo(400000, time=0),
                note_off(40, time=360),
            ],
        ]
    )


def test_absolute_ticks_accumulate() -> None:
    song = make_song([[note_on(50, time=10), note_on(52, time=20), note_on(54, time=30)]])
    events = drain(build_timeline(song, {0}))
    notes = [(ev.tick, ev.message.note) for ev in events if ev.message.type == "note_on"]
    assert notes == [(10, 50), (30, 52), (60, 54)]


def test_events_pop_in_tick_order() -> None:
    events = drain(build_timeline(two_track_song(), {0, 1}))
    ticks = [ev.tick for ev in events]
    assert ticks == sorted(ticks)


def test_unselected_track_keeps_only_meta_events() -> None:
    events = drain(build_timeline(two_track_song(), {0}))
    track1 = [ev for ev in events if ev.track == 1]
    assert track1
    assert all(ev.message.is_meta for ev in track1)
    assert "set_tempo" in {ev.message.type for ev in track1}
    assert "track_name" in {ev.message.type for ev in track1}
    track0_types = [ev.message.type for ev in events if ev.track == 0]
    assert "note_on" in track0_types
    assert "note_off" in track0_types


def test_no_selection_keeps_every_tempo() -> None:
    events = drain(build_timeline(two_track_song(), set()))
    tempos = [(ev.tick, ev.message.tempo) for ev in events if ev.message.type == "set_tempo"]
    assert tempos == [(0, 500000), (120, 400000)]
    assert all(ev.message.is_meta for ev in events)


def test_same_tick_orders_by_track_then_file_order() -> None:
    song = make_song(
        [
            [note_on(60, time=5), note_on(64, time=0)],
            [note_on(40, time=5), note_on(45, time=0)],
        ]
    )
    events = [ev for ev in drain(build_timeline(song, {0, 1})) if ev.tick == 5]
    notes = [ev.message.note for ev in events if ev.message.type == "note_on"]
    assert notes == [60, 64, 40, 45]


def test_heap_orders_by_tick_then_track_then_index() -> None:
    heap = EventHeap.empty()
    late = TimedEvent(tick=5, track=0, index=0, message=note_on(60))
    early = TimedEvent(tick=1, track=1, index=3, message=note_on(40))
    tie = TimedEvent(tick=1, track=1, index=2, message=note_on(45))
    for ev in [late, early, tie]:
        heap.push(ev)
    assert not heap.null()
    assert drain(heap) == [tie, early, late]
    assert heap.null()


def test_empty_heap() -> None:
    heap = EventHeap.empty()
    assert heap.null()
    assert heap.pop() is None


track_strategy = st.lists(
    st.tuples(st.integers(min_value=0, max_value=50), st.integers(min_value=0, max_value=127)),
    max_size=10,
)


@given(st.lists(track_strategy, min_size=1, max_size=4), st.data())
def test_rebuild_is_equivalent(tracks: List[List[Tuple[int, int]]], data: st.DataObject) -> None:
    song = make_song([[note_on(note, time=delta) for delta, note in track] for track in tracks])
    selection = data.draw(st.sets(st.integers(min_value=0, max_value=len(tracks) - 1)))
    first = drain(build_timeline(song, selection))
    second = drain(build_timeline(song, selection))
    assert keys(first) == keys(second)
    assert [ev.message for ev in first] == [ev.message for ev in second]
    assert keys(first) == sorted(keys(first))
    played = {ev.track for ev in first if not ev.message.is_meta}
    assert played <= selection
