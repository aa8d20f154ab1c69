"""Tests for string and fret assignment."""

from typing import List

import pytest
from hypothesis import given
from hypothesis import strategies as st

from autostrum import constants
from autostrum.fretboard import StringPos, StringResolver, clamp_note, string_window
from tests.autostrum.hypo import configure_hypo

configure_hypo()


def test_windows_cover_the_playable_range() -> None:
    covered = set()
    for string in range(constants.NUM_STRINGS):
        window = string_window(string)
        assert len(window) == constants.NUM_FRETS
        covered.update(window)
    assert covered == set(range(constants.MIN_NOTE, constants.MAX_NOTE + 1))


@pytest.mark.parametrize("note, clamped", [(0, 40), (39, 40), (40, 40), (60, 60), (79, 79), (127, 79)])
def test_clamp_note(note: int, clamped: int) -> None:
    assert clamp_note(note) == clamped


def test_chord_uses_distinct_strings() -> None:
    resolver = StringResolver()
    positions = [resolver.resolve(note) for note in [40, 45, 50]]
    assert all(pos is not None for pos in positions)
    strings = [pos.string for pos in positions if pos is not None]
    assert len(set(strings)) == 3
    for note, pos in zip([40, 45, 50], positions):
        assert pos is not None
        assert note in string_window(pos.string)
        assert constants.OPEN_PITCHES[pos.string] + pos.fret == note


def test_lowest_note_only_fits_lowest_string() -> None:
    resolver = StringResolver()
    assert resolver.resolve(40) == StringPos(string=0, fret=0)
    # The only string for 40 is now used in this group
    assert resolver.resolve(40) is None


def test_new_group_frees_strings() -> None:
    resolver = StringResolver()
    assert resolver.resolve(40) is not None
    resolver.new_group()
    assert resolver.resolve(40) == StringPos(string=0, fret=0)


def test_least_recently_used_string_wins() -> None:
    resolver = StringResolver()
    # 50 fits strings 0, 1 and 2; all unused so the lowest wins
    assert resolver.resolve(50) == StringPos(string=0, fret=10)
    resolver.new_group()
    # string 0 was used most recently, so string 1 is preferred
    assert resolver.resolve(50) == StringPos(string=1, fret=5)
    resolver.new_group()
    assert resolver.resolve(50) == StringPos(string=2, fret=0)
    resolver.new_group()
    assert resolver.resolve(50) == StringPos(string=0, fret=10)


def test_seven_notes_overflow_six_strings() -> None:
    resolver = StringResolver()
    results = [resolver.resolve(note) for note in [40, 45, 50, 55, 60, 65, 70]]
    found = [pos for pos in results if pos is not None]
    assert len(found) <= constants.NUM_STRINGS
    assert None in results
    assert len({pos.string for pos in found}) == len(found)


def test_fret_tracking_and_reset() -> None:
    resolver = StringResolver()
    pos = StringPos(string=2, fret=7)
    assert resolver.needs_fret(pos)
    resolver.set_fret(pos)
    assert not resolver.needs_fret(pos)
    assert not resolver.needs_fret(StringPos(string=3, fret=0))
    resolver.resolve(60)
    resolver.reset()
    assert resolver.needs_fret(pos)
    assert all(not state.used and state.last_used == 0 for state in resolver.strings)


@given(
    st.lists(
        st.integers(min_value=constants.MIN_NOTE, max_value=constants.MAX_NOTE),
        min_size=1,
        max_size=8,
    )
)
def test_group_assignments_are_consistent(notes: List[int]) -> None:
    resolver = StringResolver()
    used = set()
    for note in notes:
        pos = resolver.resolve(note)
        if pos is None:
            continue
        assert pos.string not in used
        used.add(pos.string)
        assert 0 <= pos.fret < constants.NUM_FRETS
        assert constants.OPEN_PITCHES[pos.string] + pos.fret == note
