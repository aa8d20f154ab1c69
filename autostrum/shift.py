"""Transposition chosen once per song to fit it onto the instrument."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

from autostrum import constants


def count_playable(pitches: Iterable[int], shift: int) -> int:
    """Count the pitches that land inside the playable window after shifting."""
    return sum(
        1
        for pitch in pitches
        if constants.MIN_NOTE <= pitch + shift <= constants.MAX_NOTE
    )


def optimal_shift(pitches: Iterable[int]) -> int:
    """Find the shift that makes the most notes playable.

    Every shift in [-127, 127] is tried. Among shifts with the best count the
    one closest to zero wins; between -k and +k the one seen first (-k) is
    kept.

    Args:
        pitches: MIDI note numbers (0-127).

    Returns:
        The shift to add to every pitch. Zero for an empty input.
    """
    notes = list(pitches)
    best_shift = 0
    best_count = 0
    for shift in range(-constants.MAX_SHIFT, constants.MAX_SHIFT + 1):
        count = count_playable(notes, shift)
        if count > best_count or (count == best_count and abs(shift) < abs(best_shift)):
            best_count = count
            best_shift = shift
    return best_shift


@dataclass(frozen=True)
class ShiftReport:
    """How well a song fits the instrument once transposed."""

    shift: int
    total: int
    playable: int

    @property
    def clamped(self) -> int:
        """Notes that fall outside the window and will be clamped to its edges."""
        return self.total - self.playable

    @property
    def percent(self) -> float:
        """Share of playable notes; a song without notes is 0% playable."""
        if self.total == 0:
            return 0.0
        else:
            return self.playable / self.total * 100.0


def shift_report(pitches: Iterable[int]) -> ShiftReport:
    """Compute and log the optimal shift along with its coverage."""
    notes: List[int] = list(pitches)
    shift = optimal_shift(notes)
    report = ShiftReport(shift=shift, total=len(notes), playable=count_playable(notes, shift))
    logging.info("Optimal shift: %d", report.shift)
    logging.info(
        "Total notes: %d | Playable notes: %d | Clamped notes: %d | %.1f%% playable",
        report.total,
        report.playable,
        report.clamped,
        report.percent,
    )
    return report
