"""Real-time playback of a song on the virtual instrument.

The Player walks the song's timeline one tick at a time, sleeping for the
duration of each tick under the current tempo. Controls are polled at every
tick, so an interrupt or pause takes effect within one tick (or one pause poll
interval while paused). Note-on events are transposed, clamped, assigned to a
string and sent to the target as a fret click followed by a strum.
"""

from __future__ import annotations

import logging
from enum import Enum, auto, unique
from fractions import Fraction
from threading import Event
from typing import AbstractSet, Optional

from autostrum import constants
from autostrum.clock import Clock, SystemClock
from autostrum.config import PlayerSettings
from autostrum.controls import Control, ControlSource
from autostrum.fretboard import StringResolver, clamp_note
from autostrum.inject import InputInjector
from autostrum.midi import is_note_on_msg, tempo_of
from autostrum.progress import NullProgress, ProgressSink
from autostrum.shared import PlaybackShared
from autostrum.shift import ShiftReport, shift_report
from autostrum.song import Song
from autostrum.target import FretLayout, TargetLocator
from autostrum.timeline import EventHeap, TimedEvent, build_timeline

_MICROS_PER_SECOND = 1_000_000


@unique
class PlayerState(Enum):
    """Where the player is in its lifecycle."""

    AwaitingStart = auto()
    Playing = auto()
    Paused = auto()
    Finished = auto()
    Interrupted = auto()
    Stopped = auto()


@unique
class PlayOutcome(Enum):
    """How a call to Player.play ended."""

    Completed = auto()
    """The song (and every loop of it) ran to the end."""
    Interrupted = auto()
    """The user or the caller asked playback to stop."""


class Player:
    """Plays one song, optionally looping, on the calling thread."""

    def __init__(
        self,
        song: Song,
        selection: AbstractSet[int],
        settings: PlayerSettings,
        injector: InputInjector,
        controls: ControlSource,
        locator: TargetLocator,
        progress: Optional[ProgressSink] = None,
        shared: Optional[PlaybackShared] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._song = song
        self._selection = frozenset(selection)
        self._settings = settings
        self._injector = injector
        self._controls = controls
        self._locator = locator
        self._progress = progress if progress is not None else NullProgress()
        self._shared = shared if shared is not None else PlaybackShared()
        self._clock = clock if clock is not None else SystemClock()
        self._report = shift_report(song.note_pitches())
        self._resolver = StringResolver()
        self._layout: Optional[FretLayout] = None
        self._state = (
            PlayerState.AwaitingStart if settings.wait_for_start else PlayerState.Playing
        )
        self._halt = Event()
        self._micros_per_tick = self._default_micros_per_tick()
        self._last_toggle: Optional[float] = None
        # Pacing: ticks are slept against deadlines measured from an anchor
        # so that sleep overshoot does not accumulate.
        self._anchor_time = 0.0
        self._paced_micros = Fraction(0)
        self._elapsed_micros = Fraction(0)

    @property
    def shift(self) -> int:
        return self._report.shift

    @property
    def report(self) -> ShiftReport:
        return self._report

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def micros_per_tick(self) -> Fraction:
        return self._micros_per_tick

    @property
    def shared(self) -> PlaybackShared:
        return self._shared

    @property
    def resolver(self) -> StringResolver:
        return self._resolver

    def _default_micros_per_tick(self) -> Fraction:
        return Fraction(constants.DEFAULT_TEMPO, self._song.ticks_per_beat)

    def play(self, halt: Optional[Event] = None) -> PlayOutcome:
        """Play the song until it ends or is interrupted.

        Args:
            halt: Optional event that stops playback like the Interrupt control.

        Returns:
            Completed or Interrupted.

        Raises:
            InjectionError: If input could not be delivered. Shared state is
                reset before this propagates.
        """
        self._halt = halt if halt is not None else Event()
        logging.info("Escape to stop the song, space to pause")
        try:
            if self._state == PlayerState.AwaitingStart and not self._await_start():
                return self._interrupted()
            self._state = PlayerState.Playing
            if build_timeline(self._song, self._selection).null():
                logging.warning("Nothing to play in %s", self._song.name)
                self._state = PlayerState.Stopped
                return PlayOutcome.Completed
            loop = self._settings.loop
            if loop and self._song.final_tick() == 0:
                logging.warning("Not looping %s: it lasts no time at all", self._song.name)
                loop = False
            self._layout = FretLayout(self._locator.locate())
            # Return the instrument to all open strings
            self._injector.click_at(*self._layout.reset_point())
            while True:
                if not self._play_through():
                    return self._interrupted()
                self._state = PlayerState.Finished
                if not loop:
                    self._state = PlayerState.Stopped
                    logging.info("Finished %s", self._song.name)
                    return PlayOutcome.Completed
                logging.info("Looping the MIDI playback (hold ESC to stop)")
                self._state = PlayerState.Playing
        finally:
            self._shared.reset()
            self._resolver.reset()
            self._last_toggle = None

    def _interrupted(self) -> PlayOutcome:
        self._state = PlayerState.Interrupted
        logging.info("Song interrupted")
        return PlayOutcome.Interrupted

    def _await_start(self) -> bool:
        logging.info("Switch to the target and press backspace to start playing")
        while True:
            if self._halt.is_set():
                return False
            pressed = self._controls.pressed()
            if Control.Interrupt in pressed:
                return False
            if Control.Start in pressed:
                return True
            self._clock.sleep(self._settings.pause_poll_seconds)

    def _play_through(self) -> bool:
        """Play the timeline once. Returns False if interrupted."""
        events = build_timeline(self._song, self._selection)
        self._micros_per_tick = self._default_micros_per_tick()
        self._elapsed_micros = Fraction(0)
        self._shared.set_elapsed(0)
        self._resolver.new_group()
        self._anchor()
        self._progress.begin(self._song.final_tick())
        try:
            return self._drain(events)
        finally:
            self._progress.finish()

    def _drain(self, events: EventHeap) -> bool:
        last_tick = 0
        while True:
            ev = events.pop()
            if ev is None:
                return True
            if self._poll() or not self._wait_while_paused():
                return False
            if ev.tick > last_tick:
                self._resolver.new_group()
                # One tick at a time so controls and progress stay responsive
                for tick in range(last_tick, ev.tick):
                    if not self._wait_tick():
                        return False
                    self._progress.update(tick + 1)
            last_tick = ev.tick
            self._handle(ev)
            self._progress.update(ev.tick)

    def _anchor(self) -> None:
        self._anchor_time = self._clock.now()
        self._paced_micros = Fraction(0)

    def _wait_tick(self) -> bool:
        """Sleep for one tick. Returns False if interrupted."""
        self._paced_micros += self._micros_per_tick
        self._clock.sleep_until(
            self._anchor_time + float(self._paced_micros / _MICROS_PER_SECOND)
        )
        self._elapsed_micros += self._micros_per_tick
        self._shared.set_elapsed(int(self._elapsed_micros))
        if self._poll():
            return False
        return self._wait_while_paused()

    def _wait_while_paused(self) -> bool:
        """Hold while paused without consuming events. Returns False if interrupted."""
        if not self._shared.paused:
            return True
        while self._shared.paused:
            self._clock.sleep(self._settings.pause_poll_seconds)
            if self._poll():
                return False
        self._anchor()
        return True

    def _poll(self) -> bool:
        """Check the controls. Returns True if playback must stop."""
        if self._halt.is_set():
            return True
        pressed = self._controls.pressed()
        if Control.Interrupt in pressed:
            return True
        if Control.TogglePause in pressed:
            now = self._clock.now()
            if (
                self._last_toggle is None
                or now - self._last_toggle >= self._settings.debounce_seconds
            ):
                self._last_toggle = now
                paused = self._shared.toggle_pause()
                self._state = PlayerState.Paused if paused else PlayerState.Playing
                logging.info("Paused" if paused else "Resumed")
        return False

    def _handle(self, ev: TimedEvent) -> None:
        tempo = tempo_of(ev.message)
        if tempo is not None:
            self._micros_per_tick = Fraction(tempo, self._song.ticks_per_beat)
            logging.info(
                "Tempo change: %.3fµs per tick - track %d",
                float(self._micros_per_tick),
                ev.track,
            )
        elif is_note_on_msg(ev.message):
            self._play_note(ev.message.note + self.shift, ev.track)

    def _play_note(self, note: int, track: int) -> None:
        assert self._layout is not None
        note = clamp_note(note)
        pos = self._resolver.resolve(note)
        if pos is None:
            return
        logging.debug(
            "Playing note %d on string %d fret %d - track %d",
            note,
            pos.string + 1,
            pos.fret,
            track,
        )
        if self._resolver.needs_fret(pos):
            self._resolver.set_fret(pos)
            self._injector.click_at(*self._layout.point(pos))
        self._injector.strum(constants.STRUM_KEYS[pos.string], self._settings.hold_seconds)
