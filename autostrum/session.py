"""Playing a queue of songs one after another on a dedicated thread."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from logging import Logger
from threading import Event, Thread
from typing import AbstractSet, List, Optional, Sequence, Union

from autostrum.base import InjectionError
from autostrum.clock import Clock
from autostrum.config import PlayerSettings
from autostrum.controls import ControlSource
from autostrum.inject import InputInjector
from autostrum.player import PlayOutcome, Player
from autostrum.progress import ProgressSink
from autostrum.shared import PlaybackShared
from autostrum.song import Song
from autostrum.target import TargetLocator


@dataclass(frozen=True)
class QueuedSong:
    """A song waiting to be played, with the tracks to play and whether to loop."""

    song: Song
    selection: AbstractSet[int]
    loop: bool = False


type SongResult = Union[PlayOutcome, InjectionError]


@dataclass(frozen=True)
class Collaborators:
    """Everything a player talks to besides the song itself."""

    injector: InputInjector
    controls: ControlSource
    locator: TargetLocator
    progress: Optional[ProgressSink] = None
    clock: Optional[Clock] = None


def play_queue(
    queue: Sequence[QueuedSong],
    settings: PlayerSettings,
    collab: Collaborators,
    shared: Optional[PlaybackShared] = None,
    halt: Optional[Event] = None,
    stop_on_interrupt: bool = False,
) -> List[SongResult]:
    """Play every queued song in order.

    Only the first song waits for the Start control (if the settings ask for
    it). A song that fails to inject input is logged and skipped; its shared
    state is reset before the next song starts.

    Args:
        queue: Songs to play.
        settings: Base settings; the per-song loop flag overrides settings.loop.
        collab: Injector, controls, locator and optional progress and clock.
        shared: Shared state handle, created if not given.
        halt: Event that stops the current song and the rest of the queue.
        stop_on_interrupt: Whether an interrupted song ends the whole queue.

    Returns:
        One outcome or error per song that was started.
    """
    shared = shared if shared is not None else PlaybackShared()
    halt = halt if halt is not None else Event()
    results: List[SongResult] = []
    for index, queued in enumerate(queue):
        if halt.is_set():
            break
        song_settings = replace(
            settings,
            loop=queued.loop,
            wait_for_start=settings.wait_for_start and index == 0,
        )
        logging.info("Playing %s (%d/%d)", queued.song.name, index + 1, len(queue))
        player = Player(
            song=queued.song,
            selection=queued.selection,
            settings=song_settings,
            injector=collab.injector,
            controls=collab.controls,
            locator=collab.locator,
            progress=collab.progress,
            shared=shared,
            clock=collab.clock,
        )
        try:
            outcome = player.play(halt)
        except InjectionError as e:
            logging.error("Input injection failed, skipping %s: %s", queued.song.name, e)
            shared.reset()
            results.append(e)
            continue
        results.append(outcome)
        if outcome == PlayOutcome.Interrupted and stop_on_interrupt:
            break
    return results


class QueueTask:
    """Runs a queue on its own thread and can be halted from outside."""

    def __init__(
        self,
        queue: Sequence[QueuedSong],
        settings: PlayerSettings,
        collab: Collaborators,
        shared: Optional[PlaybackShared] = None,
        stop_on_interrupt: bool = False,
    ) -> None:
        self._queue = queue
        self._settings = settings
        self._collab = collab
        self._shared = shared if shared is not None else PlaybackShared()
        self._stop_on_interrupt = stop_on_interrupt
        self._halt = Event()
        self._results: List[SongResult] = []
        self._thread: Optional[Thread] = None

    @property
    def shared(self) -> PlaybackShared:
        return self._shared

    @property
    def results(self) -> List[SongResult]:
        return self._results

    def run(self, logger: Logger, halt: Event) -> None:
        """Execute the queue, stopping when halt is set."""
        logger.debug("Playback task started")
        self._results = play_queue(
            self._queue,
            self._settings,
            self._collab,
            shared=self._shared,
            halt=halt,
            stop_on_interrupt=self._stop_on_interrupt,
        )
        logger.debug("Playback task finished")

    def start(self) -> None:
        logger = logging.getLogger("autostrum.playback")
        self._thread = Thread(
            target=self.run, args=(logger, self._halt), name="playback", daemon=True
        )
        self._thread.start()

    def halt(self) -> None:
        self._halt.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the task. Returns True if it has finished."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()
