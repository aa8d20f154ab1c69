"""Main entry point for the autostrum player.

This module contains the command-line handling: it sets up logging, loads the
requested songs and their track selections, and runs the playback queue on a
dedicated thread until it finishes or the user interrupts it.
"""

import logging
import sys
from argparse import ArgumentParser, Namespace
from typing import List, Optional

from autostrum import constants
from autostrum.base import ConfigError
from autostrum.config import PlayerSettings, hold_from_fps
from autostrum.progress import LogProgress
from autostrum.session import Collaborators, QueuedSong, QueueTask
from autostrum.shared import PlaybackShared
from autostrum.song import Song, format_track_table
from autostrum.store import TrackStore, choose_selection, default_selection
from autostrum.target import FixedLocator, Window


def make_parser() -> ArgumentParser:
    """Create the command-line argument parser.

    Returns:
        An ArgumentParser with the play and tracks commands.
    """
    parser = ArgumentParser(prog="autostrum")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--db", default=constants.DEFAULT_DB_PATH)
    commands = parser.add_subparsers(dest="command", required=True)

    play = commands.add_parser("play", help="play songs on the target")
    play.add_argument("files", nargs="+")
    play.add_argument("--window", required=True, help="target geometry as X,Y,W,H")
    play.add_argument("--tracks", default=None, help="comma separated track indices")
    play.add_argument("--loop", action="store_true")
    play.add_argument("--no-wait", action="store_true")
    play.add_argument("--min-fps", type=int, default=constants.DEFAULT_MIN_FPS)
    play.add_argument("--stop-on-interrupt", action="store_true")

    tracks = commands.add_parser("tracks", help="list the tracks of a song")
    tracks.add_argument("file")
    return parser


def configure_logging(log_level: str) -> None:
    """Configure the logging system with the specified log level.

    Args:
        log_level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING').
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s",
        level=log_level,
    )


def run_tracks(args: Namespace) -> None:
    song = Song.load(args.file)
    store = TrackStore(args.db)
    try:
        selection = default_selection(song, store.load(song.name))
    finally:
        store.close()
    print(format_track_table(song, selection))


def run_play(args: Namespace) -> None:
    window = Window.parse(args.window)
    settings = PlayerSettings(
        loop=args.loop,
        wait_for_start=not args.no_wait,
        hold_seconds=hold_from_fps(args.min_fps),
    )
    store = TrackStore(args.db)
    try:
        queue = []
        for path in args.files:
            song = Song.load(path)
            logging.info("Selected: %s", song.name)
            queue.append(QueuedSong(song, choose_selection(song, store, args.tracks), args.loop))
    finally:
        store.close()

    # pynput needs a display session as soon as it is imported
    from autostrum.desktop import KeyboardControls, PynputInjector

    shared = PlaybackShared()
    controls = KeyboardControls()
    collab = Collaborators(
        injector=PynputInjector(),
        controls=controls,
        locator=FixedLocator(window),
        progress=LogProgress(shared),
    )
    task = QueueTask(queue, settings, collab, shared, args.stop_on_interrupt)
    task.start()
    try:
        while not task.join(timeout=0.5):
            pass
    except KeyboardInterrupt:
        logging.info("stopping playback")
        task.halt()
        task.join()
    finally:
        controls.close()
    for queued, result in zip(queue, task.results):
        logging.info("%s: %s", queued.song.name, result)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the autostrum player.

    Parses command-line arguments, configures logging and runs the chosen
    command. Configuration errors are logged and exit with status 1.

    Args:
        argv: Arguments to parse instead of the process arguments.
    """
    parser = make_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        if args.command == "tracks":
            run_tracks(args)
        else:
            run_play(args)
    except ConfigError as e:
        logging.error("%s", e)
        sys.exit(1)
    logging.info("done")


if __name__ == "__main__":
    main()
