"""Desktop session input through pynput.

pynput connects to the display server when imported, so only the command
line imports this module.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, FrozenSet, Optional, override

from pynput import keyboard, mouse

from autostrum.base import Closeable, InjectionError
from autostrum.controls import Control, ControlSource
from autostrum.inject import InputInjector

KEY_CONTROLS: Dict[keyboard.Key, Control] = {
    keyboard.Key.backspace: Control.Start,
    keyboard.Key.space: Control.TogglePause,
    keyboard.Key.esc: Control.Interrupt,
}
"""Keys bound to each control."""


class PynputInjector(InputInjector):
    """Injects pointer and keyboard input into the desktop session."""

    def __init__(self) -> None:
        self._mouse = mouse.Controller()
        self._keyboard = keyboard.Controller()

    @override
    def click_at(self, x: int, y: int) -> None:
        try:
            self._mouse.position = (x, y)
            self._mouse.click(mouse.Button.left)
        except Exception as e:
            raise InjectionError(f"Failed to click at {x},{y}: {e}") from e

    @override
    def strum(self, key: str, hold: float) -> None:
        try:
            self._keyboard.press(key)
            # The target reads input once per frame
            time.sleep(hold)
            self._keyboard.release(key)
        except Exception as e:
            raise InjectionError(f"Failed to strum key {key!r}: {e}") from e
        logging.debug("Strummed %s for %.3fs", key, hold)


class KeyboardControls(ControlSource, Closeable):
    """Tracks held keys with a pynput listener thread.

    Only the listener thread writes the held set, and it always rebinds a new
    frozenset, so readers see a consistent snapshot without locking.
    """

    def __init__(self, bindings: Optional[Dict[keyboard.Key, Control]] = None) -> None:
        self._bindings = bindings if bindings is not None else KEY_CONTROLS
        self._held: FrozenSet[Control] = frozenset()
        self._listener = keyboard.Listener(
            on_press=self._on_press, on_release=self._on_release
        )
        self._listener.start()

    def _lookup(self, key: Optional[keyboard.Key | keyboard.KeyCode]) -> Optional[Control]:
        if isinstance(key, keyboard.Key):
            return self._bindings.get(key)
        else:
            return None

    def _on_press(self, key: Optional[keyboard.Key | keyboard.KeyCode]) -> None:
        control = self._lookup(key)
        if control is not None:
            self._held = self._held | {control}

    def _on_release(self, key: Optional[keyboard.Key | keyboard.KeyCode]) -> None:
        control = self._lookup(key)
        if control is not None:
            self._held = self._held - {control}

    @override
    def pressed(self) -> FrozenSet[Control]:
        return self._held

    @override
    def close(self) -> None:
        logging.debug("Stopping keyboard listener")
        self._listener.stop()
