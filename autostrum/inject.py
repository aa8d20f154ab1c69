"""Delivery of synthetic pointer and keyboard input."""

from __future__ import annotations

from abc import ABCMeta, abstractmethod


class InputInjector(metaclass=ABCMeta):
    """Sends pointer clicks and key strokes to the target."""

    @abstractmethod
    def click_at(self, x: int, y: int) -> None:
        """Move the pointer to absolute coordinates and left-click.

        Raises:
            InjectionError: If the input could not be delivered.
        """
        raise NotImplementedError()

    @abstractmethod
    def strum(self, key: str, hold: float) -> None:
        """Press a key, hold it for the given seconds, then release it.

        The hold lets a target that polls input once per frame see the key.

        Raises:
            InjectionError: If the input could not be delivered.
        """
        raise NotImplementedError()
