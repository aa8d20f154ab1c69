"""Classification helpers for decoded MIDI messages.

The timeline carries mido frozen messages (both channel and meta messages);
these predicates keep the string comparisons on message types in one place.
"""

from __future__ import annotations

from typing import Optional, Union, cast

from mido.frozen import FrozenMessage, FrozenMetaMessage

type AnyMessage = Union[FrozenMessage, FrozenMetaMessage]


def is_meta_msg(msg: AnyMessage) -> bool:
    """Check if a message is a meta message (tempo, names, end of track...).

    Args:
        msg: The MIDI message to check.

    Returns:
        True if the message is a meta message.
    """
    return cast(bool, msg.is_meta)


def is_note_on_msg(msg: AnyMessage) -> bool:
    """Check if a message is a true note-on message.

    Args:
        msg: The MIDI message to check.

    Returns:
        True if the message is note_on with velocity > 0.
    """
    return cast(bool, msg.type == "note_on" and msg.velocity > 0)


def tempo_of(msg: AnyMessage) -> Optional[int]:
    """Extract the tempo from a set_tempo meta message.

    Args:
        msg: The MIDI message to inspect.

    Returns:
        Microseconds per beat if this is a tempo message, None otherwise.
    """
    if msg.type == "set_tempo":
        return cast(int, msg.tempo)
    else:
        return None
