"""Reply correlation between a sent message and its reply callback.

Every ``send`` wraps the user message in a fresh ``Envelope``; replies are
correlated with that envelope, never with the message value, so sending the
same object twice yields two independent correlations.
"""

from __future__ import annotations

import weakref
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

type ReplyCallback = Callable[[Any], None]


@dataclass(eq=False)
class Envelope[M]:
    """One message instance travelling through a mailbox.

    Compared and hashed by identity so it can key a weak mapping.
    """

    message: M


class ReplyCorrelator:
    """Associates in-flight envelopes with their reply callbacks.

    Entries live in a ``weakref.WeakKeyDictionary``: once an envelope is no
    longer referenced (processed, or discarded with its actor's mailbox) its
    callback is released without explicit cleanup.

    Examples
    --------
    >>> replies = ReplyCorrelator()
    >>> env = Envelope({"type": "getBalance"})
    >>> replies.register(env, print)
    >>> replies.take_and_clear(env) is print
    True
    >>> replies.take_and_clear(env) is None
    True
    """

    def __init__(self) -> None:
        self._callbacks: weakref.WeakKeyDictionary[Envelope[Any], ReplyCallback] = (
            weakref.WeakKeyDictionary()
        )

    def register(self, envelope: Envelope[Any], callback: ReplyCallback) -> None:
        self._callbacks[envelope] = callback

    def take_and_clear(self, envelope: Envelope[Any]) -> ReplyCallback | None:
        """Remove and return the callback registered for *envelope*, if any."""
        return self._callbacks.pop(envelope, None)

    def __contains__(self, envelope: object) -> bool:
        return envelope in self._callbacks

    def __len__(self) -> int:
        return len(self._callbacks)
