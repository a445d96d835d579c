"""Handling context passed to an actor's handler for one message.

Exposes the actor's own address, a once-only ``respond_with`` capability
when the sender asked for a reply, sending to other actors, and the
actor's logger.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from troupe.address import ActorAddress
    from troupe.node import Node
    from troupe.reply import ReplyCallback


type Handler[M, R, S] = Callable[[HandlerContext[R], S, M], S | Awaitable[S]]


class HandlerContext[R]:
    """Context for a single handler invocation.

    ``respond_with`` is ``None`` when the message was sent without a reply
    callback. Otherwise it forwards the first reply to the sender; any
    further call, including one made after the handler returned, is
    ignored and logged at debug level.

    Examples
    --------
    >>> def handler(ctx: HandlerContext[int], state: int, msg: str) -> int:
    ...     if ctx.respond_with is not None:
    ...         ctx.respond_with(state)
    ...     return state
    """

    def __init__(
        self,
        address: ActorAddress,
        node: Node,
        reply_to: ReplyCallback | None,
        logger: logging.Logger,
    ) -> None:
        self._address = address
        self._node = node
        self._reply_to = reply_to
        self._logger = logger
        self._closed = False
        self._respond_with: Callable[[R], None] | None = (
            self._respond_once if reply_to is not None else None
        )

    @property
    def self(self) -> ActorAddress:
        return self._address

    @property
    def respond_with(self) -> Callable[[R], None] | None:
        return self._respond_with

    @property
    def can_respond(self) -> bool:
        return self._reply_to is not None

    @property
    def log(self) -> logging.Logger:
        return self._logger

    def send(
        self,
        to: ActorAddress,
        message: Any,
        reply_to: ReplyCallback | None = None,
    ) -> None:
        """Send *message* to *to* through the owning node.

        The message is queued; it is never handled synchronously, even when
        *to* is this actor.
        """
        self._node.send(to, message, reply_to)

    def close(self) -> None:
        """Disable the reply capability once the handler call has completed."""
        self._closed = True
        self._reply_to = None

    def _respond_once(self, reply: R) -> None:
        callback = self._reply_to
        if callback is None:
            reason = "after the handler returned" if self._closed else "more than once"
            self._logger.debug("Ignoring reply from %s sent %s", self._address, reason)
            return
        self._reply_to = None
        callback(reply)
