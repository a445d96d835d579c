"""Actor handles: an address bound to the node that owns it."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from troupe.address import ActorAddress
    from troupe.node import Node


@dataclass(frozen=True)
class ActorHandle[M, R]:
    """Convenience for messaging one actor without restating its address.

    Returned by ``Node.spawn``. Sending through a handle is exactly
    ``node.send(handle.address, message, reply_to)``.

    Parameters
    ----------
    address : ActorAddress
        Address of the actor this handle refers to.
    _node : Node
        Node owning the actor.

    Examples
    --------
    >>> account = node.spawn(account_handler, AccountState(balance=100))
    >>> account.send(Deposit(amount=50))
    >>> account.send(GetBalance(), print)
    """

    address: ActorAddress
    _node: Node

    def send(self, message: M, reply_to: Callable[[R], None] | None = None) -> None:
        """Send *message* to this actor (fire-and-forget).

        If *reply_to* is given, the handler is offered a ``respond_with``
        capability that forwards at most one reply to it.
        """
        self._node.send(self.address, message, reply_to)
