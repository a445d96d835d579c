"""Lifecycle listeners and the bus that fans notifications out to them.

Listeners are trusted collaborators (logging, metrics, tests). Every hook
is optional and is called synchronously, in program order, at the moment
the underlying fact becomes true. Exceptions raised by a hook are not
caught by the node.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from troupe.address import ActorAddress
    from troupe.registry import Status


@dataclass(frozen=True)
class NodeListeners:
    """A partial set of lifecycle hooks.

    Parameters
    ----------
    on_actor_spawned : Callable[[ActorAddress], None] | None
        Called after an actor has been registered.
    on_actor_state_changed : Callable[[ActorAddress, Any, Any], None] | None
        Called with ``(address, current, previous)`` when a handler returned
        a state that is not the same object as the previous one.
    on_actor_status_changed : Callable[[ActorAddress, Status], None] | None
        Called on every status transition.
    on_message_sent : Callable[[Any, ActorAddress], None] | None
        Called with ``(message, recipient)`` once a message is in a mailbox.
    on_handler_failed : Callable[[ActorAddress, Any, BaseException], None] | None
        Called when a handler raised while processing a message.
    on_dead_letter : Callable[[Any, ActorAddress], None] | None
        Called with ``(message, address)`` when a message was dropped because
        its recipient does not exist (or was stopped).
    on_actor_stopped : Callable[[ActorAddress], None] | None
        Called after an actor has been removed from the node.

    Examples
    --------
    >>> spawned: list[str] = []
    >>> listeners = NodeListeners(on_actor_spawned=spawned.append)
    """

    on_actor_spawned: Callable[[ActorAddress], None] | None = None
    on_actor_state_changed: Callable[[ActorAddress, Any, Any], None] | None = None
    on_actor_status_changed: Callable[[ActorAddress, Status], None] | None = None
    on_message_sent: Callable[[Any, ActorAddress], None] | None = None
    on_handler_failed: Callable[[ActorAddress, Any, BaseException], None] | None = None
    on_dead_letter: Callable[[Any, ActorAddress], None] | None = None
    on_actor_stopped: Callable[[ActorAddress], None] | None = None


class ListenerBus:
    """Best-effort fan-out of lifecycle notifications.

    Holds zero or more ``NodeListeners`` sets and forwards each
    notification to every set, in registration order. A missing hook is
    a no-op.
    """

    def __init__(self, listeners: tuple[NodeListeners, ...] = ()) -> None:
        self._listeners: tuple[NodeListeners, ...] = tuple(listeners)

    def add(self, listeners: NodeListeners) -> None:
        self._listeners = (*self._listeners, listeners)

    def remove(self, listeners: NodeListeners) -> None:
        self._listeners = tuple(ls for ls in self._listeners if ls is not listeners)

    def __len__(self) -> int:
        return len(self._listeners)

    def actor_spawned(self, address: ActorAddress) -> None:
        for ls in self._listeners:
            if ls.on_actor_spawned is not None:
                ls.on_actor_spawned(address)

    def actor_state_changed(
        self, address: ActorAddress, current: Any, previous: Any
    ) -> None:
        for ls in self._listeners:
            if ls.on_actor_state_changed is not None:
                ls.on_actor_state_changed(address, current, previous)

    def actor_status_changed(self, address: ActorAddress, status: Status) -> None:
        for ls in self._listeners:
            if ls.on_actor_status_changed is not None:
                ls.on_actor_status_changed(address, status)

    def message_sent(self, message: Any, address: ActorAddress) -> None:
        for ls in self._listeners:
            if ls.on_message_sent is not None:
                ls.on_message_sent(message, address)

    def handler_failed(
        self, address: ActorAddress, message: Any, exception: BaseException
    ) -> None:
        for ls in self._listeners:
            if ls.on_handler_failed is not None:
                ls.on_handler_failed(address, message, exception)

    def dead_letter(self, message: Any, address: ActorAddress) -> None:
        for ls in self._listeners:
            if ls.on_dead_letter is not None:
                ls.on_dead_letter(message, address)

    def actor_stopped(self, address: ActorAddress) -> None:
        for ls in self._listeners:
            if ls.on_actor_stopped is not None:
                ls.on_actor_stopped(address)
