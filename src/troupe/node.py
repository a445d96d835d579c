"""Node: the runtime instance owning actors, their mailboxes and the scheduler.

There is no process-wide default node. Create one explicitly and pass it
(or the handles it returns) to whoever needs to send messages.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any

from troupe.address import ActorAddress, IdGenerator, make_address, named_generator
from troupe.config import TroupeConfig
from troupe.context import Handler
from troupe.handle import ActorHandle
from troupe.listeners import ListenerBus, NodeListeners
from troupe.logger import logging_listeners
from troupe.registry import ActorRegistry, Status
from troupe.reply import Envelope, ReplyCorrelator
from troupe.scheduler import Scheduler


class Node:
    """An actor node.

    Actors are spawned with a handler ``(ctx, state, message) -> state``
    (plain or ``async``) and an initial state. Messages are delivered
    through per-actor FIFO mailboxes; each actor handles one message at a
    time, in send order, in its own scheduled tick.

    ``send`` and ``spawn`` never raise for runtime conditions: messages for
    unknown addresses are dropped and reported as dead letters, handler
    failures are logged and reported through ``on_handler_failed``.

    Use as an async context manager for automatic shutdown.

    Parameters
    ----------
    name : str | None
        Node name, used in logger names. Defaults to ``config.node.name``.
    generate_id : IdGenerator | None
        Actor id generator. Defaults to the one named in the config
        (random UUID4 unless configured otherwise).
    listeners : Iterable[NodeListeners]
        Listener sets notified of lifecycle events.
    config : TroupeConfig | None
        Node and logging settings.

    Examples
    --------
    >>> async with Node("bank") as node:
    ...     account = node.spawn(account_handler, AccountState(balance=100))
    ...     account.send(Deposit(amount=50))
    ...     await node.run_until_idle()
    ...     node.state_of(account.address)
    AccountState(balance=150)
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        generate_id: IdGenerator | None = None,
        listeners: Iterable[NodeListeners] = (),
        config: TroupeConfig | None = None,
    ) -> None:
        self._config = config or TroupeConfig()
        self._name = name or self._config.node.name
        self._generate_id: Callable[[], str] = generate_id or named_generator(
            self._config.node.id_generator
        )
        self._logger = logging.getLogger(f"troupe.node.{self._name}")
        self._registry = ActorRegistry()
        self._replies = ReplyCorrelator()
        self._bus = ListenerBus(tuple(listeners))
        if self._config.logging.lifecycle_events:
            self._bus.add(logging_listeners(self._logger))
        self._scheduler = Scheduler(
            self, self._registry, self._replies, self._bus, self._logger
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> TroupeConfig:
        return self._config

    @property
    def pending(self) -> int:
        """Number of actor ticks that are queued or running."""
        return self._scheduler.pending

    async def __aenter__(self) -> Node:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.shutdown()

    def spawn[M, R, S](self, handler: Handler[M, R, S], initial_state: S) -> ActorHandle[M, R]:
        """Register a new idle actor and return a handle to it.

        Raises
        ------
        AddressCollisionError
            If the id generator produced an identifier already in use.
        """
        address = make_address(self._generate_id())
        self._registry.register(address, initial_state, handler)
        self._logger.debug("Spawned actor %s", address)
        self._bus.actor_spawned(address)
        return ActorHandle(address, self)

    def send(
        self,
        to: ActorAddress,
        message: Any,
        reply_to: Callable[[Any], None] | None = None,
    ) -> None:
        """Queue *message* for the actor at *to* (fire-and-forget).

        If *reply_to* is given, the receiving handler gets a ``respond_with``
        capability that invokes it at most once. Delivery is best-effort: an
        unknown address drops the message with a warning and a dead-letter
        notification.
        """
        record = self._registry.lookup(to)
        if record is None:
            self._logger.warning("No actor for address %s!", to)
            self._bus.dead_letter(message, to)
            return

        envelope = Envelope(message)
        record.mailbox.put(envelope)
        if reply_to is not None:
            self._replies.register(envelope, reply_to)
        self._bus.message_sent(message, to)
        self._scheduler.enqueue(to)

    def stop(self, address: ActorAddress) -> bool:
        """Remove the actor at *address* from the node.

        Pending messages are discarded and reported as dead letters. A
        message already being handled runs to completion, but its resulting
        state is not written back. Returns ``False`` if the address is
        unknown.
        """
        return self._stop(address, notify_dead_letters=True)

    def _stop(self, address: ActorAddress, *, notify_dead_letters: bool) -> bool:
        record = self._registry.remove(address)
        if record is None:
            self._logger.warning("No actor for address %s!", address)
            return False

        for envelope in record.mailbox.drain():
            self._replies.take_and_clear(envelope)
            if notify_dead_letters:
                self._bus.dead_letter(envelope.message, address)
        self._logger.debug("Stopped actor %s", address)
        self._bus.actor_stopped(address)
        return True

    def state_of(self, address: ActorAddress) -> Any | None:
        record = self._registry.lookup(address)
        return None if record is None else record.state

    def status_of(self, address: ActorAddress) -> Status | None:
        record = self._registry.lookup(address)
        return None if record is None else record.status

    def addresses(self) -> tuple[ActorAddress, ...]:
        return self._registry.addresses()

    def add_listeners(self, listeners: NodeListeners) -> None:
        self._bus.add(listeners)

    def remove_listeners(self, listeners: NodeListeners) -> None:
        self._bus.remove(listeners)

    async def run_until_idle(self, timeout: float | None = None) -> bool:
        """Drive the scheduler until every mailbox is drained.

        Returns ``False`` if *timeout* seconds elapsed first, which happens
        when a handler never completes.
        """
        return await self._scheduler.run_until_idle(timeout)

    async def shutdown(self) -> None:
        """Cancel in-flight ticks and stop every actor."""
        self._logger.info("Shutting down (%d actors)", len(self._registry))
        cancelled = self._scheduler.cancel_all()
        if cancelled:
            await asyncio.gather(*cancelled, return_exceptions=True)
        notify = not self._config.node.suppress_dead_letters_on_shutdown
        for address in self._registry.addresses():
            self._stop(address, notify_dead_letters=notify)

    def __contains__(self, address: object) -> bool:
        return address in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    def __repr__(self) -> str:
        return f"Node(name={self._name!r}, actors={len(self._registry)})"
