"""Cooperative scheduler driving every actor's mailbox.

Each actor runs a small status machine::

    idle --send--> waiting --tick--> processing --+--> idle     (mailbox empty)
                      ^                           |
                      +---------------------------+             (mailbox non-empty)

A tick processes exactly one message. Ticks are never run inside the
caller's stack: ``enqueue`` only appends the address to a ready queue, and
a pump callback scheduled with ``loop.call_soon`` turns ready entries into
tasks. Every tick is its own ``asyncio.Task``, so a handler suspended on
slow I/O (or one that never completes) only holds up its own actor.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from typing import Any, TYPE_CHECKING

from troupe.context import HandlerContext
from troupe.registry import Status

if TYPE_CHECKING:
    from troupe.address import ActorAddress
    from troupe.listeners import ListenerBus
    from troupe.node import Node
    from troupe.registry import ActorRegistry
    from troupe.reply import ReplyCorrelator


class Scheduler:
    """Ready queue plus the per-message processing algorithm.

    When no event loop is running, scheduled ticks stay in the ready queue
    until ``run_until_idle`` is awaited. Pump callbacks and tick tasks belong
    to the loop that created them; when another loop starts driving the
    node, ticks that never started on the old loop are queued again.
    """

    def __init__(
        self,
        node: Node,
        registry: ActorRegistry,
        replies: ReplyCorrelator,
        bus: ListenerBus,
        logger: logging.Logger,
    ) -> None:
        self._node = node
        self._registry = registry
        self._replies = replies
        self._bus = bus
        self._logger = logger
        self._ready: deque[ActorAddress] = deque()
        self._in_flight: set[asyncio.Task[None]] = set()
        self._unstarted: dict[asyncio.Task[None], ActorAddress] = {}
        self._pump_handle: asyncio.Handle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def pending(self) -> int:
        """Number of ticks that are ready or running."""
        return len(self._ready) + sum(1 for t in self._in_flight if not t.done())

    def enqueue(self, address: ActorAddress) -> None:
        """Schedule a tick for *address* unless one is already pending.

        Only an idle actor is moved to waiting. A waiting or processing actor
        already has a tick that will see the new message, so nothing is
        scheduled twice.
        """
        self._request_pump()
        record = self._registry.lookup(address)
        if record is None:
            self._logger.warning("No actor for address %s!", address)
            return

        if record.status is not Status.idle:
            return

        self._transition(address, Status.waiting)
        self._schedule(address)

    async def run_until_idle(self, timeout: float | None = None) -> bool:
        """Wait until no tick is ready or running.

        Returns ``False`` if *timeout* elapsed first.
        """
        loop = asyncio.get_running_loop()
        self._bind(loop)
        deadline = None if timeout is None else loop.time() + timeout
        while True:
            if self._ready:
                if self._pump_handle is not None:
                    self._pump_handle.cancel()
                self._pump()

            running = {t for t in self._in_flight if not t.done()}
            if not running:
                return True

            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                return False
            await asyncio.wait(running, timeout=remaining)

    def cancel_all(self) -> list[asyncio.Task[None]]:
        """Drop ready ticks and cancel running ones.

        Returns the cancelled tasks so the caller can await them.
        """
        if self._pump_handle is not None:
            self._pump_handle.cancel()
            self._pump_handle = None
        self._ready.clear()
        self._unstarted.clear()
        cancelled = [t for t in self._in_flight if not t.done()]
        for task in cancelled:
            task.cancel()
        return cancelled

    def _transition(self, address: ActorAddress, status: Status) -> None:
        self._registry.set_status(address, status)
        self._bus.actor_status_changed(address, status)

    def _bind(self, loop: asyncio.AbstractEventLoop) -> None:
        if loop is self._loop:
            return
        if self._loop is not None:
            if self._pump_handle is not None:
                self._pump_handle.cancel()
                self._pump_handle = None
            stranded = list(self._unstarted.values())
            self._unstarted.clear()
            self._in_flight.clear()
            if stranded:
                self._logger.debug(
                    "Requeueing %d tick(s) left on a previous event loop", len(stranded)
                )
                self._ready.extendleft(reversed(stranded))
        self._loop = loop

    def _request_pump(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._bind(loop)
        if self._pump_handle is None and self._ready:
            self._pump_handle = loop.call_soon(self._pump)

    def _schedule(self, address: ActorAddress) -> None:
        self._ready.append(address)
        self._request_pump()

    def _pump(self) -> None:
        self._pump_handle = None
        loop = asyncio.get_running_loop()
        while self._ready:
            address = self._ready.popleft()
            task = loop.create_task(self._tick(address), name=f"troupe-tick:{address}")
            self._in_flight.add(task)
            self._unstarted[task] = address
            task.add_done_callback(self._forget)

    def _forget(self, task: asyncio.Task[None]) -> None:
        self._in_flight.discard(task)
        address = self._unstarted.pop(task, None)
        if address is not None:
            # Cancelled before its first step: the actor is still waiting.
            self._schedule(address)

    def _fail(self, address: ActorAddress, message: Any, exc: BaseException) -> None:
        self._logger.error(
            "Actor %s failed handling %r; message dropped",
            address,
            message,
            exc_info=exc,
        )
        self._bus.handler_failed(address, message, exc)

    async def _tick(self, address: ActorAddress) -> None:
        self._unstarted.pop(asyncio.current_task(), None)  # type: ignore[arg-type]
        record = self._registry.lookup(address)
        if record is None:
            self._logger.warning("No actor for address %s!", address)
            return

        if record.mailbox.empty():
            self._logger.debug("No messages for actor %s.", address)
            if record.status is not Status.idle:
                self._transition(address, Status.idle)
            return

        envelope = record.mailbox.pop()
        reply_to = self._replies.take_and_clear(envelope)
        self._transition(address, Status.processing)

        ctx: HandlerContext[Any] = HandlerContext(
            address,
            self._node,
            reply_to,
            logging.getLogger(f"troupe.actor.{address}"),
        )
        previous = record.state
        try:
            next_state = record.handler(ctx, previous, envelope.message)
            if inspect.isawaitable(next_state):
                next_state = await next_state
        except Exception as exc:
            self._fail(address, envelope.message, exc)
            next_state = previous
        except asyncio.CancelledError as exc:
            # Only a cancel aimed at this tick stops it; one raised by the
            # handler's own awaited work is a handler failure.
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            self._fail(address, envelope.message, exc)
            next_state = previous
        finally:
            ctx.close()

        if self._registry.lookup(address) is not record:
            self._logger.debug("Actor %s stopped while processing, result discarded", address)
            return

        if next_state is not previous:
            self._registry.mutate_state(address, next_state)
            self._bus.actor_state_changed(address, next_state, previous)

        if record.mailbox.empty():
            self._transition(address, Status.idle)
            return

        self._transition(address, Status.waiting)
        self._schedule(address)
