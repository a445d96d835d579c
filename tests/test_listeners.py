from __future__ import annotations

from typing import Any

import pytest

from troupe.address import ActorAddress
from troupe.listeners import ListenerBus, NodeListeners
from troupe.registry import Status

ADDR = ActorAddress("Actor/1")


def test_missing_hooks_are_no_ops() -> None:
    bus = ListenerBus((NodeListeners(),))
    bus.actor_spawned(ADDR)
    bus.actor_state_changed(ADDR, 1, 0)
    bus.actor_status_changed(ADDR, Status.waiting)
    bus.message_sent("m", ADDR)
    bus.handler_failed(ADDR, "m", RuntimeError())
    bus.dead_letter("m", ADDR)
    bus.actor_stopped(ADDR)


def test_empty_bus() -> None:
    bus = ListenerBus()
    assert len(bus) == 0
    bus.actor_spawned(ADDR)


def test_fans_out_in_registration_order() -> None:
    calls: list[tuple[str, Any]] = []
    first = NodeListeners(on_actor_spawned=lambda a: calls.append(("first", a)))
    second = NodeListeners(on_actor_spawned=lambda a: calls.append(("second", a)))
    bus = ListenerBus((first, second))

    bus.actor_spawned(ADDR)

    assert calls == [("first", ADDR), ("second", ADDR)]


def test_hook_arguments() -> None:
    calls: list[tuple[Any, ...]] = []
    bus = ListenerBus(
        (
            NodeListeners(
                on_actor_state_changed=lambda *a: calls.append(("state", *a)),
                on_actor_status_changed=lambda *a: calls.append(("status", *a)),
                on_message_sent=lambda *a: calls.append(("sent", *a)),
            ),
        )
    )

    bus.actor_state_changed(ADDR, "new", "old")
    bus.actor_status_changed(ADDR, Status.processing)
    bus.message_sent({"type": "deposit"}, ADDR)

    assert calls == [
        ("state", ADDR, "new", "old"),
        ("status", ADDR, Status.processing),
        ("sent", {"type": "deposit"}, ADDR),
    ]


def test_add_and_remove() -> None:
    calls: list[ActorAddress] = []
    listeners = NodeListeners(on_actor_stopped=calls.append)
    bus = ListenerBus()

    bus.add(listeners)
    bus.actor_stopped(ADDR)
    bus.remove(listeners)
    bus.actor_stopped(ADDR)

    assert calls == [ADDR]
    assert len(bus) == 0


def test_listener_errors_propagate() -> None:
    def explode(address: ActorAddress) -> None:
        raise RuntimeError("listener bug")

    bus = ListenerBus((NodeListeners(on_actor_spawned=explode),))
    with pytest.raises(RuntimeError, match="listener bug"):
        bus.actor_spawned(ADDR)
