from __future__ import annotations

import pytest

from troupe.address import ActorAddress
from troupe.exceptions import AddressCollisionError
from troupe.registry import ActorRegistry, Status


def handler(ctx: object, state: int, msg: object) -> int:
    return state


def test_register_creates_idle_record_with_empty_mailbox() -> None:
    registry = ActorRegistry()
    address = ActorAddress("Actor/1")
    record = registry.register(address, 7, handler)

    assert registry.lookup(address) is record
    assert record.state == 7
    assert record.status is Status.idle
    assert record.mailbox.empty()
    assert record.handler is handler
    assert address in registry
    assert len(registry) == 1


def test_register_twice_raises() -> None:
    registry = ActorRegistry()
    address = ActorAddress("Actor/1")
    registry.register(address, 0, handler)

    with pytest.raises(AddressCollisionError) as exc_info:
        registry.register(address, 1, handler)
    assert exc_info.value.address == address
    assert registry.lookup(address).state == 0  # type: ignore[union-attr]


def test_lookup_unknown_returns_none() -> None:
    assert ActorRegistry().lookup(ActorAddress("Actor/missing")) is None


def test_mutations() -> None:
    registry = ActorRegistry()
    address = ActorAddress("Actor/1")
    record = registry.register(address, 0, handler)

    registry.mutate_state(address, 5)
    registry.set_status(address, Status.waiting)

    assert record.state == 5
    assert record.status is Status.waiting


def test_remove_and_addresses() -> None:
    registry = ActorRegistry()
    a, b = ActorAddress("Actor/a"), ActorAddress("Actor/b")
    registry.register(a, 0, handler)
    registry.register(b, 0, handler)

    assert registry.addresses() == (a, b)
    assert registry.remove(a) is not None
    assert registry.remove(a) is None
    assert registry.addresses() == (b,)
