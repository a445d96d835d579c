"""Actor addresses and the id generators that produce them.

An address is an opaque string made of the fixed ``Actor/`` prefix followed
by a generator-produced identifier, e.g. ``Actor/8d7c...``. Consumers should
treat addresses as opaque values; only the prefix is checked when routing.
"""

from __future__ import annotations

import itertools
import uuid
from collections.abc import Callable
from typing import NewType

from troupe.exceptions import ConfigError

__all__ = [
    "ADDRESS_PREFIX",
    "ActorAddress",
    "IdGenerator",
    "is_address",
    "make_address",
    "named_generator",
    "sequential_generator",
    "uuid_generator",
]


ADDRESS_PREFIX = "Actor/"

ActorAddress = NewType("ActorAddress", str)

type IdGenerator = Callable[[], str]


def uuid_generator() -> str:
    """Return a random UUID4 string.

    This is the default id generator. ``uuid4`` draws from ``os.urandom``,
    so identifiers are unguessable and collision-resistant.

    Examples
    --------
    >>> len(uuid_generator())
    36
    """
    return str(uuid.uuid4())


def sequential_generator(start: int = 1) -> IdGenerator:
    """Build a deterministic generator yielding ``"1"``, ``"2"``, ...

    Intended for tests and reproducible logs. Each call returns an
    independent counter.

    Parameters
    ----------
    start : int
        First identifier produced.

    Examples
    --------
    >>> gen = sequential_generator()
    >>> gen(), gen()
    ('1', '2')
    """
    counter = itertools.count(start)

    def generate() -> str:
        return str(next(counter))

    return generate


def make_address(actor_id: str) -> ActorAddress:
    """Prefix *actor_id* to form an actor address.

    Examples
    --------
    >>> make_address("42")
    'Actor/42'
    """
    return ActorAddress(f"{ADDRESS_PREFIX}{actor_id}")


def is_address(value: object) -> bool:
    """Return ``True`` if *value* looks like an actor address.

    Only the prefix is inspected; the identifier part is opaque.

    Examples
    --------
    >>> is_address("Actor/42")
    True
    >>> is_address("42")
    False
    """
    return (
        isinstance(value, str)
        and value.startswith(ADDRESS_PREFIX)
        and len(value) > len(ADDRESS_PREFIX)
    )


def named_generator(kind: str) -> IdGenerator:
    """Return the id generator configured as *kind*.

    Raises
    ------
    ConfigError
        If *kind* is neither ``"uuid4"`` nor ``"sequential"``.
    """
    match kind:
        case "uuid4":
            return uuid_generator
        case "sequential":
            return sequential_generator()
        case _:
            msg = f"Unknown id generator: {kind!r}"
            raise ConfigError(msg)
