"""Actor registry: the authoritative map from address to actor record."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

from troupe.exceptions import AddressCollisionError
from troupe.mailbox import Mailbox

if TYPE_CHECKING:
    from troupe.address import ActorAddress
    from troupe.context import Handler
    from troupe.reply import Envelope


class Status(Enum):
    """Scheduling phase of an actor.

    ``idle`` means no pending messages and no tick scheduled, ``waiting``
    means a tick is scheduled but has not run yet, and ``processing`` means
    a tick is running the handler for exactly one message.

    Examples
    --------
    >>> Status.idle.value
    'idle'
    """

    idle = "idle"
    waiting = "waiting"
    processing = "processing"


@dataclass
class ActorRecord:
    handler: Handler[Any, Any, Any]
    state: Any
    mailbox: Mailbox[Envelope[Any]] = field(default_factory=Mailbox)
    status: Status = Status.idle


class ActorRegistry:
    """Owns every actor record of a node.

    ``mutate_state`` and ``set_status`` are the only mutation entry points
    and are called by the scheduler alone, during the actor's own turn.
    """

    def __init__(self) -> None:
        self._records: dict[ActorAddress, ActorRecord] = {}

    def register(
        self,
        address: ActorAddress,
        initial_state: Any,
        handler: Handler[Any, Any, Any],
    ) -> ActorRecord:
        if address in self._records:
            raise AddressCollisionError(address)
        record = ActorRecord(handler=handler, state=initial_state)
        self._records[address] = record
        return record

    def lookup(self, address: ActorAddress) -> ActorRecord | None:
        return self._records.get(address)

    def remove(self, address: ActorAddress) -> ActorRecord | None:
        return self._records.pop(address, None)

    def mutate_state(self, address: ActorAddress, new_state: Any) -> None:
        self._records[address].state = new_state

    def set_status(self, address: ActorAddress, status: Status) -> None:
        self._records[address].status = status

    def addresses(self) -> tuple[ActorAddress, ...]:
        return tuple(self._records)

    def __contains__(self, address: object) -> bool:
        return address in self._records

    def __len__(self) -> int:
        return len(self._records)
