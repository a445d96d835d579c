"""troupe - a minimal in-process actor runtime for asyncio.

Actors are a handler function plus a state. They communicate only through
asynchronous messages delivered to per-actor FIFO mailboxes, handle one
message at a time, and can answer a message through an optional reply
callback.

Basic usage:
    import asyncio
    from dataclasses import dataclass, replace

    from troupe import HandlerContext, Node

    @dataclass(frozen=True)
    class Deposit:
        amount: float

    @dataclass(frozen=True)
    class GetBalance:
        pass

    @dataclass(frozen=True)
    class Account:
        balance: float

    def account(ctx: HandlerContext[float], state: Account, msg: Deposit | GetBalance) -> Account:
        match msg:
            case Deposit(amount=amount):
                return replace(state, balance=state.balance + amount)
            case GetBalance():
                if ctx.respond_with is not None:
                    ctx.respond_with(state.balance)
                return state

    async def main():
        async with Node("bank") as node:
            savings = node.spawn(account, Account(balance=1000))
            savings.send(Deposit(102))
            savings.send(GetBalance(), print)
            await node.run_until_idle()

    asyncio.run(main())
"""

from troupe.address import (
    ADDRESS_PREFIX,
    ActorAddress,
    IdGenerator,
    is_address,
    make_address,
    named_generator,
    sequential_generator,
    uuid_generator,
)
from troupe.config import (
    LoggingConfig,
    NodeConfig,
    TroupeConfig,
    discover_config,
    load_config,
)
from troupe.context import Handler, HandlerContext
from troupe.exceptions import AddressCollisionError, ConfigError, TroupeError
from troupe.handle import ActorHandle
from troupe.listeners import ListenerBus, NodeListeners
from troupe.logger import configure_logging, logging_listeners
from troupe.mailbox import Mailbox
from troupe.node import Node
from troupe.registry import ActorRecord, ActorRegistry, Status
from troupe.reply import Envelope, ReplyCorrelator
from troupe.scheduler import Scheduler

__all__ = [
    # Node
    "Node",
    "ActorHandle",
    "Handler",
    "HandlerContext",
    "Status",
    # Addresses
    "ADDRESS_PREFIX",
    "ActorAddress",
    "IdGenerator",
    "is_address",
    "make_address",
    "named_generator",
    "sequential_generator",
    "uuid_generator",
    # Listeners and logging
    "ListenerBus",
    "NodeListeners",
    "configure_logging",
    "logging_listeners",
    # Engine internals
    "ActorRecord",
    "ActorRegistry",
    "Envelope",
    "Mailbox",
    "ReplyCorrelator",
    "Scheduler",
    # Configuration
    "LoggingConfig",
    "NodeConfig",
    "TroupeConfig",
    "discover_config",
    "load_config",
    # Errors
    "AddressCollisionError",
    "ConfigError",
    "TroupeError",
]
