"""Accounts: the basics of troupe.

Demonstrates:
- Closed message protocols as dataclasses with exhaustive ``match``
- Handlers returning the next state (the same object means "unchanged")
- Fire-and-forget ``send`` and replies through ``respond_with``
- Lifecycle logging through ``logging_listeners``

Run with:
    uv run python examples/01_accounts.py
"""

import asyncio
import logging
from dataclasses import dataclass, replace

from troupe import HandlerContext, LoggingConfig, Node, configure_logging, logging_listeners


@dataclass(frozen=True)
class Deposit:
    amount: float


@dataclass(frozen=True)
class Withdrawal:
    amount: float


@dataclass(frozen=True)
class GetBalance:
    pass


type AccountMsg = Deposit | Withdrawal | GetBalance


@dataclass(frozen=True)
class AccountState:
    balance: float


def account(ctx: HandlerContext[float], state: AccountState, msg: AccountMsg) -> AccountState:
    match msg:
        case Deposit(amount=amount) if amount > 0:
            return replace(state, balance=state.balance + amount)
        case Withdrawal(amount=amount) if amount > 0:
            return replace(state, balance=state.balance - amount)
        case GetBalance():
            if ctx.respond_with is not None:
                ctx.respond_with(state.balance)

    return state


async def main() -> None:
    configure_logging(LoggingConfig(level="DEBUG", format="compact"))
    listeners = logging_listeners(logging.getLogger("troupe.example"))

    async with Node("bank", listeners=[listeners]) as node:
        chequing = node.spawn(account, AccountState(balance=8234.32))
        chequing.send(Withdrawal(amount=50.4))

        savings = node.spawn(account, AccountState(balance=1000))
        savings.send(Deposit(amount=102))
        savings.send(Withdrawal(amount=12.74))
        savings.send(GetBalance(), lambda balance: print(f"Savings account balance: {balance:.2f}"))

        await node.run_until_idle()


if __name__ == "__main__":
    asyncio.run(main())
