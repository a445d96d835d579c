"""Shared fixtures and test actors for troupe tests."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

import pytest

from troupe import HandlerContext, Node, NodeListeners, sequential_generator


# Account protocol


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


def account_handler(
    ctx: HandlerContext[float], state: AccountState, msg: AccountMsg
) -> AccountState:
    """Non-positive amounts are ignored; balances are never clamped."""
    match msg:
        case Deposit(amount=amount):
            if amount <= 0:
                return state
            return replace(state, balance=state.balance + amount)
        case Withdrawal(amount=amount):
            if amount <= 0:
                return state
            return replace(state, balance=state.balance - amount)
        case GetBalance():
            if ctx.respond_with is not None:
                ctx.respond_with(state.balance)
            return state


class Recorder:
    """Collects every lifecycle notification as a tuple."""

    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []
        self.listeners = NodeListeners(
            on_actor_spawned=lambda a: self.events.append(("spawned", a)),
            on_actor_state_changed=lambda a, cur, prev: self.events.append(
                ("state", a, cur, prev)
            ),
            on_actor_status_changed=lambda a, s: self.events.append(("status", a, s)),
            on_message_sent=lambda m, a: self.events.append(("sent", m, a)),
            on_handler_failed=lambda a, m, e: self.events.append(("failed", a, m, e)),
            on_dead_letter=lambda m, a: self.events.append(("dead", m, a)),
            on_actor_stopped=lambda a: self.events.append(("stopped", a)),
        )

    def of(self, kind: str) -> list[tuple[Any, ...]]:
        return [e for e in self.events if e[0] == kind]

    def statuses(self, address: str) -> list[Any]:
        return [e[2] for e in self.events if e[0] == "status" and e[1] == address]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def node(recorder: Recorder) -> Node:
    return Node("test", generate_id=sequential_generator(), listeners=[recorder.listeners])
