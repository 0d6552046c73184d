"""Order state machine.

Transitions are looked up in ``TRANSITIONS``; ``evaluate`` returns a
``Transition`` describing the outcome instead of raising, so callers decide
how to report a rejected change.
"""

from __future__ import annotations

from dataclasses import dataclass

from modules.orders.constants import (
    STOCK_REVERSING_TRANSITIONS,
    TERMINAL_STATES,
    TRANSITIONS,
    OrderStatus,
)


@dataclass(frozen=True)
class Transition:
    source: str
    target: str
    allowed: bool
    is_noop: bool
    reverses_stock: bool


def can_transition(source: str, target: str) -> bool:
    return TRANSITIONS.get((source, target), False)


def evaluate(source: str, target: str, allow_noop: bool = True) -> Transition:
    """Classify the change from *source* to *target*.

    Unknown statuses are never allowed, not even as a no-op.  With
    ``allow_noop=False`` a change to the current status is rejected too.
    """
    allowed = can_transition(source, target)
    if source == target and not allow_noop:
        allowed = False
    return Transition(
        source=source,
        target=target,
        allowed=allowed,
        is_noop=allowed and source == target,
        reverses_stock=allowed and (source, target) in STOCK_REVERSING_TRANSITIONS,
    )


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATES


def initial_status() -> str:
    return OrderStatus.PENDING
