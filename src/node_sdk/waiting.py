"""
Until-wait state machine.

An until-mode wait is modelled as an explicit state machine:

    waiting --(expression true)--> ready
    waiting --(ceiling reached)--> timed_out

Each tick() evaluates the expression once. The wait node drives ticks
in-process with a sleep between them; an external scheduler can instead
persist the UntilWait and tick it on its own timer so no worker blocks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .basenode import NodeOperationError
from .expressions import ExpressionError, evaluate_expression


DEFAULT_MAX_WAIT_SECONDS = 24 * 60 * 60


class WaitState(str, Enum):
    """State of an until-mode wait."""
    WAITING = "waiting"
    READY = "ready"
    TIMED_OUT = "timed_out"


@dataclass
class UntilWait:
    """Polls a boolean expression until it holds or the ceiling passes."""
    expression: str
    check_every_seconds: float = 30
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS
    started_at: Optional[float] = None
    last_checked_at: Optional[float] = None
    checks: int = 0
    state: WaitState = WaitState.WAITING

    @property
    def is_done(self) -> bool:
        return self.state != WaitState.WAITING

    def elapsed(self, now: float) -> float:
        if self.started_at is None:
            return 0.0
        return now - self.started_at

    def next_check_at(self) -> Optional[float]:
        """When the next tick is due, or None once finished."""
        if self.is_done:
            return None
        if self.last_checked_at is None:
            return self.started_at
        return self.last_checked_at + self.check_every_seconds

    def tick(self, ctx: Any, now: float) -> WaitState:
        """
        Advance the wait by one check.

        Raises:
            NodeOperationError: If the expression cannot be evaluated
        """
        if self.is_done:
            return self.state

        if self.started_at is None:
            self.started_at = now

        if self.elapsed(now) >= self.max_wait_seconds:
            self.state = WaitState.TIMED_OUT
            return self.state

        try:
            result = evaluate_expression(self.expression, ctx)
        except ExpressionError as e:
            raise NodeOperationError(f"Wait until expression evaluation failed: {e}") from e

        self.checks += 1
        self.last_checked_at = now
        if result:
            self.state = WaitState.READY
        return self.state


__all__ = ["DEFAULT_MAX_WAIT_SECONDS", "UntilWait", "WaitState"]
