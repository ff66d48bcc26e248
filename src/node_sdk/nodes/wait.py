"""
Wait node.

Two modes:

- delay: sleep for delaySeconds, then continue.
- until: re-check untilExpr every checkEverySeconds until it holds,
  failing once the wait ceiling (24 hours by default) is reached.

The sleep function and clock are injectable so callers (and tests) can
drive the wait without real time passing.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, MutableMapping, Optional

from workflow_service.config import get_settings

from ..basenode import BaseNode, NodeCategory, NodeExecutionResult, NodeOperationError, WaitTimeoutError
from ..waiting import UntilWait, WaitState


def _positive_seconds(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    return seconds if seconds > 0 else None


def _format_hours(seconds: float) -> str:
    hours = seconds / 3600
    return f"{hours:g} hours" if hours != 1 else "1 hour"


class WaitNode(BaseNode):
    """Pause execution for a delay or until a condition holds."""

    kind = "wait"

    description = {
        "title": "Wait",
        "description": "Pause execution for a specified time or until a condition",
        "category": NodeCategory.CORE.value,
        "type": "flow",
    }

    def __init__(
        self,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        super().__init__()
        self.sleep = sleep or time.sleep
        self.clock = clock or time.monotonic

    @classmethod
    def default_config(cls) -> Dict[str, Any]:
        return {"mode": "delay", "delaySeconds": get_settings().wait_default_delay_seconds}

    def execute(
        self,
        config: Dict[str, Any],
        ctx: MutableMapping[str, Any],
    ) -> NodeExecutionResult:
        mode = config.get("mode")

        if mode == "delay":
            return self._delay(config)
        if mode == "until":
            return self._until(config, ctx)

        raise NodeOperationError(f"Unknown wait mode: {mode}", node=self)

    def _delay(self, config: Dict[str, Any]) -> NodeExecutionResult:
        raw = config.get("delaySeconds")
        if raw is None:
            raw = get_settings().wait_default_delay_seconds

        seconds = _positive_seconds(raw)
        if seconds is None:
            raise NodeOperationError("Delay seconds must be greater than 0", node=self)

        self.logger.info(f"Waiting for {seconds:g} seconds")
        self.sleep(seconds)

        waited = int(seconds) if seconds.is_integer() else seconds
        return NodeExecutionResult.ok({"waited": waited})

    def _until(self, config: Dict[str, Any], ctx: MutableMapping[str, Any]) -> NodeExecutionResult:
        expression = self.require(config, "untilExpr", "Until expression is required for until mode")

        settings = get_settings()
        check_every = _positive_seconds(config.get("checkEverySeconds"))
        if check_every is None:
            check_every = float(settings.wait_default_check_every_seconds)

        waiter = UntilWait(
            expression=expression,
            check_every_seconds=check_every,
            max_wait_seconds=settings.wait_max_seconds,
        )
        self.logger.info(f"Waiting until: {expression} (checking every {check_every:g}s)")

        while True:
            now = self.clock()
            state = waiter.tick(ctx, now)

            if state == WaitState.READY:
                waited = round(waiter.elapsed(now))
                self.logger.info(f"Wait condition met after {waited} seconds")
                return NodeExecutionResult.ok({"condition": True, "waitedSeconds": waited})

            if state == WaitState.TIMED_OUT:
                raise WaitTimeoutError(
                    f"Wait until timeout after {_format_hours(waiter.max_wait_seconds)}",
                    waited_seconds=waiter.elapsed(now),
                )

            self.sleep(check_every)
