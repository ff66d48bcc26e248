"""
Merge node.

Records the join strategy and expected sources. Waiting for the listed
branches and merging their contexts belongs to the runner; see
workflow_runtime.context.ExecutionContext.merge for the combine step.
"""

from __future__ import annotations

from typing import Any, Dict, MutableMapping

from ..basenode import BaseNode, NodeCategory, NodeExecutionResult, NodeOperationError


STRATEGIES = ("pass-through", "combine")


class MergeNode(BaseNode):
    """Combine multiple workflow branches."""

    kind = "merge"

    description = {
        "title": "Merge",
        "description": "Combine multiple workflow branches",
        "category": NodeCategory.CORE.value,
        "type": "flow",
    }

    @classmethod
    def default_config(cls) -> Dict[str, Any]:
        return {"strategy": "pass-through", "sources": []}

    def execute(
        self,
        config: Dict[str, Any],
        ctx: MutableMapping[str, Any],
    ) -> NodeExecutionResult:
        strategy = config.get("strategy") or "pass-through"
        sources = list(config.get("sources") or [])

        if not sources:
            raise NodeOperationError("Merge node requires at least one source", node=self)

        if strategy not in STRATEGIES:
            raise NodeOperationError(f"Unknown merge strategy: {strategy}", node=self)

        self.logger.info(f"Merge node with strategy {strategy!r} for sources: {sources}")

        data: Dict[str, Any] = {"strategy": strategy, "sources": sources}
        if strategy == "combine":
            data["merged"] = True
        return NodeExecutionResult.ok(data)
