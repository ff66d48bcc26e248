"""Filter node - route to nextTrue or nextFalse by a boolean expression."""

from __future__ import annotations

from typing import Any, Dict, MutableMapping

from ..basenode import BaseNode, NodeCategory, NodeExecutionResult, NodeOperationError
from ..expressions import ExpressionError, evaluate_expression


class FilterNode(BaseNode):
    """Evaluate an expression and pick the matching branch."""

    kind = "filter"

    description = {
        "title": "Filter",
        "description": "Route workflow based on conditions",
        "category": NodeCategory.CORE.value,
        "type": "flow",
    }

    @classmethod
    def default_config(cls) -> Dict[str, Any]:
        return {"expression": "", "nextTrue": "", "nextFalse": ""}

    def execute(
        self,
        config: Dict[str, Any],
        ctx: MutableMapping[str, Any],
    ) -> NodeExecutionResult:
        expression = self.require(config, "expression", "Filter expression is required")

        try:
            result = evaluate_expression(expression, ctx)
        except ExpressionError as e:
            raise NodeOperationError(f"Filter expression evaluation failed: {e}", node=self) from e

        self.logger.info(f"Filter expression {expression!r} evaluated to: {result!r}")

        next_node_id = config.get("nextTrue") if result else config.get("nextFalse")
        next_node_id = next_node_id or None

        return NodeExecutionResult.ok(
            result,
            next_node_id=next_node_id,
            should_stop=next_node_id is None,
        )
