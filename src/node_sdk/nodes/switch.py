"""Switch node - route by strict equality of a key against declared cases."""

from __future__ import annotations

from typing import Any, Dict, MutableMapping

from ..basenode import BaseNode, NodeCategory, NodeExecutionResult, NodeOperationError
from ..expressions import ExpressionError, evaluate_expression, strict_equals


class SwitchNode(BaseNode):
    """
    Evaluate keyExpr and follow the first case whose value matches.

    Matching is type-sensitive (1 never matches "1"). Cases are tried in
    declared order; defaultNext is used when none matches.
    """

    kind = "switch"

    description = {
        "title": "Switch",
        "description": "Route to different paths based on value",
        "category": NodeCategory.CORE.value,
        "type": "flow",
    }

    @classmethod
    def default_config(cls) -> Dict[str, Any]:
        return {"keyExpr": "", "cases": [], "defaultNext": ""}

    def execute(
        self,
        config: Dict[str, Any],
        ctx: MutableMapping[str, Any],
    ) -> NodeExecutionResult:
        key_expr = self.require(config, "keyExpr", "Switch key expression is required")

        try:
            key_value = evaluate_expression(key_expr, ctx)
        except ExpressionError as e:
            raise NodeOperationError(f"Switch key expression evaluation failed: {e}", node=self) from e

        self.logger.info(f"Switch evaluating {key_expr!r} = {key_value!r}")

        for case in config.get("cases") or []:
            if strict_equals(case.get("value"), key_value):
                next_node_id = case.get("next") or None
                self.logger.info(f"Switch matched case {case.get('value')!r} -> {next_node_id}")
                return NodeExecutionResult.ok(
                    key_value,
                    next_node_id=next_node_id,
                    should_stop=next_node_id is None,
                )

        default_next = config.get("defaultNext") or None
        self.logger.info(f"Switch no match, using default: {default_next}")
        return NodeExecutionResult.ok(
            key_value,
            next_node_id=default_next,
            should_stop=default_next is None,
        )
