"""Custom code node - run a user-supplied function body against ctx."""

from __future__ import annotations

from typing import Any, Dict, MutableMapping

from workflow_service.config import get_settings

from ..basenode import BaseNode, CodeExecutionError, NodeCategory, NodeExecutionResult
from ..sandbox import run_code


class CodeNode(BaseNode):
    """
    Custom Code node.

    The code is the body of ``def (ctx)``; its return value is saved under
    saveAs (default "result"). Exceptions raised by the code fail the node.
    """

    kind = "js"

    description = {
        "title": "Custom Code",
        "description": "Execute custom code against the run context",
        "category": NodeCategory.CORE.value,
        "type": "action",
    }

    @classmethod
    def default_config(cls) -> Dict[str, Any]:
        return {
            "code": "# ctx holds the trigger payload and earlier results\nreturn ctx.get('trigger')",
            "saveAs": "result",
        }

    def execute(
        self,
        config: Dict[str, Any],
        ctx: MutableMapping[str, Any],
    ) -> NodeExecutionResult:
        code = self.require(config, "code", "Code is required")

        if not get_settings().code_node_enabled:
            raise CodeExecutionError("Code nodes are disabled", node=self)

        self.logger.info("Executing custom code")
        try:
            result = run_code(code, ctx)
        except CodeExecutionError as e:
            raise CodeExecutionError(f"Code execution failed: {e}", node=self) from e
        except Exception as e:
            raise CodeExecutionError(
                f"Code execution failed: {type(e).__name__}: {e}", node=self
            ) from e

        self.save_result(ctx, config, "result", result)
        return NodeExecutionResult.ok(result)
