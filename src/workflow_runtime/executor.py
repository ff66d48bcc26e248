"""
Node Executor - Error boundary around single-node execution.

The executor interpolates a node's config against the run context,
dispatches to the node kind, and converts every exception into a failed
NodeExecutionResult. Walking the graph (choosing the next node, retries,
persistence) is the caller's job.

All execution is synchronous.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from node_sdk import NodeExecutionResult, NodeRegistry, get_default_registry
from template_engine import interpolate_config

from .models import ExecNode


logger = logging.getLogger(__name__)

NodeDescriptor = Union[ExecNode, Mapping]


@dataclass
class NodeCall:
    """A node descriptor normalized to id, kind and raw config."""
    node_id: Optional[str]
    kind: str
    config: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_descriptor(cls, node: NodeDescriptor) -> "NodeCall":
        """
        Accepts:
        - ExecNode
        - {"id", "kind", "cfg"} (serialized ExecNode)
        - {"id", "kind", "data": {"config"}} (editor descriptor)
        """
        if isinstance(node, ExecNode):
            return cls(node_id=node.id, kind=node.kind, config=node.cfg)

        if not isinstance(node, Mapping):
            raise TypeError(f"Unsupported node descriptor: {type(node).__name__}")

        data = node.get("data") or {}
        kind = node.get("kind") or data.get("actionKind") or ""
        if "cfg" in node:
            config = node.get("cfg")
        else:
            config = data.get("config")
        return cls(node_id=node.get("id"), kind=str(kind), config=dict(config or {}))


class NodeExecutor:
    """
    Executes one node at a time against a shared context.

    Usage:
        executor = NodeExecutor()
        ctx = ExecutionContext.from_trigger({"total": 150})
        result = executor.execute_node(workflow.nodes["f1"], ctx)
        if result.success:
            next_id = result.next_node_id
    """

    def __init__(self, registry: Optional[NodeRegistry] = None):
        """
        Initialize executor.

        Args:
            registry: Node registry (defaults to the built-in kinds)
        """
        self._registry = registry or get_default_registry()

    @property
    def registry(self) -> NodeRegistry:
        return self._registry

    def execute_node(
        self,
        node: NodeDescriptor,
        ctx: MutableMapping[str, Any],
    ) -> NodeExecutionResult:
        """
        Execute a node.

        Never raises: failures come back as NodeExecutionResult(success=False).
        """
        start_time = time.perf_counter()
        node_id: Optional[str] = None
        kind = ""

        try:
            call = NodeCall.from_descriptor(node)
            node_id, kind = call.node_id, call.kind

            instance = self._registry.create_node(kind)
            if instance is None:
                raise ValueError(f"Unknown node kind: {kind}")

            config = interpolate_config(call.config, ctx)

            logger.info(f"Executing node {node_id or '-'} ({kind})")
            result = instance.execute(config, ctx)

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                f"Node {node_id or '-'} ({kind}) completed in {duration_ms:.1f}ms",
                extra={"node_id": node_id, "node_kind": kind},
            )
            return result

        except Exception as e:
            logger.error(
                f"Node {node_id or '-'} ({kind or 'unknown'}) failed: {e}",
                extra={"node_id": node_id, "node_kind": kind},
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            return NodeExecutionResult.failed(str(e) or type(e).__name__)


_default_executor: Optional[NodeExecutor] = None


def execute_node(node: NodeDescriptor, ctx: MutableMapping[str, Any]) -> NodeExecutionResult:
    """Execute a node with the default executor."""
    global _default_executor
    if _default_executor is None:
        _default_executor = NodeExecutor()
    return _default_executor.execute_node(node, ctx)


__all__ = [
    "NodeCall",
    "NodeDescriptor",
    "NodeExecutor",
    "execute_node",
]
