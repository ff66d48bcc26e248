"""
BaseNode - Abstract base class for workflow node kinds.

Every node kind (http, filter, js, switch, wait, merge, generate-video)
inherits from BaseNode and implements execute(), which receives the node's
already-interpolated configuration and the live run context.

A node either returns a NodeExecutionResult or raises. Raising is the
failure signal: the executor boundary catches exactly once and converts
the exception into a failed result.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, MutableMapping, Optional


logger = logging.getLogger(__name__)


# ==============================================================================
# Node metadata
# ==============================================================================

class NodeCategory(str, Enum):
    """Palette category of a node kind."""
    CORE = "Core"
    INTEGRATIONS = "Integrations"


# ==============================================================================
# NodeExecutionResult - Output of a single node execution
# ==============================================================================

@dataclass
class NodeExecutionResult:
    """
    Result of executing one node.

    next_node_id is only set by branching kinds; should_stop tells the
    runner that the chosen branch has no target.
    """
    success: bool
    data: Any = None
    error: Optional[str] = None
    next_node_id: Optional[str] = None
    should_stop: Optional[bool] = None

    @classmethod
    def ok(cls, data: Any = None, **kwargs: Any) -> "NodeExecutionResult":
        return cls(success=True, data=data, **kwargs)

    @classmethod
    def failed(cls, error: str) -> "NodeExecutionResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape: {success, data?, error?, nextNodeId?, shouldStop?}."""
        result: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        if self.next_node_id is not None:
            result["nextNodeId"] = self.next_node_id
        if self.should_stop is not None:
            result["shouldStop"] = self.should_stop
        return result


# ==============================================================================
# BaseNode - Abstract base class
# ==============================================================================

class BaseNode(ABC):
    """
    Abstract base class for all node kinds.

    Nodes define:
    - kind: Discriminant used by the executor (e.g., "http")
    - description: Palette metadata (title, description, category, type)
    - default_config(): Configuration the editor starts from

    And implement execute(config, ctx).

    Example:

        class NoOpNode(BaseNode):
            kind = "noop"
            description = {
                "title": "No Operation",
                "description": "Passes control to the next node",
                "category": NodeCategory.CORE.value,
                "type": "action",
            }

            def execute(self, config, ctx):
                return NodeExecutionResult.ok()
    """

    kind: str = "base"

    description: Dict[str, Any] = {
        "title": "Base Node",
        "description": "",
        "category": NodeCategory.CORE.value,
        "type": "action",
    }

    def __init__(self) -> None:
        """Initialize node instance."""
        self.logger = logging.getLogger(f"node.{self.kind}")

    @classmethod
    def default_config(cls) -> Dict[str, Any]:
        """Configuration a freshly placed node starts with."""
        return {}

    @abstractmethod
    def execute(
        self,
        config: Dict[str, Any],
        ctx: MutableMapping[str, Any],
    ) -> NodeExecutionResult:
        """
        Execute node semantics.

        Args:
            config: Interpolated node configuration
            ctx: Live run context (mutated in place by saveAs writes)

        Raises:
            NodeOperationError: On precondition or runtime failure
        """
        raise NotImplementedError

    # ==== Helper methods for subclasses ====

    def require(self, config: Dict[str, Any], name: str, message: str) -> Any:
        """Get a required config value, raising NodeOperationError if blank."""
        value = config.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise NodeOperationError(message, node=self)
        return value

    def save_result(
        self,
        ctx: MutableMapping[str, Any],
        config: Dict[str, Any],
        default_key: str,
        value: Any,
    ) -> str:
        """Store value in the context under saveAs (or default_key)."""
        key = config.get("saveAs") or default_key
        ctx[key] = value
        self.logger.debug(f"Saved {self.kind} result to ctx.{key}")
        return key

    @classmethod
    def get_definition(cls) -> Dict[str, Any]:
        """Get full node definition for the editor palette."""
        return {
            "kind": cls.kind,
            "description": cls.description,
            "defaults": cls.default_config(),
        }


# ==============================================================================
# Errors
# ==============================================================================

class NodeOperationError(Exception):
    """Error during node operation."""

    def __init__(
        self,
        message: str,
        node: Optional[BaseNode] = None,
    ) -> None:
        self.message = message
        self.node = node
        super().__init__(message)


class NodeApiError(NodeOperationError):
    """Error from external API call."""

    def __init__(
        self,
        message: str,
        node: Optional[BaseNode] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(message, node)
        self.status_code = status_code
        self.response_body = response_body


class WaitTimeoutError(NodeOperationError):
    """An until-mode wait exceeded its ceiling."""

    def __init__(self, message: str, waited_seconds: float) -> None:
        super().__init__(message)
        self.waited_seconds = waited_seconds


class CodeExecutionError(NodeOperationError):
    """User code raised or could not be compiled."""


# ==============================================================================
# Exports
# ==============================================================================

__all__ = [
    "BaseNode",
    "NodeCategory",
    "NodeExecutionResult",
    "NodeOperationError",
    "NodeApiError",
    "WaitTimeoutError",
    "CodeExecutionError",
]
