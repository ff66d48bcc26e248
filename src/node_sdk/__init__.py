"""
Node SDK - Node kinds and their execution semantics.

This package provides:
- BaseNode: Abstract base class for node kinds
- NodeExecutionResult: Outcome of one node execution
- The node error taxonomy
- HttpClient: Millisecond-timeout HTTP transport for the http kind
- SafeExpressionEvaluator: Scoped evaluator for filter/switch/wait expressions
- NodeRegistry: Kind -> class lookup with legacy aliases

All nodes execute synchronously; a node's async user code runs to
completion inside the call.
"""

from .basenode import (
    BaseNode,
    CodeExecutionError,
    NodeApiError,
    NodeCategory,
    NodeExecutionResult,
    NodeOperationError,
    WaitTimeoutError,
)
from .expressions import ExpressionError, SafeExpressionEvaluator, evaluate_expression, strict_equals
from .http import HttpApiError, HttpClient, HttpResponse, NodeTimeoutError
from .registry import NodeRegistry, get_default_registry
from .waiting import UntilWait, WaitState

__all__ = [
    # Base class
    "BaseNode",
    "NodeCategory",
    "NodeExecutionResult",
    # Errors
    "NodeOperationError",
    "NodeApiError",
    "NodeTimeoutError",
    "HttpApiError",
    "WaitTimeoutError",
    "CodeExecutionError",
    "ExpressionError",
    # HTTP
    "HttpClient",
    "HttpResponse",
    # Expressions
    "SafeExpressionEvaluator",
    "evaluate_expression",
    "strict_equals",
    # Wait
    "UntilWait",
    "WaitState",
    # Registry
    "NodeRegistry",
    "get_default_registry",
]
