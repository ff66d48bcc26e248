"""
Workflow Runtime - Board compilation and single-node execution.

Components:
- Board / ExecWorkflow: Author-time and run-time graph models
- compile_board: Board -> ExecWorkflow
- ExecutionContext: Versioned per-run key/value store
- NodeExecutor: Interpolate, dispatch and convert failures to results
- parse_curl_command: cURL -> http node config

All execution is synchronous.
"""

from node_sdk.waiting import UntilWait, WaitState

from .compiler import TRIGGER_KINDS, compile_board
from .context import ExecutionContext, deep_merge
from .curl import CurlParseResult, parse_curl_command
from .executor import NodeExecutor, execute_node
from .models import Board, BoardConnection, BoardNode, ExecNode, ExecWorkflow, parse_board

__all__ = [
    # Models
    "Board",
    "BoardConnection",
    "BoardNode",
    "ExecNode",
    "ExecWorkflow",
    "parse_board",
    # Compiler
    "TRIGGER_KINDS",
    "compile_board",
    # Context
    "ExecutionContext",
    "deep_merge",
    # Execution
    "NodeExecutor",
    "execute_node",
    # Wait
    "UntilWait",
    "WaitState",
    # cURL
    "CurlParseResult",
    "parse_curl_command",
]
