"""
Code sandbox for the js (custom code) node.

User code is the body of a function receiving ``ctx``:

    total = sum(item["price"] for item in ctx["trigger"]["items"])
    return {"total": total}

The body may use ``await``; it then runs as a coroutine to completion.
Code runs with a curated builtins table (no import, open, eval or exec),
the template helpers, and JSON helpers. Attributes that lead back to
interpreter internals (dunders, frame, code and traceback attributes) are
rejected before compilation.

SECURITY: This narrows what user code can reach but is not an OS-level
sandbox. Disable code nodes with WORKFLOW_CODE_NODE_ENABLED=false where
authors are untrusted.
"""

from __future__ import annotations

import ast
import asyncio
import json
import textwrap
from typing import Any, Dict, MutableMapping

from template_engine.helpers import HELPERS

from .basenode import CodeExecutionError


FUNCTION_NAME = "__node_code__"

SAFE_BUILTINS: Dict[str, Any] = {
    "abs": abs, "all": all, "any": any, "bool": bool, "dict": dict,
    "enumerate": enumerate, "filter": filter, "float": float, "int": int,
    "isinstance": isinstance, "len": len, "list": list, "map": map, "max": max,
    "min": min, "range": range, "reversed": reversed, "round": round, "set": set,
    "sorted": sorted, "str": str, "sum": sum, "tuple": tuple, "zip": zip,
    "Exception": Exception, "ValueError": ValueError, "KeyError": KeyError,
    "TypeError": TypeError, "RuntimeError": RuntimeError,
}

# Generator, coroutine, frame, code and traceback internals
BLOCKED_ATTR_PREFIXES = ("__", "gi_", "cr_", "ag_", "f_", "tb_", "co_")
BLOCKED_ATTRS = frozenset({"func_globals", "func_code", "format", "format_map", "mro"})


def _build_source(code: str, is_async: bool) -> str:
    body = textwrap.dedent(code).strip("\n") or "pass"
    prefix = "async def" if is_async else "def"
    return f"{prefix} {FUNCTION_NAME}(ctx):\n{textwrap.indent(body, '    ')}\n"


def _uses_await(tree: ast.AST) -> bool:
    return any(isinstance(node, (ast.Await, ast.AsyncFor, ast.AsyncWith)) for node in ast.walk(tree))


def _is_blocked(attr: str) -> bool:
    return attr.startswith(BLOCKED_ATTR_PREFIXES) or attr in BLOCKED_ATTRS


def _check_tree(tree: ast.AST) -> None:
    for node in ast.walk(tree):
        if isinstance(node, ast.Attribute) and _is_blocked(node.attr):
            raise CodeExecutionError(f"Access to '{node.attr}' is not allowed")
        if isinstance(node, (ast.Import, ast.ImportFrom, ast.Global, ast.Nonlocal)):
            raise CodeExecutionError(f"'{type(node).__name__}' statements are not allowed")


def compile_code(code: str) -> Any:
    """
    Compile a code body into a function object.

    Raises:
        CodeExecutionError: On syntax errors or disallowed constructs
    """
    try:
        tree = ast.parse(_build_source(code, is_async=True))
    except SyntaxError as e:
        raise CodeExecutionError(f"Syntax error: {e.msg} (line {e.lineno})") from e

    _check_tree(tree)
    is_async = _uses_await(tree)
    source = _build_source(code, is_async=is_async)

    namespace: Dict[str, Any] = {
        "__builtins__": SAFE_BUILTINS,
        "json_parse": json.loads,
        "json_stringify": json.dumps,
        **HELPERS,
    }
    exec(compile(source, "<code-node>", "exec"), namespace)
    return namespace[FUNCTION_NAME]


def run_code(code: str, ctx: MutableMapping[str, Any]) -> Any:
    """Run a code body against the context and return its return value."""
    func = compile_code(code)
    result = func(ctx)
    if asyncio.iscoroutine(result):
        result = asyncio.run(result)
    return result


__all__ = ["SAFE_BUILTINS", "compile_code", "run_code"]
