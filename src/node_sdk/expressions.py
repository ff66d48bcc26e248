"""
Safe expression evaluator for filter, switch and wait-until expressions.

Expressions are parsed with the ast module and walked by a small
interpreter that only exposes ``ctx``, the template helpers and a fixed
set of builtins. Nothing is executed with eval().

JavaScript-style operators written by editor users are accepted and
translated before parsing:

    ===  !==  &&  ||  !x  true  false  null  undefined

``===`` and ``!==`` become ``is`` and ``is not``, which this evaluator
compares with strict_equals: ``true === 1`` and ``"1" === 1`` are false.

Attribute access on mappings reads keys, so ``ctx.trigger.total > 100``
works on plain dict contexts. Missing keys evaluate to None, and ordering
comparisons involving None are False rather than errors.
"""

from __future__ import annotations

import ast
import operator
import re
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, List, Optional

from template_engine.helpers import HELPERS


class ExpressionError(Exception):
    """Expression evaluation error."""

    def __init__(self, message: str, expression: str = ""):
        super().__init__(message)
        self.expression = expression


_STRING_LITERAL = re.compile(r"(\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*')")

_JS_REWRITES = [
    (re.compile(r"!=="), " is not "),
    (re.compile(r"==="), " is "),
    (re.compile(r"&&"), " and "),
    (re.compile(r"\|\|"), " or "),
    (re.compile(r"!(?!=)"), " not "),
    (re.compile(r"\btrue\b"), "True"),
    (re.compile(r"\bfalse\b"), "False"),
    (re.compile(r"\b(null|undefined)\b"), "None"),
]

_SAFE_BUILTINS: Dict[str, Callable[..., Any]] = {
    "abs": abs,
    "round": round,
    "min": min,
    "max": max,
    "sum": sum,
    "len": len,
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
}


def translate_js_operators(expression: str) -> str:
    """Rewrite JS-style operators outside of string literals."""
    parts = _STRING_LITERAL.split(expression)
    for index in range(0, len(parts), 2):
        code = parts[index]
        for pattern, replacement in _JS_REWRITES:
            code = pattern.sub(replacement, code)
        parts[index] = code
    return "".join(parts).strip()


def strict_equals(left: Any, right: Any) -> bool:
    """
    Type-sensitive equality.

    1 and "1" differ, True and 1 differ, 1 and 1.0 are equal (both numbers).
    Containers compare by identity.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return left is right
    return type(left) is type(right) and left == right


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def wrapped(left: Any, right: Any) -> bool:
        if left is None or right is None:
            return False
        return compare(left, right)
    return wrapped


class SafeExpressionEvaluator:
    """Evaluate boolean/value expressions against a run context."""

    def __init__(self, extra_names: Optional[Dict[str, Any]] = None):
        self.names: Dict[str, Any] = {**_SAFE_BUILTINS, **HELPERS, **(extra_names or {})}

        self.operators = {
            ast.Add: operator.add,
            ast.Sub: operator.sub,
            ast.Mult: operator.mul,
            ast.Div: operator.truediv,
            ast.FloorDiv: operator.floordiv,
            ast.Mod: operator.mod,
        }

        self.comparisons = {
            ast.Eq: operator.eq,
            ast.NotEq: operator.ne,
            ast.Lt: _ordered(operator.lt),
            ast.LtE: _ordered(operator.le),
            ast.Gt: _ordered(operator.gt),
            ast.GtE: _ordered(operator.ge),
            ast.Is: strict_equals,
            ast.IsNot: lambda x, y: not strict_equals(x, y),
            ast.In: lambda x, y: y is not None and x in y,
            ast.NotIn: lambda x, y: y is None or x not in y,
        }

        self.unary_ops = {
            ast.UAdd: operator.pos,
            ast.USub: operator.neg,
            ast.Not: operator.not_,
        }

    def evaluate(self, expression: str, ctx: Any) -> Any:
        """Evaluate an expression with ``ctx`` in scope."""
        processed = translate_js_operators(expression)
        try:
            tree = ast.parse(processed, mode="eval")
        except SyntaxError as e:
            raise ExpressionError(f"Syntax error in expression: {e.msg}", expression) from e

        scope = {**self.names, "ctx": ctx}
        try:
            return self._eval_node(tree.body, scope)
        except ExpressionError:
            raise
        except Exception as e:
            raise ExpressionError(f"Expression evaluation failed: {e}", expression) from e

    def _eval_node(self, node: ast.AST, scope: Dict[str, Any]) -> Any:
        """Recursively evaluate AST nodes."""

        if isinstance(node, ast.Constant):
            return node.value

        elif isinstance(node, ast.Name):
            if node.id in scope:
                return scope[node.id]
            raise NameError(f"Name '{node.id}' is not defined")

        elif isinstance(node, ast.Attribute):
            obj = self._eval_node(node.value, scope)
            return self._get_member(obj, node.attr)

        elif isinstance(node, ast.Subscript):
            obj = self._eval_node(node.value, scope)
            key = self._eval_node(node.slice, scope)
            if obj is None:
                return None
            if isinstance(obj, Mapping):
                return obj.get(key)
            if isinstance(obj, Sequence) and isinstance(key, int) and not isinstance(key, bool):
                return obj[key] if 0 <= key < len(obj) else None
            raise TypeError(f"Cannot index {type(obj).__name__}")

        elif isinstance(node, ast.BoolOp):
            if isinstance(node.op, ast.And):
                value: Any = True
                for item in node.values:
                    value = self._eval_node(item, scope)
                    if not value:
                        return value
                return value
            value = False
            for item in node.values:
                value = self._eval_node(item, scope)
                if value:
                    return value
            return value

        elif isinstance(node, ast.BinOp):
            op = self.operators.get(type(node.op))
            if op is None:
                raise ValueError(f"Unsupported binary operator: {type(node.op).__name__}")
            return op(self._eval_node(node.left, scope), self._eval_node(node.right, scope))

        elif isinstance(node, ast.UnaryOp):
            op = self.unary_ops.get(type(node.op))
            if op is None:
                raise ValueError(f"Unsupported unary operator: {type(node.op).__name__}")
            return op(self._eval_node(node.operand, scope))

        elif isinstance(node, ast.Compare):
            left = self._eval_node(node.left, scope)
            for op, right_node in zip(node.ops, node.comparators):
                right = self._eval_node(right_node, scope)
                comparison = self.comparisons.get(type(op))
                if comparison is None:
                    raise ValueError(f"Unsupported comparison: {type(op).__name__}")
                if not comparison(left, right):
                    return False
                left = right
            return True

        elif isinstance(node, ast.IfExp):
            if self._eval_node(node.test, scope):
                return self._eval_node(node.body, scope)
            return self._eval_node(node.orelse, scope)

        elif isinstance(node, ast.Call):
            return self._eval_call(node, scope)

        elif isinstance(node, (ast.List, ast.Tuple)):
            return [self._eval_node(item, scope) for item in node.elts]

        elif isinstance(node, ast.Dict):
            return {
                self._eval_node(k, scope): self._eval_node(v, scope)
                for k, v in zip(node.keys, node.values)
            }

        else:
            raise ValueError(f"Unsupported expression element: {type(node).__name__}")

    def _get_member(self, obj: Any, name: str) -> Any:
        """Mapping key access, plus .length on sequences and strings."""
        if obj is None:
            return None
        if isinstance(obj, Mapping):
            return obj.get(name)
        if name == "length" and isinstance(obj, (str, list, tuple)):
            return len(obj)
        return None

    def _eval_call(self, node: ast.Call, scope: Dict[str, Any]) -> Any:
        """Only names bound in scope may be called."""
        if not isinstance(node.func, ast.Name):
            raise ValueError("Only helper and builtin functions can be called")
        func = self._eval_node(node.func, scope)
        if not callable(func):
            raise ValueError(f"Object is not callable: {node.func.id}")
        args: List[Any] = [self._eval_node(arg, scope) for arg in node.args]
        return func(*args)


_default_evaluator: Optional[SafeExpressionEvaluator] = None


def evaluate_expression(expression: str, ctx: Any) -> Any:
    """Evaluate with the shared default evaluator."""
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = SafeExpressionEvaluator()
    return _default_evaluator.evaluate(expression, ctx)


__all__ = [
    "ExpressionError",
    "SafeExpressionEvaluator",
    "evaluate_expression",
    "strict_equals",
    "translate_js_operators",
]
