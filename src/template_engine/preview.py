"""
Preview rendering for human-facing display.

Unlike runtime interpolation, a placeholder that cannot be resolved is
rendered as an explicit marker so the editor can show what is missing:

    "[ctx.trigger.name] - No data"   unresolved path
    "[formatDate(x)] - Error"        failed evaluation
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, List

from .engine import CTX_PREFIX, render_value
from .errors import TemplateExpressionError
from .helpers import evaluate_helper
from .tokenizer import OPEN, scan_placeholders


NO_DATA_MARKER = "[{expression}] - No data"
ERROR_MARKER = "[{expression}] - Error"


class _Missing:
    pass


_MISSING = _Missing()


@dataclass
class TemplateVariable:
    """A placeholder found in preview text, with its resolved value."""
    variable: str
    start_index: int
    end_index: int
    value: Any


def _walk(data: Any, path: str) -> Any:
    current = data
    for key in path.split("."):
        if isinstance(current, Mapping) and key in current:
            current = current[key]
        elif (
            isinstance(current, Sequence)
            and not isinstance(current, (str, bytes))
            and key.isdigit()
            and int(key) < len(current)
        ):
            current = current[int(key)]
        else:
            return _MISSING
    return current


def resolve_preview_value(expression: str, data: Any) -> Any:
    """
    Resolve a placeholder for preview.

    Returns the value, or a marker string when it cannot be resolved.
    """
    if "(" in expression:
        try:
            return evaluate_helper(expression, data)
        except TemplateExpressionError:
            return ERROR_MARKER.format(expression=expression)

    path = expression[len(CTX_PREFIX):] if expression.startswith(CTX_PREFIX) else expression
    value = _walk(data, path)
    if value is _MISSING:
        return NO_DATA_MARKER.format(expression=expression)
    return value


def _render_preview(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return render_value(value)


def parse_template_variables(text: str, data: Any) -> List[TemplateVariable]:
    """Find placeholders in text and resolve each against preview data."""
    if not isinstance(text, str) or OPEN not in text:
        return []

    return [
        TemplateVariable(
            variable=text[placeholder.start:placeholder.end],
            start_index=placeholder.start,
            end_index=placeholder.end,
            value=resolve_preview_value(placeholder.expression, data),
        )
        for placeholder in scan_placeholders(text)
    ]


def preview_template(text: str, data: Any) -> str:
    """
    Render text for display, substituting resolved values or markers.

    Example:
        preview_template("Hi {{ctx.trigger.name}}", {})
        -> "Hi [ctx.trigger.name] - No data"
    """
    variables = parse_template_variables(text, data)
    if not variables:
        return text

    result = text
    # Replace from the end so earlier indices stay valid
    for variable in sorted(variables, key=lambda v: v.start_index, reverse=True):
        result = (
            result[:variable.start_index]
            + _render_preview(variable.value)
            + result[variable.end_index:]
        )
    return result


__all__ = [
    "NO_DATA_MARKER",
    "ERROR_MARKER",
    "TemplateVariable",
    "resolve_preview_value",
    "parse_template_variables",
    "preview_template",
]
