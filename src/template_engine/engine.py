"""
Runtime interpolation.

Resolves {{expr}} placeholders against a run context and deep-interpolates
JSON-shaped node configuration. Any placeholder that fails to resolve is
replaced by an empty string; one bad expression never aborts the rest of
the document.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, List

from .errors import TemplateExpressionError
from .helpers import evaluate_helper, parse_call, split_arguments
from .paths import get_nested_value
from .tokenizer import OPEN, scan_placeholders


logger = logging.getLogger(__name__)

CTX_PREFIX = "ctx."


def resolve_expression(expression: str, ctx: Any) -> Any:
    """
    Evaluate one placeholder expression to a raw value.

    Forms:
    - helper(arg, ...) when the expression contains "("
    - ctx.<dot.path>
    - bare dotted path (resolved against the context as well)
    """
    if "(" in expression:
        return evaluate_helper(expression, ctx)
    if expression.startswith(CTX_PREFIX):
        return get_nested_value(ctx, expression[len(CTX_PREFIX):])
    return get_nested_value(ctx, expression)


def render_value(value: Any) -> str:
    """Render a resolved value for substitution into text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)


def interpolate_template(template: Any, ctx: Any) -> Any:
    """
    Interpolate every {{...}} placeholder in a string.

    Example:
        interpolate_template("Hello {{ctx.trigger.name}}", {"trigger": {"name": "Bob"}})
        -> "Hello Bob"

    Non-string input is returned unchanged.
    """
    if not isinstance(template, str) or OPEN not in template:
        return template

    pieces: List[str] = []
    pos = 0
    for placeholder in scan_placeholders(template):
        pieces.append(template[pos:placeholder.start])
        try:
            pieces.append(render_value(resolve_expression(placeholder.expression, ctx)))
        except Exception as e:
            logger.warning(
                f"Template interpolation failed for {placeholder.expression!r}: {e}"
            )
            pieces.append("")
        pos = placeholder.end

    pieces.append(template[pos:])
    return "".join(pieces)


def interpolate_config(config: Any, ctx: Any) -> Any:
    """
    Deep interpolate a configuration tree.

    Strings are interpolated, sequences are mapped element-wise, mappings
    key-wise with key order preserved. None, numbers and booleans pass
    through unchanged.
    """
    if config is None:
        return None

    if isinstance(config, str):
        return interpolate_template(config, ctx)

    if isinstance(config, (list, tuple)):
        return [interpolate_config(item, ctx) for item in config]

    if isinstance(config, Mapping):
        return {key: interpolate_config(value, ctx) for key, value in config.items()}

    return config


def _paths_in_expression(expression: str) -> List[str]:
    if "(" not in expression:
        if expression.startswith(CTX_PREFIX):
            return [expression[len(CTX_PREFIX):]]
        return []

    try:
        _, args_str = parse_call(expression)
    except TemplateExpressionError:
        return []
    return [
        part[len(CTX_PREFIX):]
        for part in split_arguments(args_str)
        if part.startswith(CTX_PREFIX)
    ]


def extract_template_paths(config: Any) -> List[str]:
    """
    Collect every distinct ctx.<path> referenced in a configuration tree.

    Paths are returned without the "ctx." prefix, in first-seen order.
    References inside helper arguments are included.
    """
    paths: dict = {}

    def extract(value: Any) -> None:
        if isinstance(value, str):
            if OPEN not in value:
                return
            for placeholder in scan_placeholders(value):
                for path in _paths_in_expression(placeholder.expression):
                    paths.setdefault(path, None)
        elif isinstance(value, (list, tuple)):
            for item in value:
                extract(item)
        elif isinstance(value, Mapping):
            for item in value.values():
                extract(item)

    extract(config)
    return list(paths)


__all__ = [
    "resolve_expression",
    "render_value",
    "interpolate_template",
    "interpolate_config",
    "extract_template_paths",
]
