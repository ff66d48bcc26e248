"""
Template helpers - named pure functions callable from {{...}} placeholders.

Supported calls:
    {{uuid()}}
    {{now("iso")}}  /  {{now("epoch")}}
    {{formatDate(ctx.trigger.date, "YYYY-MM-DD")}}

Arguments are parsed individually as a quoted string literal, a ctx.<path>
reference, a numeric literal, a boolean literal, or else a raw string.
"""

from __future__ import annotations

import re
import uuid as uuid_lib
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from dateutil import parser as date_parser

from .errors import TemplateExpressionError
from .paths import get_nested_value


_CALL_PATTERN = re.compile(r"^(\w+)\((.*)\)$", re.DOTALL)
_INT_PATTERN = re.compile(r"^[+-]?\d+$")
_FLOAT_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_DATE_TOKENS = re.compile(r"YYYY|MM|DD|HH|mm|ss")


# ==============================================================================
# Helper implementations
# ==============================================================================

def uuid() -> str:
    """Random v4 identifier."""
    return str(uuid_lib.uuid4())


def now(format: Optional[str] = None) -> Any:
    """
    Current timestamp.

    "epoch" returns integer seconds; anything else returns a UTC ISO-8601
    string with millisecond precision, e.g. 2024-01-15T10:30:00.000Z.
    """
    current = datetime.now(timezone.utc)
    if format == "epoch":
        return int(current.timestamp())
    return current.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _coerce_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        if isinstance(value, str) and value.strip():
            return date_parser.parse(value)
    except (ValueError, OverflowError, OSError):
        return None
    return None


def format_date(value: Any, pattern: str = "YYYY-MM-DD") -> str:
    """
    Format a date by token substitution.

    Tokens: YYYY, MM, DD, HH, mm, ss. Values that cannot be read as a date
    produce an empty string.
    """
    parsed = _coerce_datetime(value)
    if parsed is None:
        return ""

    replacements = {
        "YYYY": f"{parsed.year:04d}",
        "MM": f"{parsed.month:02d}",
        "DD": f"{parsed.day:02d}",
        "HH": f"{parsed.hour:02d}",
        "mm": f"{parsed.minute:02d}",
        "ss": f"{parsed.second:02d}",
    }
    return _DATE_TOKENS.sub(lambda m: replacements[m.group(0)], str(pattern))


HELPERS: Dict[str, Callable[..., Any]] = {
    "uuid": uuid,
    "now": now,
    "formatDate": format_date,
}


# ==============================================================================
# Call parsing
# ==============================================================================

def split_arguments(args_str: str) -> List[str]:
    """Split on commas that are not inside a quoted literal."""
    parts: List[str] = []
    buf: List[str] = []
    quote: Optional[str] = None

    for ch in args_str:
        if quote:
            buf.append(ch)
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
            buf.append(ch)
        elif ch == ",":
            parts.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)

    parts.append("".join(buf).strip())
    return [part for part in parts if part]


def _parse_argument(part: str, ctx: Any) -> Any:
    if len(part) >= 2 and part[0] == part[-1] and part[0] in ("'", '"'):
        return part[1:-1]
    if part.startswith("ctx."):
        return get_nested_value(ctx, part[4:])
    if _INT_PATTERN.match(part):
        return int(part)
    if _FLOAT_PATTERN.match(part):
        return float(part)
    if part in ("true", "false"):
        return part == "true"
    return part


def parse_arguments(args_str: str, ctx: Any) -> List[Any]:
    """Parse a helper argument list against the context."""
    return [_parse_argument(part, ctx) for part in split_arguments(args_str)]


def parse_call(expression: str) -> tuple:
    """
    Split ``name(args)`` into its parts.

    Raises:
        TemplateExpressionError: If the expression is not a call
    """
    match = _CALL_PATTERN.match(expression.strip())
    if not match:
        raise TemplateExpressionError(f"Malformed helper call: {expression}", expression)
    return match.group(1), match.group(2)


def evaluate_helper(expression: str, ctx: Any) -> Any:
    """
    Evaluate a helper call such as ``formatDate(ctx.trigger.date, "YYYY")``.

    Raises:
        TemplateExpressionError: On malformed calls, unknown helpers or
            helper failures
    """
    name, args_str = parse_call(expression)

    helper = HELPERS.get(name)
    if helper is None:
        raise TemplateExpressionError(f"Unknown helper: {name}", expression)

    args = parse_arguments(args_str, ctx) if args_str.strip() else []
    try:
        return helper(*args)
    except TypeError as e:
        raise TemplateExpressionError(f"Bad arguments for {name}(): {e}", expression) from e


__all__ = [
    "HELPERS",
    "uuid",
    "now",
    "format_date",
    "parse_arguments",
    "parse_call",
    "split_arguments",
    "evaluate_helper",
]
