"""
cURL import for the http node.

Turns a pasted cURL command into method, url, headers and body. Only the
options that map onto the http node's config are understood; anything
else is ignored.
"""

from __future__ import annotations

import json
import logging
import re
import shlex
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)

_LINE_CONTINUATION = re.compile(r"\\\s*\n\s*")

METHOD_FLAGS = ("-X", "--request")
HEADER_FLAGS = ("-H", "--header")
JSON_DATA_FLAGS = ("-d", "--data", "--data-raw")
RAW_DATA_FLAGS = ("--data-binary", "--data-ascii")


@dataclass
class CurlParseResult:
    """Outcome of parsing a cURL command."""
    url: str = ""
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    success: bool = True
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "CurlParseResult":
        return cls(success=False, error=error)

    def to_config(self) -> Dict[str, Any]:
        """http node config fragment."""
        config: Dict[str, Any] = {"method": self.method, "url": self.url, "headers": dict(self.headers)}
        if self.body is not None:
            config["body"] = self.body
        return config

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "url": self.url,
            "method": self.method,
            "headers": self.headers,
            "success": self.success,
        }
        if self.body is not None:
            result["body"] = self.body
        if self.error is not None:
            result["error"] = self.error
        return result


def _decode_body(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError:
        return value


def _tokenize(command: str) -> List[str]:
    return shlex.split(_LINE_CONTINUATION.sub(" ", command).strip())


def parse_curl_command(command: str) -> CurlParseResult:
    """
    Parse a cURL command.

    Example:
        parse_curl_command("curl https://api.example.com/users -d '{\"name\": 1}'")
        -> CurlParseResult(url="https://api.example.com/users", method="POST", body={"name": 1})

    A GET with a body becomes a POST, the way curl itself behaves.
    """
    try:
        tokens = _tokenize(command or "")
    except ValueError as e:
        return CurlParseResult.failure(f"Failed to parse cURL command: {e}")

    if not tokens or tokens[0].lower() != "curl":
        return CurlParseResult.failure('Command must start with "curl"')

    result = CurlParseResult()
    has_body = False

    args = iter(tokens[1:])
    for token in args:
        if token in METHOD_FLAGS:
            result.method = (next(args, "") or "GET").upper()

        elif token in HEADER_FLAGS:
            name, sep, value = next(args, "").partition(":")
            if name.strip() and sep:
                result.headers[name.strip()] = value.strip()

        elif token in JSON_DATA_FLAGS:
            value = next(args, "")
            if value:
                result.body = _decode_body(value)
                has_body = True

        elif token in RAW_DATA_FLAGS:
            result.body = next(args, "")
            has_body = True

        elif not token.startswith("-") and not result.url:
            result.url = token

    if not result.url:
        return CurlParseResult.failure("No URL found in cURL command")

    if result.method == "GET" and has_body:
        result.method = "POST"

    logger.debug(f"Parsed cURL command: {result.method} {result.url}")
    return result


__all__ = ["CurlParseResult", "parse_curl_command"]
