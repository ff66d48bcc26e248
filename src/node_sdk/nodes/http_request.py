"""
HTTP Request node.

Issues a request built from templated config and stores the response in
the context. Non-2xx responses and timeouts raise, which is how the
runner learns that a retry may be warranted.
"""

from __future__ import annotations

from typing import Any, Dict, MutableMapping

from workflow_service.config import get_settings

from ..basenode import BaseNode, NodeCategory, NodeExecutionResult, NodeOperationError
from ..http import HttpClient


class HttpRequestNode(BaseNode):
    """Make an HTTP request to an external API."""

    kind = "http"

    description = {
        "title": "HTTP Request",
        "description": "Make HTTP requests to external APIs",
        "category": NodeCategory.INTEGRATIONS.value,
        "type": "action",
    }

    @classmethod
    def default_config(cls) -> Dict[str, Any]:
        return {
            "method": "GET",
            "url": "",
            "headers": {},
            "body": None,
            "bodyParams": {},
            "bodyType": "json",
            "timeoutMs": get_settings().http_default_timeout_ms,
            "saveAs": "httpResponse",
        }

    def execute(
        self,
        config: Dict[str, Any],
        ctx: MutableMapping[str, Any],
    ) -> NodeExecutionResult:
        url = self.require(config, "url", "HTTP request URL is required")
        method = str(config.get("method") or "GET").upper()
        headers = dict(config.get("headers") or {})
        body = config.get("body")
        try:
            timeout_ms = float(config.get("timeoutMs") or get_settings().http_default_timeout_ms)
        except (TypeError, ValueError):
            raise NodeOperationError("HTTP timeoutMs must be a number", node=self)

        self.logger.info(f"Making {method} request to: {url}")
        response = HttpClient(timeout_ms=timeout_ms).send(method, url, body=body, headers=headers)
        response.raise_for_status()

        result = response.to_result()
        key = self.save_result(ctx, config, "httpResponse", result)
        self.logger.info(f"HTTP request completed with {result['status']}, saved to ctx.{key}")

        return NodeExecutionResult.ok(result["data"])
