"""
HTTP transport for the http kind.

Every request carries a timeout in milliseconds, the unit node config uses.
Three failure shapes stay distinct:

- NodeTimeoutError: the timeout elapsed
- HttpApiError without status_code: the request never got a response
- HttpApiError with status_code: the server answered non-2xx
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException, Timeout

from .basenode import NodeApiError, NodeOperationError


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 15000

# Keep error bodies small enough to log
ERROR_BODY_LIMIT = 1000


class NodeTimeoutError(NodeOperationError):
    """An HTTP request exceeded its timeout."""

    def __init__(self, message: str, timeout: float, url: str):
        self.timeout = timeout
        self.url = url
        super().__init__(message)


class HttpApiError(NodeApiError):
    """Transport failure or non-2xx answer."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)
        self.url = url
        self.method = method


def encode_body(method: str, body: Any, headers: Dict[str, str]) -> Optional[str]:
    """
    Serialize a configured body for sending.

    GET never sends a body. Strings go out as-is; anything else is JSON and
    gets a Content-Type unless the author set one (any casing).
    """
    if method == "GET" or body is None or body == "":
        return None
    if isinstance(body, str):
        return body
    if not any(name.lower() == "content-type" for name in headers):
        headers["Content-Type"] = "application/json"
    return json.dumps(body)


class HttpResponse:
    """requests.Response seen the way the run context stores it."""

    def __init__(self, response: requests.Response):
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def status_text(self) -> str:
        return self._response.reason or ""

    @property
    def headers(self) -> Dict[str, str]:
        return {key.lower(): value for key, value in self._response.headers.items()}

    @property
    def text(self) -> str:
        return self._response.text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def body(self) -> Any:
        """Decoded JSON when the content type says so, text otherwise."""
        if "application/json" in self._response.headers.get("content-type", "").lower():
            return self._response.json()
        return self.text

    def raise_for_status(self) -> None:
        """Raise HttpApiError("HTTP <status>: <reason>") unless 2xx."""
        if self.ok:
            return
        request = self._response.request
        raise HttpApiError(
            message=f"HTTP {self.status_code}: {self.status_text}",
            status_code=self.status_code,
            response_body=self.text[:ERROR_BODY_LIMIT] if self.text else None,
            url=str(self._response.url),
            method=request.method if request is not None else None,
        )

    def to_result(self) -> Dict[str, Any]:
        """{status, statusText, headers, data} as saved under saveAs."""
        return {
            "status": self.status_code,
            "statusText": self.status_text,
            "headers": self.headers,
            "data": self.body(),
        }


class HttpClient:
    """
    Sends one request with a millisecond timeout.

    Usage:
        client = HttpClient(timeout_ms=5000)
        response = client.send("POST", url, body={"name": "Bob"})
        response.raise_for_status()
        ctx["user"] = response.to_result()
    """

    def __init__(
        self,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
        default_headers: Optional[Dict[str, str]] = None,
    ):
        self.timeout_ms = timeout_ms
        self.headers: Dict[str, str] = dict(default_headers or {})

    def send(
        self,
        method: str,
        url: str,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> HttpResponse:
        """
        Send a request.

        Raises:
            NodeTimeoutError: "HTTP request timeout after <ms>ms"
            HttpApiError: "Request failed: <reason>" when nothing came back
        """
        method = method.upper()
        request_headers = {**self.headers, **(headers or {})}
        data = encode_body(method, body, request_headers)
        timeout_ms = self.timeout_ms

        started = time.perf_counter()
        try:
            response = requests.request(
                method=method,
                url=url,
                data=data,
                headers=request_headers,
                timeout=timeout_ms / 1000,
            )
        except Timeout as e:
            raise NodeTimeoutError(
                message=f"HTTP request timeout after {timeout_ms:g}ms",
                timeout=timeout_ms,
                url=url,
            ) from e
        except RequestException as e:
            raise HttpApiError(message=f"Request failed: {e}", url=url, method=method) from e

        logger.debug(
            f"{method} {url} -> {response.status_code} in {(time.perf_counter() - started) * 1000:.0f}ms"
        )
        return HttpResponse(response)


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "HttpApiError",
    "HttpClient",
    "HttpResponse",
    "NodeTimeoutError",
    "encode_body",
]
