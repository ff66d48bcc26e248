"""Pytest configuration and fixtures."""
import json
import os

import pytest
import requests

# Set test environment variables
os.environ["WORKFLOW_ENV"] = "test"
os.environ["WORKFLOW_LOG_LEVEL"] = "INFO"
os.environ["WORKFLOW_HTTP_DEFAULT_TIMEOUT_MS"] = "15000"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings from the environment for every test."""
    from workflow_service.config import reset_settings

    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def fresh_video_backends():
    """Give every test an empty influencer store and the simulated provider."""
    from node_sdk.influencers import set_influencer_store, set_video_provider

    set_influencer_store(None)
    set_video_provider(None)
    yield
    set_influencer_store(None)
    set_video_provider(None)


@pytest.fixture
def trigger_ctx():
    """A run context seeded with a typical webhook payload."""
    return {
        "trigger": {
            "name": "Bob",
            "total": 150,
            "plan": "pro",
            "items": [{"sku": "A-1", "price": 10}, {"sku": "B-2", "price": 32.5}],
            "date": "2024-01-15T10:30:00Z",
        }
    }


def build_response(
    status_code=200,
    json_body=None,
    text=None,
    reason="OK",
    headers=None,
    method="GET",
    url="https://api.example.com/users",
):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = url
    response.encoding = "utf-8"
    if json_body is not None:
        response._content = json.dumps(json_body).encode("utf-8")
        response.headers["Content-Type"] = "application/json; charset=utf-8"
    else:
        response._content = (text or "").encode("utf-8")
        response.headers["Content-Type"] = "text/plain"
    response.headers.update(headers or {})
    response.request = requests.Request(method, url).prepare()
    return response


class FakeRequests:
    """Stand-in for requests.request that records calls."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last_call(self):
        return self.calls[-1]


@pytest.fixture
def fake_requests(monkeypatch):
    """Patch requests.request; configure .response or .error in the test."""
    fake = FakeRequests(response=build_response(json_body={"ok": True}))
    monkeypatch.setattr(requests, "request", fake)
    return fake


@pytest.fixture
def sample_board():
    """Board with a trigger, linear, branching, wait and merge nodes."""
    return {
        "nodes": [
            {"id": "start", "data": {"actionKind": "start"}},
            {"id": "t1", "data": {"actionKind": "webhook-trigger", "config": {}}},
            {
                "id": "h1",
                "data": {
                    "actionKind": "http",
                    "config": {"method": "GET", "url": "https://api.example.com/{{ctx.trigger.id}}"},
                },
            },
            {
                "id": "f1",
                "data": {
                    "actionKind": "filter",
                    "config": {"expression": "ctx.trigger.total > 100", "nextTrue": "s1", "nextFalse": "w1"},
                },
            },
            {
                "id": "s1",
                "data": {
                    "actionKind": "switch",
                    "config": {
                        "keyExpr": "ctx.trigger.plan",
                        "cases": [{"value": "pro", "next": "j1"}, {"value": 1, "next": "w1"}],
                        "defaultNext": "m1",
                    },
                },
            },
            {"id": "j1", "data": {"actionKind": "js", "config": {"code": "return 1"}}},
            {"id": "w1", "data": {"actionKind": "wait", "config": {"mode": "delay", "delaySeconds": 5}}},
            {
                "id": "m1",
                "data": {"actionKind": "merge", "config": {"strategy": "combine", "sources": ["j1", "w1"]}},
            },
        ],
        "connections": [
            {"source": "start", "target": "t1"},
            {"source": "t1", "target": "h1"},
            {"source": "h1", "target": "f1"},
            {"source": "f1", "target": "s1"},
            {"source": "f1", "target": "w1"},
            {"source": "s1", "target": "j1"},
            {"source": "s1", "target": "w1"},
            {"source": "s1", "target": "m1"},
            {"source": "j1", "target": "m1"},
            {"source": "w1", "target": "m1"},
        ],
    }


@pytest.fixture
def make_response():
    """Factory for requests.Response objects."""
    return build_response
