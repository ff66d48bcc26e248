"""
Data mapping helpers for the editor's insert-value tooling.

Builds preview contexts, flattens sample data into selectable paths and
produces representative sample outputs for nodes that have not run yet.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


def build_execution_context(
    trigger_payload: Any,
    node_outputs: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a run context seeded with the trigger payload."""
    return {
        "trigger": trigger_payload or {},
        **(node_outputs or {}),
    }


def _type_name(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def generate_data_paths(
    obj: Any,
    prefix: str = "",
    max_depth: int = 5,
    current_depth: int = 0,
) -> List[Dict[str, Any]]:
    """
    Flatten an object into {path, type, value} entries for a dropdown.

    Sequences are sampled (first 3 items). Container entries carry no
    value. Recursion stops at max_depth.
    """
    paths: List[Dict[str, Any]] = []

    if current_depth >= max_depth or obj is None:
        return paths

    if isinstance(obj, Mapping):
        entries = [(f"{prefix}.{key}" if prefix else str(key), value) for key, value in obj.items()]
    elif isinstance(obj, (list, tuple)):
        entries = [(f"{prefix}.{index}" if prefix else str(index), item) for index, item in enumerate(obj[:3])]
    else:
        return paths

    for path, value in entries:
        value_type = _type_name(value)
        paths.append({
            "path": path,
            "type": value_type,
            "value": value if value_type not in ("object", "array") else None,
        })
        if isinstance(value, (Mapping, list, tuple)):
            paths.extend(generate_data_paths(value, path, max_depth, current_depth + 1))

    return paths


_SAMPLE_OUTPUTS: Dict[str, Dict[str, Any]] = {
    "http": {
        "status": 200,
        "statusText": "OK",
        "headers": {
            "content-type": "application/json",
            "x-response-time": "45ms",
        },
        "data": {
            "id": 12345,
            "name": "Sample Response",
            "email": "user@example.com",
            "created_at": "2024-01-15T10:30:00Z",
            "metadata": {"source": "api", "version": "1.2"},
        },
    },
    "generate-video": {
        "videoId": "vid_abc123def456",
        "status": "completed",
        "url": "https://cdn.example.com/videos/sample-video.mp4",
        "thumbnail": "https://cdn.example.com/thumbnails/sample-thumb.jpg",
        "duration": 45.2,
        "resolution": {"width": 1920, "height": 1080},
        "metadata": {
            "influencer": "inf_sample",
            "script_length": 156,
            "processing_time": 23.4,
            "created_at": "2024-01-15T10:35:00Z",
        },
    },
    "js": {
        "result": "Custom processing completed",
        "processed_items": 5,
        "timestamp": "2024-01-15T10:30:00Z",
        "metadata": {"execution_time": 1.2, "memory_used": "45MB"},
    },
    "filter": {
        "matched": True,
        "expression": "condition",
        "evaluated_at": "2024-01-15T10:30:00Z",
    },
    "switch": {
        "matched_case": "case_1",
        "key_value": "example_value",
        "evaluated_at": "2024-01-15T10:30:00Z",
    },
    "wait": {
        "waited_seconds": 60,
        "completed_at": "2024-01-15T10:31:00Z",
        "condition_met": True,
    },
    "merge": {
        "merged_sources": ["node_1", "node_2"],
        "strategy": "pass-through",
        "merged_at": "2024-01-15T10:30:00Z",
        "combined_data": {
            "source_1": {"value": "data from first source"},
            "source_2": {"value": "data from second source"},
        },
    },
}

_DEFAULT_SAMPLE = {
    "result": "Node execution completed",
    "timestamp": "2024-01-15T10:30:00Z",
}


def generate_sample_node_output(node_kind: str, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Representative output for a node kind, shaped like its real result."""
    config = config or {}
    sample = copy.deepcopy(_SAMPLE_OUTPUTS.get(node_kind, _DEFAULT_SAMPLE))

    if node_kind == "generate-video" and config.get("influencerId"):
        sample["metadata"]["influencer"] = config["influencerId"]
    elif node_kind == "filter" and config.get("expression"):
        sample["expression"] = config["expression"]
    elif node_kind == "wait" and config.get("delaySeconds"):
        sample["waited_seconds"] = config["delaySeconds"]
    elif node_kind == "merge" and config.get("strategy"):
        sample["strategy"] = config["strategy"]

    return sample


def build_node_outputs_from_workflow(workflow_nodes: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Build sample outputs keyed by node id for every node with a saveAs.

    Trigger nodes are skipped. Recorded sample data on the node is
    preferred over generated samples.
    """
    outputs: Dict[str, Any] = {}

    for node in workflow_nodes:
        data = node.get("data") or {}
        node_kind = data.get("actionKind") or data.get("kind")
        config = data.get("config") or {}

        if not node_kind or "trigger" in node_kind or not config.get("saveAs"):
            continue

        existing = (
            data.get("sampleOutput")
            or config.get("sampleOutput")
            or data.get("lastExecutionResult")
        )
        outputs[node["id"]] = existing if existing else generate_sample_node_output(node_kind, config)

    logger.debug(
        f"Built node outputs for data mapping: {len(outputs)} of {len(workflow_nodes)} nodes"
    )
    return outputs


__all__ = [
    "build_execution_context",
    "generate_data_paths",
    "generate_sample_node_output",
    "build_node_outputs_from_workflow",
]
