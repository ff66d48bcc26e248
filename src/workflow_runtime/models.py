"""
Workflow Models - Board (author-time) and ExecWorkflow (run-time) structures.

A Board is what the editor saves: nodes with an actionKind and config,
plus simple source/target connections. An ExecWorkflow is the normalized
form the runner walks: one ExecNode per board node with explicit prev,
next (linear kinds) or edges (branching kinds).
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


START_NODE_ID = "start"


# ==============================================================================
# Board
# ==============================================================================

class BoardNodePosition(BaseModel):
    """Node position on the canvas."""
    x: float = 0
    y: float = 0


class BoardNodeData(BaseModel):
    """Payload of a board node: its kind and configuration."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    action_kind: str = Field(..., alias="actionKind", description="Node kind (e.g., 'http', 'webhook-trigger')")
    config: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("config", mode="before")
    @classmethod
    def none_config_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v


class BoardNode(BaseModel):
    """A node as authored in the editor."""
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Node ID (unique within board)")
    data: BoardNodeData
    position: Optional[BoardNodePosition] = None


class BoardConnection(BaseModel):
    """
    Directed connection between two board nodes.

    Example: {"source": "start", "target": "n1"}
    """
    model_config = ConfigDict(extra="allow")

    source: str
    target: str


class Board(BaseModel):
    """Author-time graph produced by the editor."""
    model_config = ConfigDict(extra="allow")

    nodes: List[BoardNode] = Field(default_factory=list)
    connections: List[BoardConnection] = Field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[BoardNode]:
        """Get node by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


# ==============================================================================
# ExecWorkflow
# ==============================================================================

class ExecNode(BaseModel):
    """
    A node of the runnable graph.

    Linear kinds use ``next``; branching kinds (filter, switch) use
    ``edges`` keyed by value discriminant. ``sub`` is set for triggers only.
    """
    model_config = ConfigDict(extra="forbid")

    id: str
    kind: str
    cfg: Dict[str, Any] = Field(default_factory=dict)
    prev: List[str] = Field(default_factory=list)
    next: Optional[str] = None
    edges: Optional[Dict[str, Optional[str]]] = None
    sub: Optional[str] = None

    @property
    def is_branching(self) -> bool:
        return self.edges is not None

    def successors(self) -> List[str]:
        """Every node ID this node can hand control to."""
        if self.edges is not None:
            return [target for target in self.edges.values() if target]
        return [self.next] if self.next else []

    def to_dict(self) -> Dict[str, Any]:
        """Serialized form: ``next`` or ``edges``, never both; ``sub`` only when set."""
        result: Dict[str, Any] = {
            "id": self.id,
            "kind": self.kind,
            "cfg": self.cfg,
            "prev": list(self.prev),
        }
        if self.is_branching:
            result["edges"] = dict(self.edges)
        else:
            result["next"] = self.next
        if self.sub is not None:
            result["sub"] = self.sub
        return result


class ExecWorkflow(BaseModel):
    """Runnable workflow produced by the board compiler."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Untitled"
    version: int = 1
    root: str = ""
    nodes: Dict[str, ExecNode] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[ExecNode]:
        return self.nodes.get(node_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "root": self.root,
            "nodes": {node_id: node.to_dict() for node_id, node in self.nodes.items()},
            "warnings": list(self.warnings),
        }


def parse_board(data: Dict[str, Any]) -> Board:
    """Parse board JSON into a Board."""
    return Board.model_validate(data)


__all__ = [
    "START_NODE_ID",
    "Board",
    "BoardConnection",
    "BoardNode",
    "BoardNodeData",
    "BoardNodePosition",
    "ExecNode",
    "ExecWorkflow",
    "parse_board",
]
