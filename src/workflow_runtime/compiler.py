"""
Board Compiler - Board -> ExecWorkflow.

Branch targets of filter and switch come from their config (nextTrue,
nextFalse, cases[].next, defaultNext), not from graph connections. Every
other kind, including wait and merge, gets a single linear successor: the
first outgoing connection.

The compiler never rejects a board. Where config and connections disagree
it records a warning on the compiled workflow and logs it.
"""

from __future__ import annotations

import copy
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .models import START_NODE_ID, Board, BoardNode, ExecNode, ExecWorkflow


logger = logging.getLogger(__name__)

TRIGGER_KINDS = frozenset({"webhook-trigger", "schedule-trigger", "manual-trigger"})

Adjacency = Dict[str, List[str]]


# ==============================================================================
# Helpers
# ==============================================================================

def case_key(value: Any) -> str:
    """Edge key for a switch case value, spelled the way the editor spells it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_adjacency(board: Board) -> Tuple[Adjacency, Adjacency]:
    """next_map[source] and prev_map[target], in connection order."""
    next_map: Adjacency = defaultdict(list)
    prev_map: Adjacency = defaultdict(list)
    for connection in board.connections:
        next_map[connection.source].append(connection.target)
        prev_map[connection.target].append(connection.source)
    return dict(next_map), dict(prev_map)


def _first(targets: Optional[List[str]]) -> Optional[str]:
    return targets[0] if targets else None


def _target(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


# ==============================================================================
# Per-kind rules
# ==============================================================================

def _compile_trigger(node: BoardNode, cfg: Dict[str, Any], prev: List[str], next_map: Adjacency) -> ExecNode:
    subtype = cfg.get("subtype") or node.data.action_kind
    return ExecNode(
        id=node.id,
        kind="trigger",
        sub=str(subtype).replace("-trigger", ""),
        next=_first(next_map.get(node.id)),
        prev=prev,
        cfg=cfg,
    )


def _compile_filter(node: BoardNode, cfg: Dict[str, Any], prev: List[str], next_map: Adjacency) -> ExecNode:
    return ExecNode(
        id=node.id,
        kind="filter",
        edges={"true": _target(cfg.get("nextTrue")), "false": _target(cfg.get("nextFalse"))},
        prev=prev,
        cfg=cfg,
    )


def _switch_cases(cfg: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [case for case in cfg.get("cases") or [] if isinstance(case, dict)]


def _compile_switch(node: BoardNode, cfg: Dict[str, Any], prev: List[str], next_map: Adjacency) -> ExecNode:
    # First case per key wins; a case keyed "default" shadows defaultNext
    edges: Dict[str, Optional[str]] = {}
    for case in _switch_cases(cfg):
        edges.setdefault(case_key(case.get("value")), _target(case.get("next")))
    edges.setdefault("default", _target(cfg.get("defaultNext")))
    return ExecNode(id=node.id, kind="switch", edges=edges, prev=prev, cfg=cfg)


def _compile_linear(node: BoardNode, cfg: Dict[str, Any], prev: List[str], next_map: Adjacency) -> ExecNode:
    return ExecNode(
        id=node.id,
        kind=node.data.action_kind,
        next=_first(next_map.get(node.id)),
        prev=prev,
        cfg=cfg,
    )


CompileRule = Callable[[BoardNode, Dict[str, Any], List[str], Adjacency], ExecNode]

_RULES: Dict[str, CompileRule] = {
    **{kind: _compile_trigger for kind in TRIGGER_KINDS},
    "filter": _compile_filter,
    "switch": _compile_switch,
}


def compile_node(node: BoardNode, next_map: Adjacency, prev_map: Adjacency) -> ExecNode:
    """Compile one board node with the rule for its kind."""
    cfg = copy.deepcopy(node.data.config)
    prev = list(prev_map.get(node.id, []))
    rule = _RULES.get(node.data.action_kind, _compile_linear)
    return rule(node, cfg, prev, next_map)


# ==============================================================================
# Drift detection
# ==============================================================================

def _switch_key_drift(node: ExecNode) -> List[str]:
    warnings: List[str] = []
    seen: Dict[str, Any] = {}
    for case in _switch_cases(node.cfg):
        key = case_key(case.get("value"))
        if key in seen:
            warnings.append(
                f"Switch node '{node.id}' case {case.get('value')!r} shares edge key '{key}' "
                f"with case {seen[key]!r}; only the first has an edge"
            )
        else:
            seen[key] = case.get("value")

    default_next = _target(node.cfg.get("defaultNext"))
    if "default" in seen and default_next:
        warnings.append(
            f"Switch node '{node.id}' has a case 'default', so defaultNext '{default_next}' "
            f"has no edge"
        )
    return warnings


def find_drift(nodes: Dict[str, ExecNode], next_map: Adjacency) -> List[str]:
    """
    Compare config-declared routing with graph connections.

    Returns:
        Human-readable warnings, in node order
    """
    warnings: List[str] = []

    for node in nodes.values():
        if node.edges is not None:
            connected = next_map.get(node.id, [])
            for branch, target in node.edges.items():
                if not target:
                    continue
                if target not in nodes:
                    warnings.append(
                        f"Node '{node.id}' ({node.kind}) routes '{branch}' to unknown node '{target}'"
                    )
                elif target not in connected:
                    warnings.append(
                        f"Node '{node.id}' ({node.kind}) routes '{branch}' to '{target}' "
                        f"but the board has no connection {node.id} -> {target}"
                    )

        if node.kind == "switch":
            warnings.extend(_switch_key_drift(node))

        if node.kind == "merge":
            sources = [str(s) for s in node.cfg.get("sources") or []]
            if sorted(set(sources)) != sorted(set(node.prev)):
                warnings.append(
                    f"Merge node '{node.id}' sources {sources} differ from incoming connections {node.prev}"
                )

    return warnings


# ==============================================================================
# Entry point
# ==============================================================================

def compile_board(board: Union[Board, Dict[str, Any]], name: str = "Untitled") -> ExecWorkflow:
    """
    Compile a board into a runnable workflow.

    Args:
        board: Board model or board JSON
        name: Workflow name

    Returns:
        ExecWorkflow with a fresh random id
    """
    if not isinstance(board, Board):
        board = Board.model_validate(board)

    next_map, prev_map = build_adjacency(board)

    nodes: Dict[str, ExecNode] = {}
    for node in board.nodes:
        if node.id == START_NODE_ID:
            continue
        nodes[node.id] = compile_node(node, next_map, prev_map)

    warnings = find_drift(nodes, next_map)
    for warning in warnings:
        logger.warning(warning)

    workflow = ExecWorkflow(
        name=name,
        root=_first(next_map.get(START_NODE_ID)) or "",
        nodes=nodes,
        warnings=warnings,
    )
    logger.info(f"Compiled board '{name}' into {len(nodes)} nodes (root={workflow.root!r})")
    return workflow


__all__ = [
    "TRIGGER_KINDS",
    "build_adjacency",
    "case_key",
    "compile_board",
    "compile_node",
    "find_drift",
]
