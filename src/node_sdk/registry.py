"""
Node Registry - Central registry for node kinds.

Kinds are registered by class. Plugin packs can contribute kinds through
the ``workflow_engine.nodes`` entry-point group:

    [project.entry-points."workflow_engine.nodes"]
    mypack = "mypack:register_nodes"

where ``register_nodes()`` returns a list of BaseNode subclasses.
"""

from __future__ import annotations

import logging
from importlib.metadata import entry_points
from typing import Any, Dict, Iterator, List, Optional, Type

from .basenode import BaseNode


logger = logging.getLogger(__name__)

NODE_ENTRY_POINT_GROUP = "workflow_engine.nodes"

# Kinds saved by older editor versions
LEGACY_ALIASES: Dict[str, str] = {
    "http-request": "http",
}


class NodeRegistry:
    """
    Maps node kinds to BaseNode subclasses.

    Usage:
        registry = NodeRegistry()
        registry.register_node(HttpRequestNode)

        node = registry.create_node("http")
        node = registry.create_node("http-request")  # legacy alias
    """

    def __init__(self, aliases: Optional[Dict[str, str]] = None):
        self._node_classes: Dict[str, Type[BaseNode]] = {}
        self._aliases: Dict[str, str] = dict(LEGACY_ALIASES if aliases is None else aliases)

    def register_node(self, node_class: Type[BaseNode], kind: Optional[str] = None) -> str:
        """Register a node class under its kind (or an explicit override)."""
        kind = kind or node_class.kind
        if kind in self._node_classes and self._node_classes[kind] is not node_class:
            logger.warning(f"Replacing node kind '{kind}': {self._node_classes[kind].__name__} -> {node_class.__name__}")
        self._node_classes[kind] = node_class
        logger.debug(f"Registered node kind: {kind}")
        return kind

    def register_alias(self, alias: str, kind: str) -> None:
        self._aliases[alias] = kind

    def resolve_kind(self, kind: str) -> str:
        """Map a legacy alias to its canonical kind."""
        return self._aliases.get(kind, kind)

    def discover_entry_points(self) -> int:
        """
        Register kinds contributed by installed packs.

        Returns:
            Number of node classes registered
        """
        count = 0
        for ep in entry_points(group=NODE_ENTRY_POINT_GROUP):
            try:
                node_classes = ep.load()()
            except Exception as e:
                logger.error(f"Failed to load node pack '{ep.name}': {e}")
                continue
            for node_class in node_classes:
                self.register_node(node_class)
                count += 1
            logger.info(f"Discovered node pack: {ep.name}")
        return count

    def get_node_class(self, kind: str) -> Optional[Type[BaseNode]]:
        return self._node_classes.get(self.resolve_kind(kind))

    def create_node(self, kind: str) -> Optional[BaseNode]:
        """
        Create a node instance.

        Returns:
            Node instance or None if the kind is unknown
        """
        node_class = self.get_node_class(kind)
        if node_class:
            return node_class()
        return None

    def list_kinds(self) -> List[str]:
        return list(self._node_classes.keys())

    def list_definitions(self) -> List[Dict[str, Any]]:
        """Palette definitions of every registered kind."""
        return [node_class.get_definition() for node_class in self._node_classes.values()]

    def __contains__(self, kind: str) -> bool:
        return self.resolve_kind(kind) in self._node_classes

    def __len__(self) -> int:
        return len(self._node_classes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._node_classes)


_default_registry: Optional[NodeRegistry] = None


def get_default_registry() -> NodeRegistry:
    """Get the registry with all built-in kinds (lazy initialized)."""
    global _default_registry
    if _default_registry is None:
        from .nodes import CORE_NODES

        registry = NodeRegistry()
        for node_class in CORE_NODES:
            registry.register_node(node_class)
        registry.discover_entry_points()
        _default_registry = registry
    return _default_registry


__all__ = [
    "LEGACY_ALIASES",
    "NODE_ENTRY_POINT_GROUP",
    "NodeRegistry",
    "get_default_registry",
]
