"""Built-in node kinds."""

from .code import CodeNode
from .filter import FilterNode
from .generate_video import GenerateVideoNode
from .http_request import HttpRequestNode
from .merge import MergeNode
from .switch import SwitchNode
from .wait import WaitNode

CORE_NODES = [
    HttpRequestNode,
    FilterNode,
    CodeNode,
    SwitchNode,
    WaitNode,
    MergeNode,
    GenerateVideoNode,
]

__all__ = [
    "CORE_NODES",
    "CodeNode",
    "FilterNode",
    "GenerateVideoNode",
    "HttpRequestNode",
    "MergeNode",
    "SwitchNode",
    "WaitNode",
]
