from __future__ import annotations
from typing import Any, List, Optional


class HyperflowError(Exception):
    """Base class for every failure raised by the engine."""


class GraphValidationError(HyperflowError):
    """Graph data does not match the graph schema."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


class GraphReferenceError(HyperflowError):
    def __init__(self, problems: List[str]):
        super().__init__("Graph has dangling references: " + "; ".join(problems))
        self.problems = problems


class UnknownNodeTypeError(HyperflowError):
    def __init__(self, node_type: str, node_id: Optional[str] = None):
        msg = f"No executor found for node type: {node_type}"
        if node_id:
            msg += f" (node '{node_id}')"
        super().__init__(msg)
        self.node_type = node_type
        self.node_id = node_id


class NodeConfigError(HyperflowError):
    def __init__(self, node_id: str, node_type: str, detail: str):
        super().__init__(f"Invalid config for node '{node_id}' ({node_type}): {detail}")
        self.node_id = node_id
        self.node_type = node_type


class GraphCycleError(HyperflowError):
    pass


class CompositeDepthError(HyperflowError):
    def __init__(self, depth: int, max_depth: int):
        super().__init__(f"Composite nesting depth {depth} exceeds the limit of {max_depth}")
        self.depth = depth
        self.max_depth = max_depth
