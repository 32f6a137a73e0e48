from __future__ import annotations
import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import GraphValidationError, NodeConfigError

C = TypeVar("C", bound=BaseModel)


class PortType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"
    FLOW = "flow"


class Port(BaseModel):
    id: str
    label: str = Field(min_length=1)
    type: PortType


class Position(BaseModel):
    # presentation only, the engine never reads it
    x: float
    y: float


class NodeData(BaseModel):
    label: str
    config: Optional[Dict[str, Any]] = None
    code: Optional[str] = None   # reserved for custom-logic nodes


class Node(BaseModel):
    id: str
    type: str
    position: Position
    data: NodeData
    inputs: List[Port]
    outputs: List[Port]

    @property
    def label(self) -> str:
        return self.data.label

    def input_ids(self) -> List[str]:
        return [p.id for p in self.inputs]

    def output_ids(self) -> List[str]:
        return [p.id for p in self.outputs]

    def config_as(self, model: Type[C]) -> C:
        """Validate this node's raw config bag into ``model``."""
        try:
            return model.model_validate(self.data.config or {})
        except ValidationError as e:
            raise NodeConfigError(self.id, self.type, str(e)) from e


class Edge(BaseModel):
    id: str
    source: str         # node id
    sourceHandle: str   # port id on source outputs
    target: str         # node id
    targetHandle: str   # port id on target inputs


class Graph(BaseModel):
    id: str
    nodes: List[Node]
    edges: List[Edge]

    def node_map(self) -> Dict[str, Node]:
        # first occurrence wins on duplicate ids
        out: Dict[str, Node] = {}
        for n in self.nodes:
            out.setdefault(n.id, n)
        return out

    def find_node(self, node_id: str) -> Optional[Node]:
        return next((n for n in self.nodes if n.id == node_id), None)

    def outgoing(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.source == node_id]

    def incoming(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.target == node_id]


def _describe(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def parse_graph(data: Any) -> Graph:
    """Validate an untrusted mapping as a Graph. Nothing partial is ever returned."""
    if isinstance(data, Graph):
        return data
    try:
        return Graph.model_validate(data)
    except ValidationError as e:
        raise GraphValidationError(f"Invalid graph: {_describe(e)}", e.errors()) from e


def parse_graph_json(text: str) -> Graph:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GraphValidationError(f"Invalid graph JSON: {e}") from e
    return parse_graph(data)


def load_graph(path: Path) -> Graph:
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise GraphValidationError(f"Could not read graph file '{path}': {e}") from e
    if path.suffix.lower() == ".json":
        return parse_graph_json(text)
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise GraphValidationError(f"Invalid graph YAML in '{path}': {e}") from e
    return parse_graph(data)


def save_graph(graph: Graph, path: Path):
    path = Path(path)
    data = graph.model_dump(mode="json", exclude_none=True)
    if path.suffix.lower() == ".json":
        path.write_text(json.dumps(data, indent=2))
    else:
        path.write_text(yaml.safe_dump(data, sort_keys=False))
