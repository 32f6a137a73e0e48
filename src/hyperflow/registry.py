from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from .errors import UnknownNodeTypeError
from .ir import Graph, Node

if TYPE_CHECKING:
    from .runner import FlowRunner

Bag = Dict[str, Any]
LogFn = Callable[[str], None]


@dataclass
class ExecutionContext:
    """What an executor sees for one node run."""

    graph: Graph
    node_id: str
    inputs: Bag
    log: LogFn
    runner: Optional["FlowRunner"] = None
    depth: int = 0

    @property
    def node(self) -> Optional[Node]:
        return self.graph.find_node(self.node_id)

    def config(self, model: Type[BaseModel]) -> Any:
        node = self.node
        if node is None:
            return model.model_validate({})
        return node.config_as(model)

    def primary_input(self, default: Any = None) -> Any:
        # the "input" key, or the single value of a one-entry bag wired through a named port
        if "input" in self.inputs:
            return self.inputs["input"]
        if len(self.inputs) == 1:
            return next(iter(self.inputs.values()))
        return default


NodeExecutor = Callable[[ExecutionContext], Awaitable[Bag]]


@dataclass
class Registration:
    node_type: str
    executor: NodeExecutor
    config_model: Optional[Type[BaseModel]] = None
    description: str = ""


@dataclass
class NodeRegistry:
    """Maps a node's ``type`` to its async executor.

    Registries are plain objects handed to the runner; new types are added with
    :meth:`register` and never require touching the dispatcher.
    """

    _entries: Dict[str, Registration] = field(default_factory=dict)

    def register(self, node_type: str, config_model: Optional[Type[BaseModel]] = None,
                 description: str = "") -> Callable[[NodeExecutor], NodeExecutor]:
        def decorator(fn: NodeExecutor) -> NodeExecutor:
            self.add(node_type, fn, config_model=config_model,
                     description=description or (fn.__doc__ or "").strip().split("\n")[0])
            return fn
        return decorator

    def add(self, node_type: str, executor: NodeExecutor,
            config_model: Optional[Type[BaseModel]] = None, description: str = ""):
        self._entries[node_type] = Registration(node_type, executor, config_model, description)

    def get(self, node_type: str, node_id: Optional[str] = None) -> NodeExecutor:
        entry = self._entries.get(node_type)
        if entry is None:
            raise UnknownNodeTypeError(node_type, node_id)
        return entry.executor

    def registration(self, node_type: str) -> Registration:
        entry = self._entries.get(node_type)
        if entry is None:
            raise UnknownNodeTypeError(node_type)
        return entry

    def types(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, node_type: str) -> bool:
        return node_type in self._entries
