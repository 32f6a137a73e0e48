from __future__ import annotations
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import networkx as nx

from .errors import CompositeDepthError, GraphCycleError, GraphReferenceError
from .executors import default_registry
from .ir import Graph, Node, load_graph, parse_graph
from .registry import Bag, ExecutionContext, LogFn, NodeRegistry
from .settings import RunSettings
from .validator import to_digraph, validate_references

logger = logging.getLogger(__name__)

State = Dict[str, Bag]


def _pick(bag: Bag, handle: Optional[str]) -> Any:
    # named key when the source bag has it, else the first key
    if handle and handle in bag:
        return bag[handle]
    if bag:
        return next(iter(bag.values()))
    return None


def _initial_value(node: Node) -> str:
    value = (node.data.config or {}).get("value")
    return value if isinstance(value, str) else ""


class FlowRunner:
    """Executes a graph one node at a time, awaiting each executor in turn.

    In the default ``wave`` mode every ``input`` node runs (in listed order),
    followed by each node one edge away from it (in edge order). Nodes further
    downstream are not reached. ``topological`` mode runs every node once in
    dependency order instead; it is opt-in because it changes results.
    """

    def __init__(self, registry: Optional[NodeRegistry] = None,
                 settings: Optional[RunSettings] = None, log: Optional[LogFn] = None):
        self.registry = registry if registry is not None else default_registry()
        self.settings = settings or RunSettings()
        self._custom_log = log
        self.log: LogFn = log or logger.info

    def _emit(self, msg: str, level: int = logging.INFO):
        if self._custom_log is not None:
            self._custom_log(msg)
        else:
            logger.log(level, msg)

    async def execute_node(self, node: Node, inputs: Bag, graph: Optional[Graph] = None,
                           depth: int = 0) -> Bag:
        if graph is None:
            graph = Graph(id="temp", nodes=[node], edges=[])
        ctx = ExecutionContext(graph=graph, node_id=node.id, inputs=dict(inputs),
                               log=self.log, runner=self, depth=depth)
        try:
            executor = self.registry.get(node.type, node.id)
            return await executor(ctx)
        except Exception as e:
            self._emit(f"ERROR in Node {node.id}: {e!r}", logging.ERROR)
            raise

    async def run(self, graph: Any, depth: int = 0) -> State:
        graph = parse_graph(graph)
        if depth > self.settings.max_depth:
            raise CompositeDepthError(depth, self.settings.max_depth)

        self._emit(f"Starting Hyperflow execution of graph '{graph.id}' ({self.settings.mode})")
        problems = validate_references(graph)
        if problems:
            self._emit(f"Graph reference validation errors in '{graph.id}': {problems}", logging.WARNING)
            if self.settings.strict_references:
                raise GraphReferenceError(problems)

        if self.settings.mode == "topological":
            state = await self._run_topological(graph, depth)
        else:
            state = await self._run_wave(graph, depth)
        self._emit(f"Flow '{graph.id}' complete.")
        return state

    async def _run_node(self, node: Node, inputs: Bag, graph: Graph, depth: int, state: State):
        result = await self.execute_node(node, inputs, graph, depth)
        state[node.id] = result
        self._emit(f"[{node.label}] Emitted: {json.dumps(result, default=str)}")
        return result

    async def _run_wave(self, graph: Graph, depth: int) -> State:
        state: State = {}
        sources = [n for n in graph.nodes if n.type == "input"]
        for source in sources:
            result = await self._run_node(source, {"value": _initial_value(source)}, graph, depth, state)
            for edge in graph.outgoing(source.id):
                target = graph.find_node(edge.target)
                if target is None:
                    continue
                inputs = {edge.targetHandle or "input": _pick(result, edge.sourceHandle)}
                await self._run_node(target, inputs, graph, depth, state)
        return state

    def topological_order(self, graph: Graph) -> List[str]:
        position = {nid: i for i, nid in enumerate(graph.node_map())}
        try:
            return list(nx.lexicographical_topological_sort(to_digraph(graph), key=position.__getitem__))
        except nx.NetworkXUnfeasible as e:
            raise GraphCycleError(f"Graph '{graph.id}' contains a cycle; topological run impossible") from e

    async def _run_topological(self, graph: Graph, depth: int) -> State:
        state: State = {}
        node_map = graph.node_map()
        for nid in self.topological_order(graph):
            node = node_map[nid]
            if node.type == "input":
                inputs: Bag = {"value": _initial_value(node)}
            else:
                inputs = {}
                for e in graph.incoming(nid):
                    if e.source in state:
                        inputs[e.targetHandle or "input"] = _pick(state[e.source], e.sourceHandle)
            await self._run_node(node, inputs, graph, depth, state)
        return state


async def run_flow(graph: Any, *, registry: Optional[NodeRegistry] = None,
                   settings: Optional[RunSettings] = None, log: Optional[LogFn] = None) -> State:
    return await FlowRunner(registry, settings, log).run(graph)


async def execute_node(node: Node, inputs: Bag, log: Optional[LogFn] = None,
                       graph: Optional[Graph] = None, registry: Optional[NodeRegistry] = None,
                       settings: Optional[RunSettings] = None) -> Bag:
    return await FlowRunner(registry, settings, log).execute_node(node, inputs, graph)


def run_graph(file: Path, settings: Optional[RunSettings] = None, log: Optional[LogFn] = None) -> State:
    """Load a graph file and run it to completion."""
    g = load_graph(file)
    return asyncio.run(run_flow(g, settings=settings, log=log))
