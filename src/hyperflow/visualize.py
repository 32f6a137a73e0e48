from typing import List

import networkx as nx

from .ir import Graph
from .validator import to_digraph


def ascii_plan(g: Graph) -> str:
    nxg = to_digraph(g)
    for e in g.edges:
        if nxg.has_edge(e.source, e.target):
            nxg.edges[e.source, e.target]["label"] = f"{e.sourceHandle}->{e.targetHandle}"

    try:
        order: List[str] = list(nx.topological_sort(nxg))
        lines = ["# ASCII Plan (topological order)"]
    except nx.NetworkXUnfeasible:
        order = list(nxg.nodes)
        lines = ["# ASCII Plan (listed order, graph has a cycle)"]

    node_map = g.node_map()
    for i, nid in enumerate(order, 1):
        node = node_map[nid]
        lines.append(f"{i:02d}. {node.id} [{node.type}] {node.label}")
        for succ in nxg.successors(nid):
            elabel = nxg.edges[nid, succ]["label"]
            lines.append(f"    └─▶ {succ}  ({elabel})")
    return "\n".join(lines)
