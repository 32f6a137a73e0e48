from pathlib import Path
from typing import Dict, List, Tuple

import networkx as nx

from .ir import Graph, Node, load_graph


def validate_references(g: Graph) -> List[str]:
    """Report dangling edges and unknown port ids. Read-only and never raises."""
    problems: List[str] = []
    node_map: Dict[str, Node] = g.node_map()

    for e in g.edges:
        src = node_map.get(e.source)
        tgt = node_map.get(e.target)
        if src is None:
            problems.append(f"Edge {e.id}: source node '{e.source}' not found")
        if tgt is None:
            problems.append(f"Edge {e.id}: target node '{e.target}' not found")
        if src is not None and e.sourceHandle not in src.output_ids():
            problems.append(f"Edge {e.id}: sourceHandle '{e.sourceHandle}' not found in node '{src.id}' outputs")
        if tgt is not None and e.targetHandle not in tgt.input_ids():
            problems.append(f"Edge {e.id}: targetHandle '{e.targetHandle}' not found in node '{tgt.id}' inputs")
    return problems


def to_digraph(g: Graph) -> nx.DiGraph:
    """Node-level digraph; edges whose endpoints are missing are left out."""
    nxg = nx.DiGraph()
    nxg.add_nodes_from(g.node_map())
    for e in g.edges:
        if e.source in nxg and e.target in nxg:
            nxg.add_edge(e.source, e.target)
    return nxg


def validate_graph(g: Graph) -> Tuple[bool, List[str]]:
    messages: List[str] = []
    ok = True

    # 1) Unique node ids
    node_ids = [n.id for n in g.nodes]
    dupes = sorted({nid for nid in node_ids if node_ids.count(nid) > 1})
    if dupes:
        ok = False
        messages.append(f"ERR: Duplicate node IDs detected: {', '.join(dupes)}.")
    else:
        messages.append("OK: Node IDs are unique.")

    # 2) Edge endpoints and handles
    problems = validate_references(g)
    if problems:
        ok = False
        messages.extend(f"ERR: {p}" for p in problems)
    else:
        messages.append("OK: All edge endpoints correspond to declared inputs/outputs.")

    # 3) Acyclic check, only matters for topological runs
    try:
        list(nx.topological_sort(to_digraph(g)))
        messages.append("OK: Graph is acyclic.")
    except nx.NetworkXUnfeasible:
        ok = False
        messages.append("ERR: Cycle detected in the graph.")

    return ok, messages


def validate_graph_from_file(path: Path) -> Tuple[bool, List[str]]:
    return validate_graph(load_graph(path))
