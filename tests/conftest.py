from typing import Any, Dict, List, Optional

import pytest

from hyperflow.ir import Edge, Graph, Node
from hyperflow.settings import RunSettings


def port(pid: str, label: str = "Port", type: str = "json") -> Dict[str, Any]:
    return {"id": pid, "label": label, "type": type}


def make_node(nid: str, type: str, config: Optional[Dict[str, Any]] = None,
              inputs: List[str] = (), outputs: List[str] = (), label: Optional[str] = None) -> Node:
    data: Dict[str, Any] = {"label": label or nid}
    if config is not None:
        data["config"] = config
    return Node(
        id=nid,
        type=type,
        position={"x": 0, "y": 0},
        data=data,
        inputs=[port(p, "In") for p in inputs],
        outputs=[port(p, "Out") for p in outputs],
    )


def make_edge(eid: str, source: str, source_handle: str, target: str, target_handle: str) -> Edge:
    return Edge(id=eid, source=source, sourceHandle=source_handle, target=target, targetHandle=target_handle)


@pytest.fixture
def settings() -> RunSettings:
    return RunSettings(processor_delay=0)


@pytest.fixture
def lines() -> List[str]:
    return []


@pytest.fixture
def echo_graph() -> Graph:
    return Graph(
        id="graph-1",
        nodes=[
            make_node("node-1", "input", {"value": "hyperflow is alive"}, outputs=["p1"], label="Start"),
            make_node("node-2", "processor", inputs=["p2"], outputs=["p3"], label="UpperCasifier"),
        ],
        edges=[make_edge("edge-1", "node-1", "p1", "node-2", "p2")],
    )


@pytest.fixture
def etl_subgraph() -> Dict[str, Any]:
    return {
        "id": "sub-c1",
        "nodes": [
            {"id": "s1", "type": "csvInput", "position": {"x": 0, "y": 0},
             "data": {"label": "CSV", "config": {"value": "a,b\n1,2"}},
             "inputs": [], "outputs": [port("so1", "Out")]},
            {"id": "s2", "type": "map", "position": {"x": 200, "y": 0}, "data": {"label": "Upper"},
             "inputs": [port("si1", "In")], "outputs": [port("so2", "Out")]},
            {"id": "s3", "type": "sinkConsole", "position": {"x": 400, "y": 0}, "data": {"label": "Sink"},
             "inputs": [port("si2", "In")], "outputs": []},
        ],
        "edges": [
            {"id": "se1", "source": "s1", "sourceHandle": "so1", "target": "s2", "targetHandle": "si1"},
            {"id": "se2", "source": "s2", "sourceHandle": "so2", "target": "s3", "targetHandle": "si2"},
        ],
    }
