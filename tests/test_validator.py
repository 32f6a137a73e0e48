from hyperflow.ir import Graph
from hyperflow.validator import validate_graph, validate_references

from conftest import make_edge, make_node


def test_consistent_graph_has_no_problems(echo_graph):
    assert validate_references(echo_graph) == []


def test_missing_target_is_reported_by_edge_id(echo_graph):
    g = echo_graph.model_copy(update={"edges": echo_graph.edges + [make_edge("edge-x", "node-1", "p1", "ghost", "p2")]})
    problems = validate_references(g)
    assert problems == ["Edge edge-x: target node 'ghost' not found"]


def test_all_checks_run_for_each_edge():
    g = Graph(
        id="g",
        nodes=[make_node("a", "input", outputs=["out"]), make_node("b", "output", inputs=["in"])],
        edges=[
            make_edge("e1", "nowhere", "out", "b", "bad-in"),
            make_edge("e2", "a", "bad-out", "missing", "in"),
        ],
    )
    assert validate_references(g) == [
        "Edge e1: source node 'nowhere' not found",
        "Edge e1: targetHandle 'bad-in' not found in node 'b' inputs",
        "Edge e2: target node 'missing' not found",
        "Edge e2: sourceHandle 'bad-out' not found in node 'a' outputs",
    ]


def test_validate_references_does_not_mutate(echo_graph):
    before = echo_graph.model_dump()
    validate_references(echo_graph)
    assert echo_graph.model_dump() == before


def test_validate_graph_reports_cycles_and_duplicates():
    g = Graph(
        id="g",
        nodes=[
            make_node("a", "processor", inputs=["i"], outputs=["o"]),
            make_node("b", "processor", inputs=["i"], outputs=["o"]),
            make_node("b", "processor", inputs=["i"], outputs=["o"]),
        ],
        edges=[make_edge("e1", "a", "o", "b", "i"), make_edge("e2", "b", "o", "a", "i")],
    )
    ok, messages = validate_graph(g)
    assert not ok
    assert "ERR: Duplicate node IDs detected: b." in messages
    assert "ERR: Cycle detected in the graph." in messages


def test_validate_graph_ok(echo_graph):
    ok, messages = validate_graph(echo_graph)
    assert ok
    assert all(m.startswith("OK:") for m in messages)
