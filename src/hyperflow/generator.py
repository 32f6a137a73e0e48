from importlib.resources import files
from pathlib import Path
from typing import List

import yaml

from .ir import Graph, parse_graph, save_graph

TEMPLATES = ("echo", "etl", "composite")


def _load_template_yaml(name: str) -> str:
    pkg = files('hyperflow.templates')
    return (pkg / f"{name}.yaml").read_text()


def list_templates() -> List[str]:
    return list(TEMPLATES)


def generate_graph_from_template(name: str) -> Graph:
    name = name.lower()
    if name not in TEMPLATES:
        raise ValueError(f"Unknown template '{name}'. Use one of: {', '.join(TEMPLATES)}")
    return parse_graph(yaml.safe_load(_load_template_yaml(name)))


def save_graph_yaml(graph: Graph, path: Path):
    save_graph(graph, path)
