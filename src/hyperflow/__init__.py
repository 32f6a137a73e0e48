from .errors import (CompositeDepthError, GraphCycleError, GraphReferenceError, GraphValidationError,
                     HyperflowError, NodeConfigError, UnknownNodeTypeError)
from .executors import default_registry, register_builtins
from .ir import Edge, Graph, Node, NodeData, Port, PortType, Position, load_graph, parse_graph, parse_graph_json
from .registry import ExecutionContext, NodeRegistry
from .routing import route_branch, route_condition, route_merge
from .runner import FlowRunner, execute_node, run_flow
from .settings import RunSettings, load_settings
from .validator import validate_references

__version__ = "0.2.0"
