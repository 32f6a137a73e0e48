from __future__ import annotations
import asyncio
import json
import math
import re
from typing import Any, Dict, List

from .configs import (BranchConfig, CompositeConfig, ConditionConfig, CsvInputConfig,
                      InputConfig, MapConfig, MergeConfig, ProcessorConfig)
from .registry import Bag, ExecutionContext, NodeRegistry
from .routing import normalize_bag, route_branch, route_condition, route_merge, truthy

DEFAULT_INPUT_VALUE = "Hello Hyperflow"
DEFAULT_PROCESSOR_DELAY = 0.1

_line_re = re.compile(r"\r?\n")


def _dumps(bag: Bag) -> str:
    return json.dumps(bag, default=str)


async def input_node(ctx: ExecutionContext) -> Bag:
    """Source node: emits the provided or configured value."""
    cfg = ctx.config(InputConfig)
    value = ctx.inputs.get("value")
    if not truthy(value):
        value = cfg.value if truthy(cfg.value) else DEFAULT_INPUT_VALUE
    return {"output": value}


async def processor_node(ctx: ExecutionContext) -> Bag:
    """Uppercases string input after a simulated delay."""
    cfg = ctx.config(ProcessorConfig)
    value = ctx.primary_input()
    if not truthy(value):
        value = ""
    ctx.log(f"Processing: {value}")

    delay = cfg.delay
    if delay is None:
        delay = ctx.runner.settings.processor_delay if ctx.runner else DEFAULT_PROCESSOR_DELAY
    if delay:
        await asyncio.sleep(delay)

    if isinstance(value, str):
        return {"result": value.upper()}
    return {"result": value}


async def output_node(ctx: ExecutionContext) -> Bag:
    """Sink: logs everything it receives."""
    ctx.log(f"OUTPUT RECEIVED: {_dumps(ctx.inputs)}")
    return {}


def split_csv(raw: Any) -> List[List[str]]:
    # no quoting or escaping
    text = "" if raw is None else str(raw)
    return [line.split(",") for line in _line_re.split(text.strip())]


async def csv_input_node(ctx: ExecutionContext) -> Bag:
    """Source of rows parsed from the configured CSV literal."""
    cfg = ctx.config(CsvInputConfig)
    return {"output": split_csv(cfg.value)}


def stringify(value: Any) -> str:
    # same text a browser gives for String(value); null and missing cells become ""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def _cell(value: Any, mode: str) -> str:
    s = stringify(value)
    return s.upper() if mode == "uppercase" else s


async def map_node(ctx: ExecutionContext) -> Bag:
    """Applies the configured mode to every cell, or to a scalar input."""
    cfg = ctx.config(MapConfig)
    value = ctx.primary_input()
    if isinstance(value, list):
        rows = [row if isinstance(row, list) else [row] for row in value]
        return {"result": [[_cell(c, cfg.mode) for c in row] for row in rows]}
    return {"result": _cell(value, cfg.mode)}


async def sink_console_node(ctx: ExecutionContext) -> Bag:
    """Sink: logs everything it receives."""
    ctx.log(f"SINK: {_dumps(ctx.inputs)}")
    return {}


async def branch_node(ctx: ExecutionContext) -> Bag:
    """Fans a sequence out into one {item} bag per element, keyed by index."""
    cfg = ctx.config(BranchConfig)
    routed = route_branch(ctx.inputs, cfg.key)
    # every routed key becomes an index-keyed map: {"branches": {"0": {...}, "1": {...}}}
    normalized: Dict[str, Bag] = {
        k: {str(i): normalize_bag(b) for i, b in enumerate(bags)} for k, bags in routed.items()
    }
    return {"branches": normalized}


async def merge_node(ctx: ExecutionContext) -> Bag:
    """Folds the configured input keys into one bag."""
    cfg = ctx.config(MergeConfig)
    keys = cfg.inputs if cfg.inputs is not None else list(ctx.inputs)
    bags = [{k: ctx.inputs[k]} for k in keys if k in ctx.inputs]
    return route_merge(bags, cfg.strategy)


async def condition_node(ctx: ExecutionContext) -> Bag:
    """Routes the whole input bag to the truthy or falsy bucket."""
    cfg = ctx.config(ConditionConfig)
    routed = route_condition(ctx.inputs, cfg.predicate_key, cfg.truthy_out, cfg.falsy_out)
    return {k: normalize_bag(v) for k, v in routed.items()}


async def composite_node(ctx: ExecutionContext) -> Bag:
    """Runs the configured subgraph as an isolated flow."""
    cfg = ctx.config(CompositeConfig)
    if cfg.subgraph is None:
        return {}

    runner = ctx.runner
    if runner is None:
        from .runner import FlowRunner
        runner = FlowRunner(log=ctx.log)
    state = await runner.run(cfg.subgraph, depth=ctx.depth + 1)
    result: Dict[str, Bag] = {node_id: normalize_bag(bag) for node_id, bag in state.items()}
    return {"result": result}


def register_builtins(registry: NodeRegistry) -> NodeRegistry:
    registry.register("input", InputConfig)(input_node)
    registry.register("processor", ProcessorConfig)(processor_node)
    registry.register("output")(output_node)
    registry.register("csvInput", CsvInputConfig)(csv_input_node)
    registry.register("map", MapConfig)(map_node)
    registry.register("sinkConsole")(sink_console_node)
    registry.register("branch", BranchConfig)(branch_node)
    registry.register("merge", MergeConfig)(merge_node)
    registry.register("condition", ConditionConfig)(condition_node)
    registry.register("composite", CompositeConfig)(composite_node)
    return registry


def default_registry() -> NodeRegistry:
    return register_builtins(NodeRegistry())
