from __future__ import annotations
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .ir import Graph


class NodeConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class InputConfig(NodeConfig):
    value: Any = None


class ProcessorConfig(NodeConfig):
    # seconds of simulated work; None falls back to RunSettings.processor_delay
    delay: Optional[float] = Field(None, ge=0)


class CsvInputConfig(NodeConfig):
    # CSV literal, stringified before splitting
    value: Any = ""


class MapConfig(NodeConfig):
    mode: str = "uppercase"


class BranchConfig(NodeConfig):
    key: str = "input"


class MergeConfig(NodeConfig):
    strategy: Literal["first", "last"] = "last"
    inputs: Optional[List[str]] = None


class ConditionConfig(NodeConfig):
    predicate_key: str = Field("ok", alias="predicateKey")
    truthy_out: str = Field("true", alias="truthyOut")
    falsy_out: str = Field("false", alias="falsyOut")


class CompositeConfig(NodeConfig):
    # nested graph owned by value
    subgraph: Optional[Graph] = None
