from __future__ import annotations
import math
from typing import Any, Dict, Iterable, List, Literal, Optional

Bag = Dict[str, Any]


def truthy(value: Any) -> bool:
    """Truthiness where only 0, NaN, "", None and False are false.

    Empty lists and mappings count as true, unlike Python's ``bool``.
    """
    if value is None or value is False:
        return False
    if value is True:
        return True
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def normalize_bag(bag: Optional[Bag]) -> Bag:
    # missing bags become {}; values pass through (None already stands for null)
    return dict(bag) if bag else {}


def route_branch(bag: Bag, key: str) -> Dict[str, List[Bag]]:
    value = bag.get(key)
    if isinstance(value, (list, tuple)):
        return {"branches": [{"item": v} for v in value]}
    return {"branches": [{"item": value}]}


def route_merge(bags: Iterable[Bag], strategy: Literal["first", "last"] = "last") -> Bag:
    out: Bag = {}
    for bag in bags:
        for k, v in bag.items():
            if strategy == "first" and k in out:
                continue
            out[k] = v
    return out


def route_condition(bag: Bag, predicate_key: str, truthy_out: str, falsy_out: str) -> Dict[str, Bag]:
    chosen = truthy_out if truthy(bag.get(predicate_key)) else falsy_out
    out: Dict[str, Bag] = {truthy_out: {}, falsy_out: {}}
    out[chosen] = dict(bag)
    return out
