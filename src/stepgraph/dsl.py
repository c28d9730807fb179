# src/stepgraph/dsl.py
from __future__ import annotations

from typing import Dict, Optional

from .model import CONDITION_ANY, Step


# ---------------------------------------------------------------------
# Dependency helpers
# ---------------------------------------------------------------------

def after(target: str, condition: Optional[str] = None) -> str:
    """Dependency reference string: after("a") -> "a", after("a", "ANY") -> "a:ANY"."""
    if condition is None:
        return target
    return f"{target}:{condition}"


def after_any(target: str) -> str:
    return after(target, CONDITION_ANY)


# ---------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------

def step(
    name: str,
    *dependencies: str,  # allow: step("b", "a", after_any("c"))
    state: Optional[str] = None,
    description: str = "",
) -> Step:
    return Step(name=name, state=state, description=description, dependencies=tuple(dependencies))


def steps(*items: Step) -> Dict[str, Step]:
    """
    Step map in declaration order.

        steps(
            step("fetch"),
            step("build", "fetch"),
            step("notify", after_any("build")),
        )
    """
    out: Dict[str, Step] = {}
    for s in items:
        if s.name in out:
            raise ValueError(f"Duplicate step name: {s.name}")
        out[s.name] = s
    return out
