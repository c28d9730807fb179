# dag.py
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .model import (
    Edge,
    Graph,
    Node,
    RawStepMap,
    StructuralError,
    ValidationResult,
    as_step_map,
)
from . import settings
from .states import StateRegistry
from .styling import humanize_label, node_tooltip

EMPTY_MESSAGE = "The steps list is empty"


@dataclass(frozen=True)
class ValidateConfig:
    """
    Optional checks on top of the referential one.

    Both are off by default: a step map with a cycle or a repeated dependency
    still validates unless the caller asks for more.
    """
    # read per instance so STEPGRAPH_DETECT_CYCLES (via settings) is honoured
    detect_cycles: bool = field(default_factory=lambda: settings.DETECT_CYCLES)
    reject_duplicate_dependencies: bool = False


def build_adjacency(steps: RawStepMap) -> Tuple[Dict[str, Set[str]], Dict[str, int]]:
    """
    dependency -> dependents, plus in-degree per step.

    Requires every dependency target to exist (validate first).
    """
    step_map = as_step_map(steps)
    adj: Dict[str, Set[str]] = {n: set() for n in step_map}
    indeg: Dict[str, int] = {n: 0 for n in step_map}

    for step in step_map.values():
        for dep in step.parsed_dependencies:
            if dep.target not in adj:
                raise StructuralError(
                    kind="missing_dependency",
                    message=_missing_message(step.name, dep.target),
                    step=step.name,
                    target=dep.target,
                )
            # edge dep -> step (several references to one target count once)
            if step.name not in adj[dep.target]:
                adj[dep.target].add(step.name)
                indeg[step.name] += 1

    return adj, indeg


def topo_levels(adj: Dict[str, Set[str]], indeg: Dict[str, int]) -> List[List[str]]:
    """
    Group steps into levels: everything in a level only depends on earlier levels.
    Raises StructuralError(kind="cycle") if some steps can never be reached.

    Validation calls this for the cycle check alone; the levels are there for
    callers that want an execution order.
    """
    indeg = dict(indeg)  # copy (we mutate it)
    q = deque(sorted([n for n, d in indeg.items() if d == 0]))

    levels: List[List[str]] = []
    processed = 0

    while q:
        level_size = len(q)
        level: List[str] = []

        for _ in range(level_size):
            node = q.popleft()
            level.append(node)
            processed += 1

            for child in sorted(adj.get(node, set())):
                indeg[child] -= 1
                if indeg[child] == 0:
                    q.append(child)

        levels.append(level)

    if processed != len(indeg):
        remaining = sorted([n for n, d in indeg.items() if d > 0])
        raise StructuralError(
            kind="cycle",
            message=f"Circular dependency detected between steps: {remaining}",
            details={"steps": remaining},
        )

    return levels


def _missing_message(step: str, target: str) -> str:
    return f"Step '{step}' has a dependency on '{target}' which does not exist"


def find_structural_error(
    steps: RawStepMap, config: Optional[ValidateConfig] = None
) -> Optional[StructuralError]:
    """First problem found in the step map, or None."""
    cfg = config or ValidateConfig()
    step_map = as_step_map(steps)

    if not step_map:
        return StructuralError(kind="empty", message=EMPTY_MESSAGE)

    for step in step_map.values():
        seen: Set[str] = set()
        for dep in step.parsed_dependencies:
            if dep.target not in step_map:
                return StructuralError(
                    kind="missing_dependency",
                    message=_missing_message(step.name, dep.target),
                    step=step.name,
                    target=dep.target,
                )
            if cfg.reject_duplicate_dependencies and dep.target in seen:
                return StructuralError(
                    kind="duplicate_dependency",
                    message=f"Step '{step.name}' declares more than one dependency on '{dep.target}'",
                    step=step.name,
                    target=dep.target,
                )
            seen.add(dep.target)

    if cfg.detect_cycles:
        # only the cycle check of topo_levels matters here; the levels are dropped
        adj, indeg = build_adjacency(step_map)
        try:
            topo_levels(adj, indeg)
        except StructuralError as e:
            return e

    return None


def validate_steps(
    steps: RawStepMap, config: Optional[ValidateConfig] = None
) -> ValidationResult:
    """
    Check that the step map can be drawn. Pure; never raises for bad input.

    Only referential integrity is checked by default; dependency cycles pass
    unless `config.detect_cycles` is set.
    """
    err = find_structural_error(steps, config)
    if err is None:
        return ValidationResult(valid=True)
    return ValidationResult(valid=False, error_message=err.message)


def build_graph(
    steps: RawStepMap,
    registry: Optional[StateRegistry] = None,
    config: Optional[ValidateConfig] = None,
) -> Graph:
    """
    Turn a valid step map into an unselected graph.

    Nodes follow the map order; edges follow steps in map order, then each
    step's dependencies in list order. Invalid input raises StructuralError;
    no partial graph is ever returned.
    """
    registry = registry if registry is not None else StateRegistry()
    step_map = as_step_map(steps)

    err = find_structural_error(step_map, config)
    if err is not None:
        raise err

    nodes: List[Node] = []
    edges: List[Edge] = []

    for name, step in step_map.items():
        nodes.append(
            Node(
                id=name,
                label=name,
                state=step.state,
                attributes=registry.resolve(step.state),
                display_label=humanize_label(name),
                tooltip=node_tooltip(step),
            )
        )

    for name, step in step_map.items():
        for dep in step.parsed_dependencies:
            edges.append(
                Edge(
                    source=dep.target,
                    target=name,
                    condition=dep.condition,
                    dependency_state=step_map[dep.target].state,
                )
            )

    return Graph(nodes=tuple(nodes), edges=tuple(edges))
