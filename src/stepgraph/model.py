# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .states import StateAttributes

CONDITION_DONE = "DONE"
CONDITION_ANY = "ANY"

# style classes shared by nodes and edges
STANDARD = "STANDARD"
SELECTION = "SELECTION"  # the clicked node itself
SELECTED = "SELECTED"    # neighbours of the clicked node, and the edges touching it
HIDDEN = "HIDDEN"

STYLE_CLASSES = (STANDARD, SELECTION, SELECTED, HIDDEN)

MARKER_ARROW = "vee"
MARKER_OPEN = "undirected"
WAIT_LABEL = "WAIT"


@dataclass(frozen=True)
class Dependency:
    """A parsed dependency reference: `target` or `target:CONDITION`."""
    raw: str
    target: str
    condition: str = CONDITION_DONE

    @property
    def is_any(self) -> bool:
        return self.condition == CONDITION_ANY

    @property
    def states(self) -> Tuple[str, ...]:
        # "DONE,PRUNE" -> ("DONE", "PRUNE"); informational only
        return tuple(s for s in self.condition.split(",") if s)


def parse_dependency(ref: str) -> Dependency:
    """
    Split a reference on its first ':'.

    Never fails: whether the target exists is the validator's business.
    """
    target, sep, condition = ref.partition(":")
    if not sep:
        return Dependency(raw=ref, target=target)
    return Dependency(raw=ref, target=target, condition=condition)


@dataclass(frozen=True)
class Step:
    """Immutable snapshot of one workflow step, as fetched from the task/template."""
    name: str
    state: Optional[str] = None
    description: str = ""
    dependencies: Tuple[str, ...] = ()

    @property
    def parsed_dependencies(self) -> List[Dependency]:
        return [parse_dependency(d) for d in self.dependencies]

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any] | None) -> Step:
        data = data or {}
        return cls(
            name=name,
            state=data.get("state") or None,
            description=data.get("description") or "",
            dependencies=tuple(data.get("dependencies") or ()),
        )


StepMap = Mapping[str, Step]
RawStepMap = Mapping[str, Union[Step, Mapping[str, Any], None]]


def as_step_map(steps: RawStepMap) -> Dict[str, Step]:
    """
    Normalise caller input to name -> Step, keeping the caller's order.

    Accepts Step values or raw dicts ({state?, description?, dependencies?}).
    """
    out: Dict[str, Step] = {}
    for name, data in steps.items():
        if isinstance(data, Step):
            out[name] = data if data.name == name else Step(
                name=name,
                state=data.state,
                description=data.description,
                dependencies=data.dependencies,
            )
        else:
            out[name] = Step.from_dict(name, data)
    return out


@dataclass(frozen=True)
class Node:
    id: str
    label: str
    state: Optional[str]
    attributes: StateAttributes
    style_class: str = STANDARD
    display_label: str = ""
    tooltip: str = ""


@dataclass(frozen=True)
class Edge:
    """
    source = the step depended upon, target = the dependent step.
    """
    source: str
    target: str
    condition: str = CONDITION_DONE
    style_class: str = STANDARD
    dependency_state: Optional[str] = None

    @property
    def is_any(self) -> bool:
        return self.condition == CONDITION_ANY

    @property
    def label(self) -> str:
        if self.is_any and self.style_class != HIDDEN:
            return WAIT_LABEL
        return ""

    @property
    def marker(self) -> str:
        if self.is_any and self.style_class != HIDDEN:
            return MARKER_OPEN
        return MARKER_ARROW

    @property
    def css_classes(self) -> str:
        parts = [self.style_class, self.condition, self.dependency_state or ""]
        return " ".join(p for p in parts if p)

    def touches(self, name: str) -> bool:
        return self.source == name or self.target == name


@dataclass(frozen=True)
class Graph:
    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    selected: Optional[str] = None

    def node(self, node_id: str) -> Optional[Node]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def node_classes(self) -> Dict[str, str]:
        return {n.id: n.style_class for n in self.nodes}

    def edge_classes(self) -> Dict[Tuple[str, str], str]:
        # duplicate (source, target) pairs collapse here; use .edges for those
        return {(e.source, e.target): e.style_class for e in self.edges}

    def neighbours(self, node_id: str) -> List[str]:
        """Immediate dependencies and dependents, in edge order, no repeats."""
        seen: List[str] = []
        for e in self.edges:
            other = None
            if e.source == node_id:
                other = e.target
            elif e.target == node_id:
                other = e.source
            if other is not None and other not in seen:
                seen.append(other)
        return seen


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error_message: str = ""

    def __bool__(self) -> bool:
        return self.valid


@dataclass
class StructuralError(Exception):
    """
    A step map that cannot be turned into a graph.

    kind: "empty" | "missing_dependency" | "cycle" | "duplicate_dependency"
    """
    kind: str
    message: str
    step: str | None = None
    target: str | None = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message
