"""Edge and node presentation helpers for the renderer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .model import MARKER_ARROW, MARKER_OPEN, WAIT_LABEL, Dependency, Step
from .states import StateRegistry

ANY_EDGE_COLOR = "#ad0067"
TEMPLATE_EDGE_COLOR = "black"

# while a dependency sits in one of these, the arrow takes the dependent step's colour
PENDING_STATES = ("TO_RETRY", "RUNNING", "TODO", "EXPANDED", "CLIENT_ERROR")

_CAPS_RUN = re.compile(r"[A-Z]+")


@dataclass(frozen=True)
class EdgeStyle:
    color: str
    arrowhead: str
    label: str = ""
    dashed: bool = False


def humanize_label(name: str) -> str:
    """Put a space before every run of capitals: "buildImage" -> "build Image"."""
    return _CAPS_RUN.sub(lambda m: f" {m.group(0)}", name)


def node_tooltip(step: Step) -> str:
    header = f"{step.name} : {step.state}" if step.state else step.name
    if step.description:
        return f"{header}\n{step.description}"
    return header


def edge_style(
    dependency: Dependency,
    dependency_state: Optional[str],
    step_state: Optional[str],
    registry: StateRegistry,
    *,
    executed: bool = True,
) -> EdgeStyle:
    """
    Arrow colour/head/label for one dependency.

    executed=False is the template view: no state exists yet, so non-ANY
    conditions are drawn dashed and labelled with the condition itself.
    """
    if not executed:
        if dependency.is_any:
            return EdgeStyle(color=TEMPLATE_EDGE_COLOR, arrowhead=MARKER_ARROW)
        return EdgeStyle(
            color=TEMPLATE_EDGE_COLOR,
            arrowhead=MARKER_ARROW,
            label=dependency.condition,
            dashed=True,
        )

    if dependency.is_any:
        return EdgeStyle(color=ANY_EDGE_COLOR, arrowhead=MARKER_OPEN, label=WAIT_LABEL)

    if dependency_state in PENDING_STATES:
        color = registry.resolve(step_state).color
    else:
        color = registry.resolve(dependency_state).color
    return EdgeStyle(color=color, arrowhead=MARKER_ARROW)
