# view.py
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from .dag import ValidateConfig, build_graph, validate_steps
from .model import Graph, RawStepMap, ValidationResult, as_step_map
from .render import to_render_payload
from .selection import SelectionEngine, SelectionListener
from .states import StateRegistry


class StepGraphView:
    """
    validate -> build -> classify, redone from scratch for every step map.

    Invalid input leaves the view with no graph and the error message; the
    builder is not called. Keeping the last good graph on screen is up to
    the caller (read `graph` before calling load()).
    """

    def __init__(
        self,
        registry: Optional[StateRegistry] = None,
        config: Optional[ValidateConfig] = None,
    ):
        self.registry = registry if registry is not None else StateRegistry()
        self.config = config or ValidateConfig()
        self.selection = SelectionEngine()
        self.error: str = ""
        self._loaded = False

    @property
    def graph(self) -> Optional[Graph]:
        """Classified graph, or None while the current step map is invalid."""
        if not self._loaded:
            return None
        return self.selection.graph

    @property
    def selected(self) -> Optional[str]:
        return self.selection.selected

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        return self.selection.subscribe(listener)

    def load(self, steps: RawStepMap) -> ValidationResult:
        step_map = as_step_map(steps)
        result = validate_steps(step_map, self.config)
        if not result.valid:
            self.error = result.error_message
            self._loaded = False
            return result

        self.error = ""
        if self.selection.selected is not None and self.selection.selected not in step_map:
            # the selected step went away with this refresh
            self.selection.clear(notify=True)

        self.selection.set_graph(build_graph(step_map, self.registry, self.config))
        self._loaded = True
        return result

    def on_node_clicked(self, step_name: str) -> Optional[Graph]:
        """Ignored (no transition, no event) while the step map is invalid."""
        if not self._loaded:
            return None
        self.selection.on_node_clicked(step_name)
        return self.graph

    def reset(self) -> Optional[Graph]:
        """Drop the selection, e.g. when another task is displayed."""
        self.selection.reset()
        return self.graph

    def payload(self) -> Dict[str, Any]:
        if self.graph is None:
            return {"nodes": [], "edges": [], "selected": "", "error": self.error}
        out = to_render_payload(self.graph, self.registry)
        out["error"] = ""
        return out
