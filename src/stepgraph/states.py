# states.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True)
class StateAttributes:
    """Visual treatment of one execution state."""
    key: str
    color: str
    font_color: str
    shape: str
    icon: str
    is_final: bool
    error: bool


@dataclass(frozen=True)
class ShapePattern:
    """A fill pattern the renderer registers once per graph."""
    pattern: str
    stroke: str


SHAPES: List[ShapePattern] = [
    ShapePattern("shape_white_striped", "#c9c9c9"),
    ShapePattern("shape_white", "#c9c9c9"),
    ShapePattern("shape_blue", "#2aa0f0"),
    ShapePattern("shape_red", "#aa3818"),
    ShapePattern("shape_green", "#99d250"),
    ShapePattern("shape_orange", "#f09000"),
    ShapePattern("shape_black", "#333"),
]

BUILTIN_STATES: List[StateAttributes] = [
    StateAttributes("TO_RETRY", "#f09000", "white", "shape_orange", "history", False, False),
    StateAttributes("RUNNING", "#32acff", "white", "shape_blue", "sync", False, False),
    StateAttributes("TODO", "#AAA", "black", "shape_white", "hourglass", False, False),
    StateAttributes("EXPANDED", "#32acff", "white", "shape_blue", "clock-circle", False, False),
    StateAttributes("CLIENT_ERROR", "#b04020", "white", "shape_red", "close-circle", False, True),
    StateAttributes("DONE", "#a0da57", "white", "shape_green", "check-circle", True, False),
    StateAttributes("PRUNE", "#DDD", "grey", "shape_white_striped", "stop", True, False),
    StateAttributes("SERVER_ERROR", "#b04020", "white", "shape_red", "close-circle", False, True),
    StateAttributes("FATAL_ERROR", "#b04020", "white", "shape_red", "close-circle", True, True),
]

# key is overwritten with the looked-up state on every fallback hit
DEFAULT_STATE = StateAttributes("", "#ff9803", "white", "shape_orange", "check-circle", True, False)

# steps of a template (or a task that has not started) carry no state at all
NO_STATE = StateAttributes("", "#333", "white", "shape_black", "minus-circle", False, False)


class StateRegistry:
    """
    Lookup table: execution state -> visual attributes.

    Lookup is total: unknown or custom states get the default treatment but
    keep their own key so the state name can still be displayed.
    Build one per graph (or share a read-only one); nothing here is global.
    """

    def __init__(
        self,
        states: Optional[Iterable[StateAttributes]] = None,
        *,
        default: StateAttributes = DEFAULT_STATE,
        no_state: StateAttributes = NO_STATE,
        shapes: Optional[Iterable[ShapePattern]] = None,
    ):
        self._states: Dict[str, StateAttributes] = {}
        for s in BUILTIN_STATES if states is None else states:
            self._states[s.key] = s
        self.default = default
        self._no_state = no_state
        self.shapes: List[ShapePattern] = list(SHAPES if shapes is None else shapes)

    def lookup(self, key: str) -> StateAttributes:
        found = self._states.get(key)
        if found is not None:
            return found
        return replace(self.default, key=key)

    def resolve(self, key: Optional[str]) -> StateAttributes:
        """Like lookup(), but an absent state maps to the no-state-yet entry."""
        if not key:
            return self._no_state
        return self.lookup(key)

    def no_state(self) -> StateAttributes:
        return self._no_state

    def all_states(self) -> List[StateAttributes]:
        """Built-in entries in declaration order (for legends/palettes)."""
        return list(self._states.values())

    def as_dict(self) -> Dict[str, StateAttributes]:
        return dict(self._states)

    def with_states(self, *extra: StateAttributes) -> "StateRegistry":
        """New registry with extra entries added (same key -> overridden)."""
        merged = dict(self._states)
        for s in extra:
            merged[s.key] = s
        return StateRegistry(
            merged.values(),
            default=self.default,
            no_state=self._no_state,
            shapes=self.shapes,
        )

    def __contains__(self, key: object) -> bool:
        return key in self._states

    def __len__(self) -> int:
        return len(self._states)
