# selection.py
from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Optional, Set

from .model import HIDDEN, SELECTED, SELECTION, STANDARD, Edge, Graph, Node

SelectionListener = Callable[[str], None]


def classify(graph: Graph, selected: Optional[str]) -> Graph:
    """
    Recompute the style class of every node and edge for `selected`.

    Pure: the result depends only on the graph topology and the selection,
    never on the classes the input graph already carries.
    """
    if not selected:
        nodes = [replace(n, style_class=STANDARD) for n in graph.nodes]
        edges = [replace(e, style_class=STANDARD) for e in graph.edges]
        return Graph(nodes=tuple(nodes), edges=tuple(edges), selected=None)

    neighbours: Set[str] = set()
    edges: List[Edge] = []
    for e in graph.edges:
        if e.touches(selected):
            neighbours.add(e.target if e.source == selected else e.source)
            edges.append(replace(e, style_class=SELECTED))
        else:
            edges.append(replace(e, style_class=HIDDEN))

    nodes: List[Node] = []
    for n in graph.nodes:
        if n.id == selected:
            cls = SELECTION
        elif n.id in neighbours:
            cls = SELECTED
        else:
            cls = HIDDEN
        nodes.append(replace(n, style_class=cls))

    return Graph(nodes=tuple(nodes), edges=tuple(edges), selected=selected)


class SelectionEngine:
    """
    Click-to-toggle selection over one graph.

    NoSelection --select(S)--> Selected(S)
    Selected(S) --select(S)--> NoSelection
    Selected(S) --select(T)--> Selected(T)
    any         --clear()----> NoSelection
    """

    def __init__(self, graph: Optional[Graph] = None):
        self._base: Graph = graph if graph is not None else Graph()
        self._selected: Optional[str] = None
        self._graph: Graph = classify(self._base, None)
        self._listeners: List[SelectionListener] = []

    @property
    def selected(self) -> Optional[str]:
        return self._selected

    @property
    def graph(self) -> Graph:
        """The graph classified for the current selection."""
        return self._graph

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """Register a selection-changed callback; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_graph(self, graph: Graph) -> Graph:
        """Swap in a freshly built graph and reclassify it for the current selection."""
        self._base = graph
        self._graph = classify(self._base, self._selected)
        return self._graph

    def select(self, step_name: str) -> Optional[str]:
        if self._selected == step_name:
            self._selected = None
        else:
            self._selected = step_name
        self._graph = classify(self._base, self._selected)
        return self._selected

    def clear(self, *, notify: bool = False) -> None:
        """Back to NoSelection; notify=True also emits "" to subscribers."""
        self._selected = None
        self._graph = classify(self._base, None)
        if notify:
            self._emit()

    def on_node_clicked(self, step_name: str) -> Graph:
        self.select(step_name)
        self._emit()
        return self._graph

    def reset(self) -> Graph:
        self.clear()
        return self._graph

    def _emit(self) -> None:
        value = self._selected or ""
        for listener in list(self._listeners):
            listener(value)
