# render.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .model import HIDDEN, Dependency, Edge, Graph, Node
from .states import StateRegistry
from .styling import edge_style


def was_executed(graph: Graph) -> bool:
    """A task has run once any of its steps carries a state; a template never has."""
    return any(n.state for n in graph.nodes)


def node_payload(node: Node) -> Dict[str, Any]:
    a = node.attributes
    return {
        "id": node.id,
        "label": node.label,
        "display_label": node.display_label,
        "tooltip": node.tooltip,
        "class": node.style_class,
        "state": node.state or "",
        "shape": a.shape,
        "color": a.color,
        "font_color": a.font_color,
        "icon": a.icon,
        "is_final": a.is_final,
        "error": a.error,
    }


def edge_payload(
    edge: Edge,
    graph: Graph,
    registry: StateRegistry,
    executed: bool,
) -> Dict[str, Any]:
    dependent = graph.node(edge.target)
    dep = Dependency(raw=f"{edge.source}:{edge.condition}", target=edge.source, condition=edge.condition)
    style = edge_style(
        dep,
        edge.dependency_state,
        dependent.state if dependent else None,
        registry,
        executed=executed,
    )
    return {
        "from": edge.source,
        "to": edge.target,
        "condition": edge.condition,
        "class": edge.style_class,
        "css": edge.css_classes,
        "label": edge.label,
        "marker": edge.marker,
        "color": style.color,
        "dashed": style.dashed,
        "caption": "" if edge.style_class == HIDDEN else style.label,
    }


def to_render_payload(
    graph: Graph,
    registry: Optional[StateRegistry] = None,
    executed: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Plain dict handed to the layout/drawing side.

    `label`/`marker` follow the selection (WAIT only on visible ANY edges);
    `color`/`dashed`/`caption` follow execution state.
    """
    registry = registry if registry is not None else StateRegistry()
    if executed is None:
        executed = was_executed(graph)

    nodes: List[Dict[str, Any]] = [node_payload(n) for n in graph.nodes]
    edges: List[Dict[str, Any]] = [edge_payload(e, graph, registry, executed) for e in graph.edges]
    return {
        "nodes": nodes,
        "edges": edges,
        "selected": graph.selected or "",
        "shapes": [{"pattern": s.pattern, "stroke": s.stroke} for s in registry.shapes],
    }
