from .model import Step, Dependency, Node, Edge, Graph, ValidationResult, StructuralError, parse_dependency
from .states import StateRegistry, StateAttributes
from .dag import ValidateConfig, validate_steps, build_graph
from .selection import SelectionEngine, classify
from .render import to_render_payload
from .view import StepGraphView
from .dsl import step, steps, after, after_any

__all__ = [
    "Step", "Dependency", "Node", "Edge", "Graph", "ValidationResult", "StructuralError",
    "parse_dependency", "StateRegistry", "StateAttributes", "ValidateConfig", "validate_steps",
    "build_graph", "SelectionEngine", "classify", "to_render_payload", "StepGraphView",
    "step", "steps", "after", "after_any",
]
