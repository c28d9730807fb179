"""Console output formatting utilities for stepgraph."""

from __future__ import annotations

import sys
from typing import Optional

from ..model import Graph
from ..states import StateAttributes
from .. import settings


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = settings.DEBUG):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_valid(self, source: str, step_count: int) -> None:
        print(f"VALID: {source} ({step_count} step(s))")

    def print_graph(self, graph: Graph) -> None:
        """Print classified nodes and edges, one per line."""
        self.print_header("NODES")
        for n in graph.nodes:
            state = n.state or "-"
            print(f"  {n.id} [{n.style_class}] state={state} shape={n.attributes.shape}")
        self.print_header("EDGES")
        for e in graph.edges:
            label = f" {e.label}" if e.label else ""
            print(f"  {e.source} -> {e.target} [{e.style_class}] {e.condition} ({e.marker}){label}")
        if graph.selected:
            print(f"\nSelected: {graph.selected}")

    def print_states(self, states: list[StateAttributes], default: StateAttributes) -> None:
        self.print_header("STATES")
        for s in states:
            flags = []
            if s.is_final:
                flags.append("final")
            if s.error:
                flags.append("error")
            flag_str = f" ({', '.join(flags)})" if flags else ""
            print(f"  {s.key:<14} {s.color:<8} {s.shape:<20} {s.icon}{flag_str}")
        print(f"  {'<other>':<14} {default.color:<8} {default.shape:<20} {default.icon}")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
