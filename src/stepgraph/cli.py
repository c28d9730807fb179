# cli.py
from __future__ import annotations

import json
import sys

import click

from stepgraph.dag import ValidateConfig
from stepgraph.loader import LoaderError, load_step_map
from stepgraph.states import StateRegistry
from stepgraph.ui.console import Console, get_console, set_console
from stepgraph.view import StepGraphView
from stepgraph import settings


def _load_or_exit(ctx, path: str):
    console = get_console()
    try:
        step_map = load_step_map(path)
    except LoaderError as e:
        debug = ctx.obj.get("debug", False)
        # first line only; the pydantic breakdown follows in debug mode
        console.print_error(
            "Failed to load step map",
            f"Could not load steps from {e.path}",
            details=[e.message.splitlines()[0]],
            suggestion=None if debug else "Re-run with --debug for the full error.",
        )
        console.print_debug(e.message)
        sys.exit(1)
    console.print_debug(f"Loaded {len(step_map)} step(s) from {path}")
    return step_map


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=settings.DEBUG,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """stepgraph: workflow step dependency graphs."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option(
    "--detect-cycles/--no-detect-cycles",
    default=settings.DETECT_CYCLES,
    show_default=True,
    help="Also reject dependency cycles",
)
@click.pass_context
def validate(ctx, path, detect_cycles):
    """Check that every dependency of PATH points at an existing step."""
    console = get_console()
    step_map = _load_or_exit(ctx, path)

    view = StepGraphView(config=ValidateConfig(detect_cycles=detect_cycles))
    try:
        result = view.load(step_map)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)
    if not result.valid:
        console.print_error("Invalid step map", result.error_message)
        sys.exit(1)
    console.print_valid(path, len(step_map))


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--select", "selected", default=None, help="Step to select before printing")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the render payload as JSON")
@click.pass_context
def show(ctx, path, selected, as_json):
    """Print the classified graph of PATH."""
    console = get_console()
    step_map = _load_or_exit(ctx, path)

    view = StepGraphView()
    try:
        result = view.load(step_map)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)
    if not result.valid:
        console.print_error("Invalid step map", result.error_message)
        sys.exit(1)

    if selected:
        if selected not in step_map:
            console.print_error(
                "Unknown step",
                f"No step named {selected!r}",
                details=[f"Known steps: {sorted(step_map)}"],
            )
            sys.exit(1)
        view.on_node_clicked(selected)

    if as_json:
        click.echo(json.dumps(view.payload(), indent=2))
    else:
        console.print_graph(view.graph)


@cli.command()
def states():
    """Print the state legend."""
    registry = StateRegistry()
    get_console().print_states(registry.all_states(), registry.default)


if __name__ == "__main__":
    cli()
