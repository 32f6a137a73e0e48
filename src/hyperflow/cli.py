import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .errors import HyperflowError
from .executors import default_registry
from .generator import generate_graph_from_template, list_templates, save_graph_yaml
from .ir import load_graph
from .settings import RunSettings, load_settings
from .validator import validate_graph
from .visualize import ascii_plan

app = typer.Typer(no_args_is_help=True, help="Hyperflow CLI — run and inspect dataflow graphs")


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(err: Exception):
    rprint(Panel.fit(f"[bold red]Error:[/] {escape(str(err))}"))
    raise typer.Exit(code=1)


@app.command()
def generate(template: str = typer.Option(..., help=f"Template to use: {' | '.join(list_templates())}"),
             name: Optional[str] = typer.Option(None, help="Output filename (without .yaml), defaults to the template name"),
             outdir: Path = typer.Option(Path("graphs"), help="Where to place the YAML"),
    ):
    """Write one of the bundled example graphs to a YAML file."""
    try:
        graph = generate_graph_from_template(template)
    except ValueError as e:
        _fail(e)
    outdir.mkdir(exist_ok=True, parents=True)
    outfile = outdir / f"{name or template}.yaml"
    save_graph_yaml(graph, outfile)
    rprint(Panel.fit(f"Saved template [bold]{template}[/] to [cyan]{outfile}[/]"))


@app.command()
def validate(file: Path):
    """Validate a graph file (schema, references, duplicate ids, cycles)."""
    try:
        ok, messages = validate_graph(load_graph(file))
    except HyperflowError as e:
        _fail(e)
    table = Table(title="Validation Report", show_lines=True)
    table.add_column("Status", justify="center", style="bold")
    table.add_column("Message")
    for m in messages:
        status = "OK" if m.startswith("OK:") else "ERR"
        table.add_row(status, escape(m))
    rprint(table)
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def explain(file: Path):
    """Print an ASCII plan of the graph."""
    try:
        print(ascii_plan(load_graph(file)))
    except HyperflowError as e:
        _fail(e)


@app.command()
def types():
    """List the registered node types."""
    registry = default_registry()
    table = Table(title="Node Types")
    table.add_column("Type", style="bold cyan")
    table.add_column("Description")
    for t in registry.types():
        table.add_row(t, registry.registration(t).description)
    rprint(table)


@app.command()
def run(file: Path,
        mode: Optional[str] = typer.Option(None, help="Traversal mode: wave | topological."),
        settings_file: Optional[Path] = typer.Option(None, "--settings", help="YAML settings file."),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging.")):
    """Execute the graph and print the final per-node state as JSON."""
    from .runner import run_graph
    _setup_logging(verbose)
    try:
        settings = load_settings(settings_file)
        if mode is not None:
            settings = RunSettings(**{**settings.model_dump(), "mode": mode})
        state = run_graph(file, settings=settings)
    except Exception as e:
        # executor failures are already logged with their node id
        _fail(e)
    print(json.dumps(state, indent=2, default=str))


if __name__ == "__main__":
    app()
