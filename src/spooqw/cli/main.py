"""SpooqW CLI — works on pipeline config files locally."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.syntax import Syntax

from spooqw import __version__
from spooqw.core.config import configure_logging, get_settings
from spooqw.dag.resolver import CycleError, StepGraph
from spooqw.dsl import merge, parse_document, serialize_document, validate
from spooqw.pipeline.types import StepKind
from spooqw.pipeline.templates import new_step

app = typer.Typer(
    name="spooqw",
    help="SpooqW pipeline config tooling",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main():
    configure_logging(get_settings().log_level)


def _read_config(file: Path) -> str:
    if not file.exists():
        console.print(f"[red]Error:[/red] File not found: {file}")
        raise typer.Exit(1)
    return file.read_text(encoding="utf-8")


def _emit(file: Path, text: str, write: bool) -> None:
    if write:
        file.write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]✓[/green] Wrote {file}")
    else:
        console.print(Syntax(text, "yaml", theme="monokai"))


@app.command(name="validate")
def validate_cmd(
    file: Path = typer.Argument(..., help="Pipeline config file"),
    strict: bool = typer.Option(False, "--strict", help="Also reject dependency cycles"),
):
    """Validate a pipeline config file."""
    result = validate(_read_config(file), strict=strict or get_settings().strict_validation)

    if result.valid:
        console.print(f"[green]✓[/green] {file} is valid")
        return

    console.print(f"[red]✗[/red] {file}: {len(result.errors)} error(s)")
    for error in result.errors:
        console.print(f"  [red]●[/red] {error}")
    raise typer.Exit(1)


@app.command()
def fmt(
    file: Path = typer.Argument(..., help="Pipeline config file"),
    write: bool = typer.Option(False, "--write", "-w", help="Rewrite the file in place"),
):
    """Re-render a config file in canonical form."""
    document = parse_document(_read_config(file))
    if document.id is None:
        document.id = get_settings().default_pipeline_id
    _emit(file, serialize_document(document), write)


@app.command()
def steps(file: Path = typer.Argument(..., help="Pipeline config file")):
    """List the steps of a config file."""
    document = parse_document(_read_config(file))

    if not document.steps:
        console.print("[dim]No steps defined[/dim]")
        return

    table = Table(title=f"Pipeline: {document.id or '—'}", show_lines=False)
    table.add_column("ID", style="bold")
    table.add_column("Kind")
    table.add_column("Source")
    table.add_column("Depends On")
    table.add_column("Format")
    table.add_column("Path")

    for step in document.steps:
        kind_color = "green" if StepKind.is_valid(step.kind) else "red"
        table.add_row(
            step.id,
            f"[{kind_color}]{step.kind}[/{kind_color}]",
            step.source or "—",
            ", ".join(step.depends_on) if step.depends_on else "—",
            step.format or "—",
            step.path or "—",
        )

    console.print(table)


@app.command()
def graph(file: Path = typer.Argument(..., help="Pipeline config file")):
    """Show execution order and parallel groups of a config file."""
    document = parse_document(_read_config(file))
    step_graph = StepGraph.from_steps(document.steps)

    try:
        groups = step_graph.parallel_groups()
    except CycleError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    levels = step_graph.levels()
    table = Table(title="Execution order")
    table.add_column("Group", justify="right")
    table.add_column("Step", style="bold")
    table.add_column("Kind")
    table.add_column("Level", justify="right")
    table.add_column("Upstream")

    for index, group in enumerate(groups, start=1):
        for step_id in group:
            node = step_graph.nodes[step_id]
            table.add_row(
                str(index),
                step_id,
                node.kind,
                str(levels[step_id]),
                ", ".join(node.upstream) or "—",
            )

    console.print(table)


@app.command()
def add(
    file: Path = typer.Argument(..., help="Pipeline config file"),
    kind: StepKind = typer.Argument(..., help="Kind of step to append"),
    write: bool = typer.Option(False, "--write", "-w", help="Rewrite the file in place"),
):
    """Append a templated step to a config file."""
    text = _read_config(file)
    document = parse_document(text)
    step = new_step(kind, document.steps)
    console.print(f"[green]✓[/green] Added step [bold]{step.id}[/bold] ({step.kind})")
    _emit(file, merge(text, [*document.steps, step]), write)


@app.command()
def kinds():
    """List the supported step kinds."""
    for kind in StepKind:
        console.print(kind.value)


@app.command()
def version():
    """Show SpooqW version."""
    console.print(f"spooqw v{__version__}")


if __name__ == "__main__":
    app()
