"""
CLI interface for notebook-rpc.
"""

import json
import logging
import sys
from typing import Any, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.pretty import Pretty
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from notebook_rpc.client import NotebookClient
from notebook_rpc.config import ClientSettings
from notebook_rpc.errors import NotebookRPCError, RemoteError


console = Console()


def parse_value(text: str) -> Any:
    """Parse a command line value as a JSON literal, or keep it as a string."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def parse_assignments(assignments: tuple[str, ...]) -> dict[str, Any]:
    """Turn ``("a=5", "b=12")`` into ``{"a": 5, "b": 12}``."""
    values = {}
    for item in assignments:
        name, sep, raw = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"Expected name=value, got {item!r}")
        values[name.strip()] = parse_value(raw)
    return values


def _fail(error: Exception):
    if isinstance(error, RemoteError):
        console.print(Panel(
            Text(error.detail or "(empty response)"),
            title=f"[bold red]Server error {error.status_code}[/bold red]",
            border_style="red",
        ))
    else:
        console.print(f"[red]Error: {escape(str(error))}[/red]")
    sys.exit(1)


@click.group()
@click.option("--host", default=None, help="Notebook server URL (default: $NOTEBOOK_RPC_HOST or http://localhost:1234)")
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds")
@click.option("--codec", type=click.Choice(["dill", "json"]), default=None, help="Wire codec")
@click.option("--verbose", "-v", is_flag=True, help="Log every request")
@click.pass_context
def main(ctx: click.Context, host: Optional[str], timeout: Optional[float], codec: Optional[str], verbose: bool):
    """notebook-rpc - Read variables and call functions of a remote notebook."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    try:
        settings = ClientSettings.from_env(host=host, timeout=timeout, codec=codec)
    except ValueError as e:
        raise click.BadParameter(str(e))
    ctx.obj = NotebookClient(settings=settings)
    ctx.call_on_close(ctx.obj.close)


@main.command("eval")
@click.argument("notebook")
@click.argument("outputs", nargs=-1, required=True)
@click.option("--input", "-i", "inputs", multiple=True, help="Input binding, name=value")
@click.pass_obj
def eval_(client: NotebookClient, notebook: str, outputs: tuple[str, ...], inputs: tuple[str, ...]):
    """Evaluate OUTPUTS of NOTEBOOK with the given inputs."""
    bindings = parse_assignments(inputs)
    try:
        values = client.notebook(notebook)(**bindings)[outputs]
    except NotebookRPCError as e:
        _fail(e)

    if len(values) == 1:
        console.print(Pretty(next(iter(values.values()))))
        return

    table = Table(border_style="blue", show_header=True)
    table.add_column("Output", style="bold cyan")
    table.add_column("Value", style="white")
    for name, value in values.items():
        table.add_row(name, Pretty(value))
    console.print(table)


@main.command()
@click.argument("notebook")
@click.argument("function")
@click.argument("args", nargs=-1)
@click.option("--kwarg", "-k", "kwargs", multiple=True, help="Keyword argument, name=value")
@click.pass_obj
def call(client: NotebookClient, notebook: str, function: str, args: tuple[str, ...], kwargs: tuple[str, ...]):
    """Call FUNCTION defined in NOTEBOOK with ARGS."""
    positional = [parse_value(a) for a in args]
    named = parse_assignments(kwargs)
    try:
        result = client.call(function, positional, named, notebook)
    except NotebookRPCError as e:
        _fail(e)
    console.print(Pretty(result))


@main.command()
@click.argument("notebook")
@click.argument("output")
@click.option("--input", "-i", "inputs", multiple=True, help="Input variable name, in argument order")
@click.pass_obj
def static(client: NotebookClient, notebook: str, output: str, inputs: tuple[str, ...]):
    """Show the code computing OUTPUT of NOTEBOOK from the given inputs."""
    try:
        source = client.static_function(output, list(inputs), notebook)
    except NotebookRPCError as e:
        _fail(e)
    console.print(Syntax(source, "python", theme="monokai", line_numbers=True))


if __name__ == "__main__":
    main()
