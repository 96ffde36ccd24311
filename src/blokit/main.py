"""Main entry point for the Blokit CLI."""

import typer

from blokit import __version__
from blokit.commands import block, config, todo
from blokit.utils.ui.console import get_console

app = typer.Typer(
    name="blokit",
    help="Todo list and focus block timer",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(todo.app, name="todo", help="Todo list commands")
app.add_typer(block.app, name="block", help="Focus block timer")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Blokit[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
