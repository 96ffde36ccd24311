"""Output formatters for the Blokit CLI."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from rich.table import Table

from blokit.models import Block, Todo, TodoView
from blokit.utils.ui.console import get_console

console = get_console()


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


def format_time(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def format_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


def format_todos(todos: list[Todo], view: TodoView = TodoView.INCOMPLETE) -> None:
    """Render todos as a table."""
    if not todos:
        console.print("[yellow]No todos[/yellow]")
        return

    table = Table(title=f"Todos ({view.value}, {len(todos)})", show_header=True)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("", justify="center")
    table.add_column("Content")
    table.add_column("Created", style="dim")
    if view == TodoView.ALL:
        table.add_column("Completed", style="dim")

    for todo in todos:
        star = "[yellow]★[/yellow]" if todo.marked else ""
        content = f"[strike dim]{todo.content}[/strike dim]" if todo.completed else todo.content
        row = [str(todo.id), star, content, format_time(todo.created_at)]
        if view == TodoView.ALL:
            row.append(format_time(todo.completed_at))
        table.add_row(*row)

    console.print(table)


def format_blocks(blocks: list[Block]) -> None:
    """Render recorded blocks as a table with a total."""
    if not blocks:
        console.print("[yellow]No blocks today[/yellow]")
        return

    table = Table(title=f"Blocks today ({len(blocks)})", show_header=True)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Started")
    table.add_column("Finished")
    table.add_column("Minutes", justify="right")

    total_seconds = 0
    for block in blocks:
        seconds = int(block.duration.total_seconds())
        total_seconds += seconds
        table.add_row(
            str(block.id),
            format_time(block.started_at),
            format_time(block.finished_at),
            str(seconds // 60),
        )

    console.print(table)
    console.print(f"[dim]Total focus: {total_seconds // 60} minutes[/dim]")
