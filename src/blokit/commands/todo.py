"""Todo list commands."""

from typing import Annotated

import typer

from blokit.models import TodoView
from blokit.utils.ui.console import get_console
from blokit.utils.ui.formatters import (
    format_json,
    format_success,
    format_todos,
    format_warning,
)

from .decorators import command_wrapper, open_app

app = typer.Typer(help="Todo list commands")
console = get_console()


@app.command("add")
@command_wrapper
async def add_command(
    text: Annotated[list[str], typer.Argument(help="Todo text")],
) -> None:
    """Add a todo. Blank text is ignored."""
    async with open_app(resume=False) as blokit:
        todo = await blokit.todos.create_todo(" ".join(text))
    if todo is None:
        format_warning("Nothing to add")
        return
    format_success(f"Added #{todo.id}: {todo.content}")


@app.command("list")
@command_wrapper
async def list_command(
    view: Annotated[
        TodoView, typer.Option("--view", "-v", help="Which todos to show")
    ] = TodoView.INCOMPLETE,
    json_opt: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List todos."""
    async with open_app(resume=False) as blokit:
        todos = blokit.todos.list_view(view).value
    if json_opt:
        format_json([todo.model_dump(mode="json") for todo in todos])
    else:
        format_todos(todos, view)


@app.command("complete")
@command_wrapper
async def complete_command(
    todo_id: Annotated[int, typer.Argument(help="Todo ID")],
) -> None:
    """Mark a todo as completed."""
    async with open_app(resume=False) as blokit:
        todo = await blokit.todos.complete_todo(todo_id)
    format_success(f"Completed #{todo.id}: {todo.content}")
    console.print(f"[dim]To undo: blokit todo undo {todo.id}[/dim]")


@app.command("undo")
@command_wrapper
async def undo_command(
    todo_id: Annotated[int, typer.Argument(help="Todo ID")],
) -> None:
    """Undo a completion."""
    async with open_app(resume=False) as blokit:
        todo = await blokit.todos.undo_complete_todo(todo_id)
    format_success(f"Reopened #{todo.id}: {todo.content}")


@app.command("mark")
@command_wrapper
async def mark_command(
    todo_id: Annotated[int, typer.Argument(help="Todo ID")],
) -> None:
    """Toggle the priority mark on a todo."""
    async with open_app(resume=False) as blokit:
        todo = await blokit.todos.toggle_marked(todo_id)
    state = "Marked" if todo.marked else "Unmarked"
    format_success(f"{state} #{todo.id}: {todo.content}")
