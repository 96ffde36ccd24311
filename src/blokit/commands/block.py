"""Focus block timer commands."""

import asyncio
from datetime import timedelta
from pathlib import Path
from typing import Annotated

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from blokit.capabilities import ConsolePromptGate, StaticCapabilityGate
from blokit.core.factory import BlokitApp
from blokit.models import SessionStatus, StartOutcome, TimerSession
from blokit.services.config_service import get_config_service
from blokit.tasks import CountdownStateStore
from blokit.utils import exit_codes
from blokit.utils.dates import format_clock, now_utc
from blokit.utils.ui.console import get_console
from blokit.utils.ui.formatters import (
    format_blocks,
    format_info,
    format_success,
    format_time,
    format_warning,
)

from .decorators import command_wrapper, open_app

app = typer.Typer(help="Focus block timer commands")
console = get_console()


async def watch_countdown(blokit: BlokitApp) -> bool:
    """Show progress until the session goes idle.

    Cancelling the surrounding task (Ctrl-C) cancels the countdown.

    Returns:
        True if the countdown ran to completion and a block was recorded
    """
    done = asyncio.Event()
    completed = False
    total = int(blokit.sessions.state.value.total_duration.total_seconds())

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
        transient=True,
    ) as progress:
        bar = progress.add_task("Starting block...", total=max(total, 1))

        def on_state(session: TimerSession) -> None:
            nonlocal completed
            remaining = int(session.remaining.total_seconds())
            if session.status == SessionStatus.RUNNING:
                progress.update(
                    bar,
                    completed=total - remaining,
                    description=f"⏱️  {format_clock(remaining)} remaining",
                )
            elif session.status == SessionStatus.COMPLETING:
                completed = True
            elif session.status == SessionStatus.IDLE:
                done.set()

        unsubscribe = blokit.sessions.state.subscribe(on_state)
        try:
            await done.wait()
        except asyncio.CancelledError:
            await blokit.sessions.cancel()
            raise
        finally:
            unsubscribe()

    return completed


def report_recovered(blokit: BlokitApp) -> None:
    for block in blokit.recovered_blocks:
        console.print(
            f"[bold green]Recorded block[/bold green] that finished while away "
            f"at {format_time(block.finished_at)}"
        )


@app.command("start")
@command_wrapper
async def start_command(
    minutes: Annotated[
        int | None,
        typer.Option("--minutes", "-m", min=1, help="Block length in minutes"),
    ] = None,
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Skip the alert permission prompt")
    ] = False,
) -> None:
    """Start a focus block and count it down in the foreground."""
    gate = StaticCapabilityGate(granted=True) if yes else ConsolePromptGate()
    async with open_app(gate) as blokit:
        report_recovered(blokit)
        duration = timedelta(minutes=minutes) if minutes else None
        outcome = await blokit.sessions.start(duration)
        if outcome == StartOutcome.CAPABILITY_DENIED:
            format_warning("Alerts not allowed, block not started")
            raise typer.Exit(exit_codes.ERROR_PERMISSION_DENIED)

        total = blokit.sessions.state.value.total_duration
        console.print(
            f"\n[bold green]Block started[/bold green] "
            f"({int(total.total_seconds()) // 60} minutes). Ctrl-C to stop.\n"
        )
        if await watch_countdown(blokit):
            console.print("[bold green]🎉 Block made![/bold green]")
        else:
            format_info("Block stopped")


@app.command("resume")
@command_wrapper
async def resume_command() -> None:
    """Continue a countdown left behind by an interrupted session."""
    async with open_app() as blokit:
        report_recovered(blokit)
        if blokit.sessions.active_task_id is None:
            if not blokit.recovered_blocks:
                format_info("No countdown to resume")
            return
        remaining = blokit.sessions.state.value.remaining
        console.print(
            f"[bold]Resuming block[/bold] with {format_clock(int(remaining.total_seconds()))} left"
        )
        if await watch_countdown(blokit):
            console.print("[bold green]🎉 Block made![/bold green]")
        else:
            format_info("Block stopped")


@app.command("status")
@command_wrapper
def status_command() -> None:
    """Show whether a countdown is pending from an earlier session."""
    config = get_config_service().config
    record = CountdownStateStore(Path(config.state_dir)).load(config.countdown_tag)
    if record is None:
        format_info("No countdown in progress")
        return
    remaining = record.remaining_at(now_utc())
    if remaining == 0:
        console.print("Countdown finished while away; run [bold]blokit block resume[/bold] to record it")
    else:
        console.print(f"Countdown in progress: {format_clock(remaining)} left")


@app.command("today")
@command_wrapper
async def today_command() -> None:
    """List the blocks recorded today."""
    async with open_app(resume=False) as blokit:
        blocks = await blokit.sessions.todays_blocks()
    format_blocks(blocks)
    if blocks:
        format_success(f"{len(blocks)} block(s) today")
