"""Decorators and helpers for command functions."""

import asyncio
import contextlib
import functools
import time
import traceback
from collections.abc import AsyncIterator, Callable

import typer

from blokit.capabilities import CapabilityGate
from blokit.core.factory import BlokitApp, build_app
from blokit.exceptions import BlokitError
from blokit.services.config_service import get_config_service
from blokit.utils.logger import configure_logging, get_logger
from blokit.utils.ui.formatters import format_error


@contextlib.asynccontextmanager
async def open_app(
    gate: CapabilityGate | None = None, *, resume: bool = True
) -> AsyncIterator[BlokitApp]:
    """Build the app from the saved configuration and close it afterwards."""
    config = get_config_service().config
    configure_logging(config.log_level)
    app = await build_app(config, gate=gate, resume=resume)
    try:
        yield app
    finally:
        await app.close()


def command_wrapper(func: Callable):
    """Run sync or async commands, logging and translating errors to exits."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            if asyncio.iscoroutinefunction(func):
                result = asyncio.run(func(*args, **kwargs))
            else:
                result = func(*args, **kwargs)

            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except BlokitError as e:
            elapsed = time.monotonic() - start
            logger.error("command failed: %s (%.3fs) - %s", cmd, elapsed, str(e))
            format_error(str(e))
            raise typer.Exit(code=e.exit_code) from e

        except typer.Exit:
            # Re-raise Typer's own exits (like --help or explicit Exit(0))
            raise

        except KeyboardInterrupt:
            logger.info("command interrupted: %s", cmd)
            raise typer.Exit(code=130) from None

        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                elapsed,
                str(e),
                traceback.format_exc(),
            )
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=1) from e

    return wrapper
