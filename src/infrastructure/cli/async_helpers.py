"""Bridge from synchronous typer commands to the async engine."""

import asyncio
from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any

from src.infrastructure.cli.ui import command_error_handler


def async_command[**P, R](
    func: Callable[P, Coroutine[Any, Any, R]],
) -> Callable[P, R]:
    """Run an async command body with ``asyncio.run`` and CLI error handling."""

    @command_error_handler
    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        return asyncio.run(func(*args, **kwargs))

    return wrapper
