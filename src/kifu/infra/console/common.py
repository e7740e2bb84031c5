import functools
from typing import Any, Callable

import click

from kifu.infra.app_logging import (
    app_logger,
    get_log_level_from_env,
)
from kifu.infra.file_system.file_system import FileSystem

__all__ = [
    "app_logger",
    "get_log_level_from_env",
    "FileSystem",
    "handle_exception",
]


def handle_exception(func: Callable) -> Callable:
    """Decorator to handle exceptions in CLI commands."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception:
            app_logger.exception(
                "Error occurred", stack_info=True
            )
            raise click.exceptions.Exit(1)

    return wrapper
