"""Configuration context decorator for CLI commands"""

from functools import wraps
from typing import Callable

import click
from rich.markup import escape

from ..utils.output import console
from ...api.exceptions import ConfigError
from ...constants import EMOJI_ERROR, EXIT_FAILURE, PROJECT_CONFIG_FILE


def require_config(func: Callable) -> Callable:
    """Decorator that ensures the command runs with a loaded configuration

    The configuration is read from ``--config`` when given, otherwise from
    the nearest ``.artifact-deploy.yaml`` above the working directory.

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()

        try:
            ctx.obj.load_config()
        except ConfigError as e:
            console.print(f"[red]{EMOJI_ERROR} {escape(str(e))}[/red]")
            if ctx.obj.config_path is None:
                console.print(
                    f"[dim]Create {PROJECT_CONFIG_FILE} in the project root "
                    f"or pass --config.[/dim]"
                )
            ctx.exit(EXIT_FAILURE)

        return func(*args, **kwargs)

    return wrapper
