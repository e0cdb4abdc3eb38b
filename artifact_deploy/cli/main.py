"""Main CLI entry point for artifact-deploy"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..constants import APP_NAME, EXIT_FAILURE, EXIT_INTERRUPTED, LOG_FORMAT
from ..models import DeployConfig
from ..services import ConfigService

from .commands import config, deploy, git

console = Console()


def _log_level(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    return logging.INFO if verbose else logging.WARNING


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route log records through rich on the shared console

    Debug mode adds timestamps and source locations.
    """
    logging.basicConfig(
        level=_log_level(verbose, debug),
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True
    )

    logging.getLogger("asyncio").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy configuration loading

    Commands that need the project configuration call load_config();
    help output never touches the file system.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path: Optional[Path] = Path(config_path) if config_path else None
        self.verbose: bool = False
        self.debug: bool = False
        self._config: Optional[DeployConfig] = None

    def load_config(self) -> DeployConfig:
        """Load the configuration once

        Raises:
            ConfigError: If no configuration can be found or parsed
        """
        if self._config is None:
            if self.config_path is not None:
                service = ConfigService(self.config_path)
            else:
                service = ConfigService.discover()
            self._config = service.load_config()
            if self.debug:
                console.print(f"[dim]Configuration: {service.config_path}[/dim]")
        return self._config

    @property
    def config(self) -> DeployConfig:
        return self.load_config()


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False),
              envvar='ARTIFACT_DEPLOY_CONFIG',
              help='Path to the project configuration file')
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_path):
    """Artifact Deploy - Build and push deployment artifacts

    Copies a project into a separate git repository, installs production
    dependencies, strips development files, commits the result and pushes
    it as a branch or a tag to every configured remote.
    """
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(config_path)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


cli.add_command(deploy.deploy)
cli.add_command(deploy.build)
cli.add_command(deploy.check_dirty)
cli.add_command(deploy.install_drupal)
cli.add_command(git.commit_msg)
cli.add_command(config.config)


def main():
    """Console script entry point

    Deploy failures are reported by the commands themselves; anything
    reaching this level is a bug or an interrupt. Click runs outside
    standalone mode so an interrupt exits with 130 instead of 1.
    """
    try:
        code = cli(prog_name=APP_NAME, standalone_mode=False)
    except (click.exceptions.Abort, KeyboardInterrupt):
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(EXIT_INTERRUPTED)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        if {"-d", "--debug"} & set(sys.argv):
            console.print_exception()
        sys.exit(EXIT_FAILURE)

    sys.exit(code if isinstance(code, int) else 0)


if __name__ == "__main__":
    main()
