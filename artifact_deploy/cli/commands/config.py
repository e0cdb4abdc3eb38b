"""Configuration inspection commands"""

import click
from rich.markup import escape
from rich.table import Table

from ..decorators import require_config
from ..utils.output import console
from ...constants import EMOJI_WARNING


@click.group()
def config():
    """Inspect artifact-deploy configuration"""
    pass


@config.command()
@click.option('--output', type=click.Choice(['table', 'json']), default='table',
              help='Output format')
@click.pass_context
@require_config
def show(ctx, output):
    """Show the resolved configuration

    Relative paths are shown resolved against repo.root and defaults are
    filled in.
    """
    deploy_config = ctx.obj.config
    data = deploy_config.to_dict()

    if output == 'json':
        console.print_json(data=data)
        return

    table = Table(title="Configuration")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", overflow="fold")

    for section, values in data.items():
        if isinstance(values, dict):
            for key, value in values.items():
                table.add_row(f"{section}.{key}", escape(_format(value)))
        else:
            table.add_row(section, escape(_format(values)))

    console.print(table)

    if not deploy_config.git_remotes:
        console.print(f"[yellow]{EMOJI_WARNING} git.remotes is empty; deploy will fail[/yellow]")


def _format(value) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) or "-"
    if isinstance(value, dict):
        return ", ".join(f"{k}={v}" for k, v in value.items()) or "-"
    if value is None:
        return "-"
    return str(value)
