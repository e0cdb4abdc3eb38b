"""Git hook commands"""

import logging
import sys

import click
from rich.markup import escape

from ..utils import console
from ...api.exceptions import ConfigError, ConfigNotFoundError
from ...constants import EMOJI_ERROR, EXIT_FAILURE
from ...services import validate_commit_message

logger = logging.getLogger(__name__)


@click.command(name='commit-msg')
@click.argument('message', required=False)
@click.option('-F', '--file', 'message_file', type=click.File('r', encoding='utf-8'),
              help='Read the message from a file, as passed to the commit-msg hook')
@click.pass_context
def commit_msg(ctx, message, message_file):
    """Validate a commit message against git.commit-msg.pattern

    Examples:

        artifact-deploy commit-msg "ABC-123: Fix the login redirect loop."

        # .git/hooks/commit-msg
        artifact-deploy commit-msg --file "$1"
    """
    if message_file is not None:
        message = message_file.read()
    if message is None:
        console.print("[red]Error: Provide a MESSAGE or --file[/red]")
        sys.exit(EXIT_FAILURE)

    # Without a project configuration there is no pattern to enforce
    try:
        config = ctx.obj.load_config()
    except ConfigNotFoundError as e:
        if ctx.obj.config_path is None:
            logger.debug("%s, accepting commit message", e)
            return
        console.print(f"[red]{EMOJI_ERROR} {escape(str(e))}[/red]")
        sys.exit(EXIT_FAILURE)

    try:
        check = validate_commit_message(message.strip(), config)
    except ConfigError as e:
        console.print(f"[red]{EMOJI_ERROR} {escape(str(e))}[/red]")
        sys.exit(EXIT_FAILURE)

    if check.valid:
        return

    console.print(f"[red]{EMOJI_ERROR} Invalid commit message![/red]")
    console.print(f"Commit messages must match the regex [yellow]{escape(check.pattern)}[/yellow]")
    for hint in check.hints:
        console.print(escape(hint))
    sys.exit(EXIT_FAILURE)
