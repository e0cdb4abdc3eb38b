"""Deploy command implementation"""

import sys

import click
from rich.markup import escape

from ..decorators import require_config
from ..utils import RichPrompter, console, format_build_result, format_deploy_result
from ...api.exceptions import ArtifactDeployError, DirtyRepositoryError
from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING, EXIT_FAILURE
from ...models import DeployOptions
from ...services import DeployService, NonInteractivePrompter


def _service(ctx, interactive: bool = True) -> DeployService:
    prompter = RichPrompter(console) if interactive else NonInteractivePrompter()
    return DeployService(ctx.obj.config, prompter=prompter, console=console)


@click.command()
@click.option('--branch', 'branch_name', help='Artifact branch to commit to and push')
@click.option('--tag', 'tag_name', help='Tag to create on the artifact and push')
@click.option('--commit-msg', 'commit_message', help='Commit message for the artifact commit')
@click.option('--ignore-dirty', is_flag=True,
              help='Deploy even if the source repository has uncommitted changes')
@click.option('--dry-run', is_flag=True, help='Build, commit and tag but do not push')
@click.option('--ignore-platform-reqs', is_flag=True,
              help='Pass --ignore-platform-reqs to the dependency manager')
@click.option('-n', '--no-interaction', is_flag=True, help='Never prompt; use defaults')
@click.option('--output', type=click.Choice(['panel', 'json']), default='panel',
              help='Output format')
@click.pass_context
@require_config
def deploy(ctx, branch_name, tag_name, commit_message, ignore_dirty, dry_run,
           ignore_platform_reqs, no_interaction, output):
    """Build an artifact and push it to git.remotes

    Without --tag the artifact is committed to a branch (default
    <current-branch>-build) which is merged with its upstream copy first.
    With --tag the artifact is committed on a throwaway branch, tagged,
    and only the tag is pushed.

    Examples:

        # Deploy the current branch to <branch>-build
        artifact-deploy deploy

        # Cut a release tag on the artifact and the source repository
        artifact-deploy deploy --tag 1.2.0 --commit-msg "Release 1.2.0"

        # Build and commit locally without pushing
        artifact-deploy deploy --branch main-build --dry-run -n
    """
    if branch_name and tag_name:
        console.print("[red]Error: Cannot specify both --branch and --tag[/red]")
        sys.exit(EXIT_FAILURE)

    options = DeployOptions(
        branch_name=branch_name,
        tag_name=tag_name,
        commit_message=commit_message,
        ignore_dirty=ignore_dirty,
        dry_run=dry_run,
        ignore_platform_reqs=ignore_platform_reqs,
        interactive=not no_interaction
    )

    result = _service(ctx, interactive=options.interactive).deploy(options)
    if output == 'json':
        console.print_json(data=result.to_dict())
    else:
        format_deploy_result(result, show_stages=ctx.obj.verbose or ctx.obj.debug)

    if not result.success:
        sys.exit(EXIT_FAILURE)


@click.command()
@click.option('--tag', 'tag_name', help='Deployment identifier to record in the build')
@click.option('--ignore-platform-reqs', is_flag=True,
              help='Pass --ignore-platform-reqs to the dependency manager')
@click.pass_context
@require_config
def build(ctx, tag_name, ignore_platform_reqs):
    """Generate the artifact in the deploy directory without committing

    The deploy directory is not initialized as a repository; content is
    synchronized into it as it is.
    """
    result = _service(ctx, interactive=False).build(
        tag_name=tag_name,
        ignore_platform_reqs=ignore_platform_reqs
    )
    format_build_result(result)

    if not result.success:
        sys.exit(EXIT_FAILURE)


@click.command(name='check-dirty')
@click.option('--ignore-dirty', is_flag=True, help='Warn instead of failing')
@click.pass_context
@require_config
def check_dirty(ctx, ignore_dirty):
    """Check the source repository for uncommitted changes"""
    try:
        dirty = _service(ctx, interactive=False).check_dirty(ignore_dirty)
    except DirtyRepositoryError as e:
        console.print(f"[red]{EMOJI_ERROR} {escape(str(e))}[/red]")
        sys.exit(EXIT_FAILURE)
    except ArtifactDeployError as e:
        console.print(f"[red]{EMOJI_ERROR} {escape(str(e))}[/red] [dim]({e.error_code})[/dim]")
        sys.exit(EXIT_FAILURE)

    if dirty:
        console.print(f"[yellow]{EMOJI_WARNING} Uncommitted changes ignored[/yellow]")
    else:
        console.print(f"[green]{EMOJI_SUCCESS} Working tree is clean[/green]")


@click.command(name='install-drupal')
@click.pass_context
@require_config
def install_drupal(ctx):
    """Install the site from the deployed codebase

    Runs the command configured under commands.install_drupal from the
    repository root.
    """
    try:
        _service(ctx, interactive=False).operations.install_drupal()
    except ArtifactDeployError as e:
        console.print(f"[red]{EMOJI_ERROR} {escape(str(e))}[/red]")
        sys.exit(EXIT_FAILURE)

    console.print(f"[green]{EMOJI_SUCCESS} Site installed[/green]")
