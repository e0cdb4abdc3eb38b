# artifact_deploy/cli/utils/output.py
"""Output formatting utilities"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING
from ...models import DeployResult, OperationStatus

console = Console()

_STATUS_STYLE = {
    OperationStatus.SUCCESS: ("green", EMOJI_SUCCESS),
    OperationStatus.SKIPPED: ("yellow", "-"),
    OperationStatus.FAILED: ("red", EMOJI_ERROR),
}


def format_stages(result: DeployResult) -> Table:
    """Build a table of executed stages"""
    table = Table(title="Stages")
    table.add_column("Stage", style="cyan")
    table.add_column("State")
    table.add_column("Status")
    table.add_column("Details", overflow="fold")

    for stage in result.stages:
        style, mark = _STATUS_STYLE.get(stage.status, ("white", "?"))
        table.add_row(
            stage.name,
            stage.state.value,
            f"[{style}]{mark} {stage.status.value}[/{style}]",
            escape(stage.message)
        )
    return table


def format_deploy_result(result: DeployResult, show_stages: bool = False) -> None:
    """Format and display deploy operation result"""
    if show_stages or not result.success:
        console.print(format_stages(result))

    if result.success:
        lines = [f"[green]{EMOJI_SUCCESS}[/green] Artifact deployed successfully!", ""]

        context = result.context
        if context is not None:
            if context.is_tag:
                lines.append(f"[bold]Tag:[/bold] {escape(context.tag_name)}")
            else:
                lines.append(f"[bold]Branch:[/bold] {escape(context.working_branch)}")
            lines.append(f"[bold]Remotes:[/bold] {len(context.remotes)}")
            lines.append(f"[bold]Pushed:[/bold] {'yes' if result.pushed else 'no (dry run)'}")

        for warning in result.warnings:
            lines.append(f"[yellow]{EMOJI_WARNING} {escape(warning)}[/yellow]")

        if result.duration is not None:
            lines.append(f"[dim]Duration: {result.duration:.2f}s[/dim]")

        console.print(Panel("\n".join(lines), title="Deploy Result", border_style="green"))

    else:
        failed = result.failed_stage
        stage = f" during '{failed.name}'" if failed else ""
        code = f" [dim]({failed.error.code})[/dim]" if failed and failed.error else ""
        panel = Panel(
            f"[red]{EMOJI_ERROR} Deploy failed{stage}:[/red] {escape(result.error or 'unknown error')}{code}",
            title="Deploy Error",
            border_style="red"
        )
        console.print(panel)


def format_build_result(result: DeployResult) -> None:
    """Format and display build operation result"""
    if result.success:
        console.print(f"[green]{EMOJI_SUCCESS} Build completed[/green]")
        for warning in result.warnings:
            console.print(f"[yellow]{EMOJI_WARNING} {escape(warning)}[/yellow]")
        return

    console.print(format_stages(result))
    console.print(Panel(
        f"[red]{EMOJI_ERROR} Build failed:[/red] {escape(result.error or 'unknown error')}",
        title="Build Error",
        border_style="red"
    ))
