"""Interactive utilities for CLI commands"""

from typing import Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt

from ...api.exceptions import UserCancelledError
from ...services.prompter import Prompter


class RichPrompter(Prompter):
    """Prompts on the terminal with rich

    Closed input (EOF) cancels the run instead of silently taking defaults.
    """

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def confirm(self, question: str, default: bool = False) -> bool:
        try:
            return Confirm.ask(f"[cyan]{question}[/cyan]", default=default, console=self.console)
        except EOFError:
            raise UserCancelledError() from None

    def ask(self, question: str, default: Optional[str] = None) -> str:
        try:
            if default:
                return Prompt.ask(f"[cyan]{question}[/cyan]", default=default, console=self.console)
            return Prompt.ask(f"[cyan]{question}[/cyan]", default="", show_default=False,
                              console=self.console)
        except EOFError:
            raise UserCancelledError() from None
