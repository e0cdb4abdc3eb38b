"""User interaction seam for the pipeline controller"""

from abc import ABC, abstractmethod
from typing import Optional


class Prompter(ABC):
    """Asks the operator for decisions the options left open"""

    @abstractmethod
    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question"""

    @abstractmethod
    def ask(self, question: str, default: Optional[str] = None) -> str:
        """Ask for a free-text answer"""


class NonInteractivePrompter(Prompter):
    """Answers every question with its default"""

    def confirm(self, question: str, default: bool = False) -> bool:
        return default

    def ask(self, question: str, default: Optional[str] = None) -> str:
        return default or ""
