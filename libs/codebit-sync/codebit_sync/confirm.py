"""Interactive confirmation for CodeBit updates."""

from typing import Callable

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

# A confirmer receives the prompt text and answers yes (True) or no (False).
Confirmer = Callable[[str], bool]

AFFIRMATIVE = ("y", "yes")


def console_confirm(prompt: str, console: Console | None = None) -> bool:
    """
    Ask a single yes/no question on the console.

    Only 'y' or 'yes' (any case) counts as yes; any other answer, including
    an empty line, is a no.
    """
    console = console or Console()
    answer = Prompt.ask(f"{escape(prompt)} [bold](Y/N)[/bold]", console=console, default="", show_default=False)
    accepted = answer.strip().lower() in AFFIRMATIVE
    console.print("   (Yes)" if accepted else "   (No)", style="dim")
    return accepted


def always_yes(prompt: str) -> bool:
    return True
