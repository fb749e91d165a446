"""Interactive prompts for component metadata and entry file selection."""

from __future__ import annotations

from typing import Callable, Sequence

from rich.prompt import IntPrompt
from rich.table import Table

from .models import ComponentMetadata, EntryFileSelection
from .utils import console

QUESTIONS: dict[str, str] = {
    "name": "What is the name of the main component? Example: awesomeComponent \n",
    "description": "Describe your component. Example: This is the BeSt coMponEnt EveR \n",
    "author_name": "What is the name of the author? Example: Elon Musk \n",
    "author_website": "What is the website of the author? Example: elonmusk.com \n",
}

ENTRY_QUESTION = "Which file is the entry point of your component?"

AskFn = Callable[[str], str]
ChooseFn = Callable[[str, Sequence[str]], str]


def _console_ask(question: str) -> str:
    return console.input(f"[yellow]{question}[/yellow]")


def _console_choose(question: str, candidates: Sequence[str]) -> str:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", justify="right")
    table.add_column("File")
    for index, name in enumerate(candidates, start=1):
        table.add_row(str(index), name)
    console.print(table)

    choice = IntPrompt.ask(
        f"[yellow]{question}[/yellow]",
        console=console,
        choices=[str(i) for i in range(1, len(candidates) + 1)],
        show_choices=False,
    )
    return candidates[choice - 1]


class PromptCollector:
    """Asks the operator for component metadata.

    ``ask`` and ``choose`` default to Rich console prompts and can be swapped
    for scripted callables.
    """

    def __init__(self, ask: AskFn | None = None, choose: ChooseFn | None = None) -> None:
        self.ask = ask or _console_ask
        self.choose = choose or _console_choose

    def collect(self) -> ComponentMetadata:
        """Ask the four metadata questions in order.

        Answers are kept verbatim, including empty strings.
        """
        answers = {field: self.ask(question) for field, question in QUESTIONS.items()}
        return ComponentMetadata(**answers)

    def select_entry(self, candidates: Sequence[str]) -> EntryFileSelection:
        """Ask the operator to pick one of *candidates* as the entry file."""
        selected = self.choose(ENTRY_QUESTION, list(candidates))
        return EntryFileSelection(candidate_list=tuple(candidates), selected=selected)
