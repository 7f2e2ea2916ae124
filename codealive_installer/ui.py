"""Terminal interaction for the installer wizard.

All user-facing output and prompts go through a UI instance so the wizard
can be driven by a scripted stand-in in tests.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.spinner import Spinner

from codealive_installer.exceptions import CancelledByUser


@dataclass(frozen=True)
class Choice:
    """One option of a multi-select prompt."""

    value: str
    label: str
    hint: str = ""


def parse_selection(raw: str, choices: Sequence[Choice]) -> list[str]:
    """Turn a multi-select answer into choice values.

    Accepts 1-based numbers, values or labels separated by commas, plus
    the keywords "all" and "none". Numbers may also be separated by spaces.
    Order follows the choices, not the input.

    Raises:
        ValueError: If a token matches no choice

    Examples:
        >>> opts = [Choice("a", "Alpha"), Choice("b", "Beta")]
        >>> parse_selection("2, alpha", opts)
        ['a', 'b']
    """
    tokens = [token.strip() for token in raw.split(",") if token.strip()]
    if tokens and all(part.isdigit() for token in tokens for part in token.split()):
        tokens = [part for token in tokens for part in token.split()]
    picked: set[str] = set()
    for token in tokens:
        lowered = token.lower()
        if lowered == "none":
            continue
        if lowered == "all":
            picked.update(choice.value for choice in choices)
            continue
        if token.isdigit() and 1 <= int(token) <= len(choices):
            picked.add(choices[int(token) - 1].value)
            continue
        match = next(
            (c for c in choices if lowered in (c.value.lower(), c.label.lower())),
            None,
        )
        if match is None:
            raise ValueError(f"Unknown option '{token}'")
        picked.add(match.value)
    return [choice.value for choice in choices if choice.value in picked]


class UI:
    """Rich-based console front end."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def intro(self, title: str) -> None:
        self.console.print()
        self.console.print(Panel.fit(f"[bold]{title}[/bold]", border_style="cyan"))

    def outro(self, message: str) -> None:
        self.console.print(message)
        self.console.print()

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]•[/cyan] {message}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]Error:[/red] {message}")

    def note(self, message: str, title: str) -> None:
        self.console.print(Panel(message, title=title, expand=False))

    def cancel(self, message: str = "Setup cancelled.") -> None:
        self.console.print(f"[yellow]{message}[/yellow]")

    @contextmanager
    def spinner(self, text: str) -> Iterator[None]:
        """Show a spinner while the block runs."""
        with Live(Spinner("dots", text=text), console=self.console, transient=True):
            yield

    def confirm(self, message: str, default: bool = True) -> bool:
        try:
            return Confirm.ask(message, default=default, console=self.console)
        except (KeyboardInterrupt, EOFError) as e:
            raise CancelledByUser() from e

    def password(self, message: str, required_message: str = "A value is required.") -> str:
        """Ask for a secret without echoing it. Blank answers are re-asked."""
        while True:
            try:
                value = Prompt.ask(message, password=True, console=self.console)
            except (KeyboardInterrupt, EOFError) as e:
                raise CancelledByUser() from e
            if value.strip():
                return value.strip()
            self.error(required_message)

    def multiselect(
        self,
        message: str,
        choices: Sequence[Choice],
        initial: Sequence[str] = (),
        required: bool = False,
    ) -> list[str]:
        """Let the user pick any number of choices from a numbered list.

        Args:
            message: Question shown above the list
            choices: Options in display order
            initial: Values selected when the user just presses Enter
            required: Re-ask until at least one option is picked

        Returns:
            Selected values in choice order
        """
        self.console.print(f"[bold]{message}[/bold]")
        for index, choice in enumerate(choices, start=1):
            mark = "[green]●[/green]" if choice.value in initial else "○"
            hint = f" [dim]({escape(choice.hint)})[/dim]" if choice.hint else ""
            self.console.print(f"  {mark} {index}. {escape(choice.label)}{hint}")

        default = ",".join(
            str(index) for index, choice in enumerate(choices, start=1) if choice.value in initial
        )
        question = "Numbers separated by commas"
        if not required:
            question += " ('none' to skip)"

        while True:
            try:
                raw = Prompt.ask(
                    question,
                    default=default,
                    show_default=bool(default),
                    console=self.console,
                )
            except (KeyboardInterrupt, EOFError) as e:
                raise CancelledByUser() from e
            try:
                selected = parse_selection(raw or "", choices)
            except ValueError as e:
                self.error(str(e))
                continue
            if required and not selected:
                self.error("Select at least one option.")
                continue
            return selected
