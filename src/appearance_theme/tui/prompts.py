"""Terminal prompt and confirmation collaborators built on rich."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from appearance_theme.core.errors import PromptCancelled
from appearance_theme.core.modes import Mode


class RichThemePrompt:
    """Numbered-list theme picker. Accepts a number or a theme name."""

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None) -> None:
        self.console = console or Console()
        self.stream = stream

    def __call__(
        self, mode: Mode, candidates: Sequence[str], default_hint: Optional[str]
    ) -> str:
        self.console.print(f"[bold]Choose a {mode.value} theme[/bold]")
        for index, name in enumerate(candidates, start=1):
            marker = " [dim](current)[/dim]" if name == default_hint else ""
            self.console.print(f"  {index}. {escape(name)}{marker}")

        numbered = [str(i) for i in range(1, len(candidates) + 1)]
        default = default_hint if default_hint in candidates else None
        try:
            answer = Prompt.ask(
                "Theme",
                console=self.console,
                choices=numbered + list(candidates),
                show_choices=False,
                default=default,
                stream=self.stream,
            )
        except (KeyboardInterrupt, EOFError) as e:
            raise PromptCancelled("Selection cancelled") from e
        if not answer:
            raise PromptCancelled("Selection cancelled")
        # A candidate whose name looks like a number wins over the index.
        if answer in candidates:
            return answer
        return candidates[int(answer) - 1]


class RichConfirm:
    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None) -> None:
        self.console = console or Console()
        self.stream = stream

    def __call__(self, question: str) -> bool:
        try:
            return Confirm.ask(question, console=self.console, default=False, stream=self.stream)
        except (KeyboardInterrupt, EOFError):
            return False


def always_yes(question: str) -> bool:
    return True
