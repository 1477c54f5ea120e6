"""
Terminal display for review sessions.

Renders items as rich panels and reads one-key answers. Anything with the
same ``show``/``ask`` pair (a GUI window, a test double) can stand in for it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.style import Style
from rich.text import Text

from orgdrill.review.session import Choice

# =============================================================================
# THEME
# =============================================================================

THEME = {
    "primary": "#5FAFD7",  # steel blue - item frame
    "accent": "#AF87D7",  # lavender - key hints
    "success": "#00D787",  # green - success outcome
    "warning": "#FFD75F",  # gold - skip / notices
    "error": "#FF5F5F",  # red - failure / errors
    "dim": "#808080",  # grey - secondary text
}

STYLES = {
    "primary": Style(color=THEME["primary"], bold=True),
    "accent": Style(color=THEME["accent"], bold=True),
    "success": Style(color=THEME["success"], bold=True),
    "warning": Style(color=THEME["warning"], bold=True),
    "error": Style(color=THEME["error"], bold=True),
    "dim": Style(color=THEME["dim"]),
}

DEFAULT_KEYS = {
    Choice.REVEAL: "r",
    Choice.SKIP: "s",
    Choice.QUIT: "q",
    Choice.SUCCESS: "y",
    Choice.FAILURE: "n",
}


def item_panel(subject: str, item_id: str, content: str) -> Panel:
    """Panel showing one side of an item, titled with its subject and id."""
    title = Text(subject or "(untitled)", style=STYLES["primary"])
    subtitle = Text(item_id, style=STYLES["dim"])
    return Panel(
        Text(content),
        title=title,
        title_align="left",
        subtitle=subtitle,
        subtitle_align="right",
        border_style=Style(color=THEME["primary"]),
        box=box.ROUNDED,
        padding=(1, 2),
    )


def choice_legend(choices: Sequence[Choice], keys: Mapping[Choice, str]) -> Text:
    """One-line hint such as ``[r] reveal  [s] skip  [q] quit``."""
    legend = Text()
    for index, choice in enumerate(choices):
        if index:
            legend.append("  ")
        legend.append(f"[{keys[choice]}]", style=STYLES["accent"])
        legend.append(f" {choice.value}", style=STYLES["dim"])
    return legend


class TerminalDisplay:
    """Display/input surface backed by a rich Console."""

    def __init__(self, console: Console | None = None, keys: Mapping[str | Choice, str] | None = None):
        self.console = console or Console()
        self.keys: dict[Choice, str] = dict(DEFAULT_KEYS)
        for name, key in (keys or {}).items():
            self.keys[Choice(name)] = key

    def show(self, subject: str, item_id: str, content: str) -> None:
        self.console.print(item_panel(subject, item_id, content))

    def ask(self, choices: Sequence[Choice]) -> Choice:
        by_key = {self.keys[choice]: choice for choice in choices}
        self.console.print(choice_legend(choices, self.keys))
        answer = Prompt.ask(
            ">",
            console=self.console,
            choices=list(by_key),
            show_choices=False,
        )
        return by_key[answer]
