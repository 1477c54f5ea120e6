"""
Delivery: terminal rendering for review sessions.
"""

from orgdrill.delivery.terminal import TerminalDisplay, choice_legend, item_panel

__all__ = [
    "TerminalDisplay",
    "choice_legend",
    "item_panel",
]
