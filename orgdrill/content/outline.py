"""
Outline document model.

An org-mode file is held as a tree of OutlineNode objects. The root is a
synthetic ``document`` node (level 0) and every heading below it is a
``heading`` node whose level is its number of leading stars.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

DOCUMENT = "document"
HEADING = "heading"


@dataclass
class OutlineNode:
    """A heading (or the document root) with its body, properties and children."""

    kind: str
    title: str
    level: int = 0
    body: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)
    children: list[OutlineNode] = field(default_factory=list)
    line_number: int = 0
    source: Path | None = None

    @property
    def is_heading(self) -> bool:
        return self.kind == HEADING

    def get_property(self, name: str) -> str | None:
        """Property lookup; names are case-insensitive."""
        value = self.properties.get(name.upper())
        if value is None:
            return None
        return value.strip()

    def headings(self) -> list[OutlineNode]:
        """Direct child headings in document order."""
        return [child for child in self.children if child.is_heading]

    def walk(self) -> Iterator[OutlineNode]:
        """Pre-order traversal of this subtree."""
        yield self
        for child in self.children:
            yield from child.walk()

    def render(self, depth: int = 1) -> str:
        """
        Render the subtree as outline text.

        The node's own heading is written with ``depth`` stars and every
        descendant keeps its level relative to this node. Property drawers
        are not rendered.
        """
        lines = self._render_lines(depth)
        return "\n".join(lines).strip("\n")

    def _render_lines(self, depth: int) -> list[str]:
        lines: list[str] = []
        if self.is_heading:
            heading = f"{'*' * depth} {self.title}".rstrip()
            if self.tags:
                heading += f" :{':'.join(self.tags)}:"
            lines.append(heading)
            offset = depth - self.level
        else:
            offset = depth - 1
        lines.extend(self.body)
        for child in self.children:
            lines.extend(child._render_lines(child.level + offset))
        return lines
