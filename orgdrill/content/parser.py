"""
Outline parser for org-mode files.

Turns org text into an OutlineNode tree: headings nest by star count,
``:PROPERTIES:`` drawers attach to the heading they follow, and
``#+TITLE:`` names the document root.
"""

from __future__ import annotations

import re
from pathlib import Path

from loguru import logger

from orgdrill.content.outline import DOCUMENT, HEADING, OutlineNode
from orgdrill.core.errors import DocumentFormatError

DEFAULT_SUFFIXES = (".org",)


class OutlineParser:
    """Parser for org-mode outline documents."""

    HEADING_PATTERN = re.compile(r"^(\*+)(?:[ \t]+(.*?))?[ \t]*$")
    TAGS_PATTERN = re.compile(r"^(.*?)[ \t]+:([\w@#%:]+):$")
    TITLE_PATTERN = re.compile(r"^#\+title:[ \t]*(.*?)[ \t]*$", re.IGNORECASE)
    PROPERTY_PATTERN = re.compile(r"^[ \t]*:([^:\s]+):(?:[ \t]+(.*?))?[ \t]*$")
    DRAWER_START = re.compile(r"^[ \t]*:PROPERTIES:[ \t]*$", re.IGNORECASE)
    DRAWER_END = re.compile(r"^[ \t]*:END:[ \t]*$", re.IGNORECASE)
    PLANNING_PATTERN = re.compile(r"^[ \t]*(SCHEDULED|DEADLINE|CLOSED):")

    def __init__(self, suffixes: tuple[str, ...] = DEFAULT_SUFFIXES):
        self.suffixes = tuple(s.lower() for s in suffixes)

    def parse_file(self, path: Path | str) -> OutlineNode:
        """Read and parse a single file."""
        path = Path(path)

        if path.suffix.lower() not in self.suffixes:
            raise DocumentFormatError(path, f"not an outline document (expected {', '.join(self.suffixes)})")

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DocumentFormatError(path, f"not valid UTF-8 ({e.reason})") from e
        except OSError as e:
            raise DocumentFormatError(path, f"unreadable ({e.strerror or e})") from e

        root = self.parse(text, source=path)
        logger.debug(f"Parsed {path}: {sum(1 for node in root.walk() if node.is_heading)} headings")
        return root

    def parse(self, text: str, source: Path | None = None) -> OutlineNode:
        """Parse outline text into a tree rooted at a document node."""
        root = OutlineNode(kind=DOCUMENT, title="", level=0, source=source)
        stack = [root]
        current = root
        in_drawer = False
        drawer_allowed = True

        for line_number, line in enumerate(text.splitlines(), start=1):
            if in_drawer:
                if self.DRAWER_END.match(line):
                    in_drawer = False
                    drawer_allowed = False
                    continue
                prop = self.PROPERTY_PATTERN.match(line)
                if prop:
                    current.properties[prop.group(1).upper()] = (prop.group(2) or "").strip()
                else:
                    logger.warning(f"{source or '<text>'}:{line_number}: ignoring malformed property line")
                continue

            heading_match = self.HEADING_PATTERN.match(line)
            if heading_match:
                level = len(heading_match.group(1))
                title, tags = self._split_tags(heading_match.group(2) or "")
                node = OutlineNode(
                    kind=HEADING,
                    title=title,
                    level=level,
                    tags=tags,
                    line_number=line_number,
                    source=source,
                )
                while stack[-1].level >= level:
                    stack.pop()
                stack[-1].children.append(node)
                stack.append(node)
                current = node
                drawer_allowed = True
                continue

            if drawer_allowed and self.DRAWER_START.match(line):
                in_drawer = True
                continue

            if current is root:
                title_match = self.TITLE_PATTERN.match(line)
                if title_match:
                    root.title = title_match.group(1)
                    continue
                if line.strip() and not line.startswith("#+"):
                    drawer_allowed = False
            elif line.strip() and not self.PLANNING_PATTERN.match(line):
                drawer_allowed = False

            current.body.append(line)

        if in_drawer:
            logger.warning(f"{source or '<text>'}: unterminated :PROPERTIES: drawer")

        for node in root.walk():
            _trim_blank_lines(node.body)
        return root

    def _split_tags(self, heading: str) -> tuple[str, list[str]]:
        match = self.TAGS_PATTERN.match(heading)
        if not match:
            return heading.strip(), []
        tags = [tag for tag in match.group(2).split(":") if tag]
        return match.group(1).strip(), tags


def _trim_blank_lines(lines: list[str]) -> None:
    while lines and not lines[-1].strip():
        lines.pop()
    while lines and not lines[0].strip():
        lines.pop(0)
