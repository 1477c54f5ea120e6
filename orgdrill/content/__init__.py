"""
Content: locating, parsing, and extracting review items from outline files.

Core modules:
- outline: OutlineNode tree model
- parser: org-mode text -> OutlineNode tree
- locator: candidate file search (ripgrep)
- extractor: OutlineNode tree -> exercises and definitions
"""

from .extractor import ItemExtractor
from .locator import FileLocator
from .outline import DOCUMENT, HEADING, OutlineNode
from .parser import OutlineParser

__all__ = [
    "OutlineNode",
    "DOCUMENT",
    "HEADING",
    "OutlineParser",
    "FileLocator",
    "ItemExtractor",
]
