"""
Item extraction from outline trees.

Walks a parsed outline depth-first and turns every heading typed as an
exercise or a definition into a LearningItem. Children are visited before
their parent is classified, so nested items come out ahead of the items
that contain them (leaves-first review order).

A typed heading that is missing its ID or its question/answer subheadings
is an authoring error and raises immediately; nothing is skipped silently.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from orgdrill.content.outline import OutlineNode
from orgdrill.core.errors import MalformedDefinition, MalformedExercise, MalformedItem
from orgdrill.core.models import Definition, Exercise, LearningItem, is_valid_item_id

SUBJECT_SEPARATOR = " / "


class ItemExtractor:
    """Classify outline headings into exercises and definitions."""

    def __init__(self, exercise_type_id: str, definition_type_id: str):
        if not exercise_type_id or not definition_type_id:
            raise ValueError("Both exercise and definition type identifiers are required")
        if exercise_type_id == definition_type_id:
            raise ValueError("Exercise and definition type identifiers must differ")
        self.exercise_type_id = exercise_type_id
        self.definition_type_id = definition_type_id

    def extract(self, root: OutlineNode) -> list[LearningItem]:
        """Return every item in the tree, leaves first."""
        items: list[LearningItem] = []
        self._visit(root, [], items)
        logger.debug(f"Extracted {len(items)} items from {root.source or '<text>'}")
        return items

    def _visit(self, node: OutlineNode, ancestors: list[str], items: list[LearningItem]) -> None:
        path = ancestors + [node.title] if node.title else ancestors
        for child in node.children:
            self._visit(child, path, items)

        item = self._classify(node, path)
        if item is not None:
            items.append(item)

    def _classify(self, node: OutlineNode, path: list[str]) -> LearningItem | None:
        if not node.is_heading:
            return None

        item_type = node.get_property("TYPE")
        if item_type == self.exercise_type_id:
            return self._exercise(node, path)
        if item_type == self.definition_type_id:
            return self._definition(node, path)
        return None

    def _exercise(self, node: OutlineNode, path: list[str]) -> Exercise:
        item_id = self._require_id(node, MalformedExercise)

        headings = node.headings()
        if not headings:
            raise self._error(MalformedExercise, "no question/answer subheadings", node)
        if len(headings) < 2:
            raise self._error(MalformedExercise, "no answer subheading", node)

        question = headings[0].render(depth=1)
        answer = headings[1].render(depth=1)

        return Exercise(
            id=item_id,
            subject=SUBJECT_SEPARATOR.join(path),
            question=question,
            answer=answer,
            source=node.source,
        )

    def _definition(self, node: OutlineNode, path: list[str]) -> Definition:
        item_id = self._require_id(node, MalformedDefinition)

        content = node.render(depth=1)

        return Definition(
            id=item_id,
            subject=SUBJECT_SEPARATOR.join(path),
            content=content,
            source=node.source,
        )

    def _require_id(self, node: OutlineNode, error: type[MalformedItem]) -> str:
        item_id = node.get_property("ID")
        if not item_id:
            raise self._error(error, "missing ID", node)
        if not is_valid_item_id(item_id):
            raise self._error(error, f"invalid ID {item_id!r} (expected a UUID)", node)
        return item_id

    @staticmethod
    def _error(error: type[MalformedItem], rule: str, node: OutlineNode) -> MalformedItem:
        source: Path | None = node.source
        return error(rule, source=source, line_number=node.line_number)
