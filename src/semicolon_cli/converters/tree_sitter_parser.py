"""
Parser adapter turning JavaScript source into a processing context.

Uses tree-sitter with the JavaScript grammar. The concrete tree keeps every
token, including the `;` tokens the planners care about, and is converted
into SyntaxNode objects carrying character offsets and grammar field names.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, TreeCursor

from ..core.document_model import ProcessingContext, SourceDocument, SyntaxNode


JAVASCRIPT = Language(tree_sitter_javascript.language())


class SourceSyntaxError(ValueError):
    """Raised when the source does not parse cleanly."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.line = line
        self.column = column


class TreeSitterParser:
    """
    Parses JavaScript modules with tree-sitter.

    Malformed input is rejected here so that the planners only ever see
    complete trees.
    """

    def __init__(self):
        self.parser = Parser(JAVASCRIPT)
        self.logger = logging.getLogger(__name__)

    def parse(self, text: str, path: Optional[Union[str, Path]] = None) -> ProcessingContext:
        """
        Parse source text into a fresh processing context.

        Args:
            text: JavaScript module source
            path: Optional file path, used in messages only

        Returns:
            ProcessingContext ready for planning

        Raises:
            SourceSyntaxError: if the source contains syntax errors
        """
        encoded = text.encode("utf-8")
        tree = self.parser.parse(encoded)

        if tree.root_node.has_error:
            self._raise_syntax_error(tree.root_node, path)

        to_char = _offset_converter(text, encoded)
        root = self._convert(tree.walk(), to_char)
        document = SourceDocument.from_tree(text, root, path=str(path) if path else None)

        self.logger.debug(f"Parsed {path or '<source>'} into {sum(1 for _ in root.walk())} nodes")
        return ProcessingContext(document, root)

    def parse_file(self, path: Path) -> ProcessingContext:
        """Read and parse a source file."""
        return self.parse(path.read_text(encoding="utf-8"), path)

    def _convert(self, cursor: TreeCursor, to_char: Callable[[int], int]) -> SyntaxNode:
        node = cursor.node
        result = SyntaxNode(
            kind=node.type,
            start=to_char(node.start_byte),
            end=to_char(node.end_byte),
            named=node.is_named,
            field_name=cursor.field_name,
        )

        if cursor.goto_first_child():
            while True:
                result.children.append(self._convert(cursor, to_char))
                if not cursor.goto_next_sibling():
                    break
            cursor.goto_parent()

        return result

    def _raise_syntax_error(self, root: Node, path: Optional[Union[str, Path]]) -> None:
        culprit = _find_error(root) or root
        line = culprit.start_point[0] + 1
        column = culprit.start_point[1] + 1
        label = "Missing token" if culprit.is_missing else "Syntax error"
        raise SourceSyntaxError(f"{label} in {path or '<source>'} at line {line}, column {column}", line, column)


def _find_error(node: Node) -> Optional[Node]:
    """Find the first error or missing node in source order."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _find_error(child)
            if found is not None:
                return found
    return None


def _offset_converter(text: str, encoded: bytes) -> Callable[[int], int]:
    """Build a byte offset to character offset mapping for the source."""
    if len(encoded) == len(text):
        return lambda offset: offset

    table: List[int] = []
    for index, char in enumerate(text):
        table.extend([index] * len(char.encode("utf-8")))
    table.append(len(text))
    return lambda offset: table[offset]
