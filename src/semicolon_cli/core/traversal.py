"""
Shared tree traversal that threads structural context down to every node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from .classifier import ParentContext, child_context
from .document_model import SyntaxNode


@dataclass(frozen=True)
class Visit:
    """A node reached by the traversal, with the position its parent gave it."""

    node: SyntaxNode
    parent: Optional[SyntaxNode]
    context: ParentContext

    @property
    def is_statement_position(self) -> bool:
        return self.context is not ParentContext.EXPRESSION


def traverse(root: SyntaxNode) -> Iterator[Visit]:
    """
    Visit every node in post-order.

    Children are yielded before their parent, so the end offsets of the
    visited nodes never decrease.
    """
    yield from _visit(root, None, ParentContext.EXPRESSION)


def _visit(node: SyntaxNode, parent: Optional[SyntaxNode], context: ParentContext) -> Iterator[Visit]:
    for child in node.children:
        yield from _visit(child, node, child_context(node, child))
    yield Visit(node, parent, context)
