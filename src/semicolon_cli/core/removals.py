"""
Removal planning: find terminators that form no statement of their own.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .classifier import CLASS_FIELD_KINDS, ParentContext
from .document_model import ProcessingContext, Removal, SyntaxNode
from .traversal import traverse


Span = Tuple[int, int]


class RemovalPlanner:
    """
    Records removals for stray empty statements and class-body separators.

    Empty statements are only redundant inside statement lists; as the body
    of a loop or conditional, or inside a loop header, they are meaningful
    and kept.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def plan(self, context: ProcessingContext) -> List[Removal]:
        """
        Append the removals for a document to its context.

        Args:
            context: Context holding the document and its tree

        Returns:
            The removals added by this run
        """
        spans: List[Span] = []

        for visit in traverse(context.root):
            node = visit.node
            if node.kind == "empty_statement" and visit.context is ParentContext.STATEMENT_LIST:
                spans.append((node.start, node.end))
            elif node.kind == "class_body":
                spans.extend(self._stray_class_separators(node))

        added = [context.add_removal(start, end) for start, end in coalesce(spans)]
        self.logger.debug(f"Planned {len(added)} removals from {len(spans)} stray terminators")
        return added

    def _stray_class_separators(self, class_body: SyntaxNode) -> List[Span]:
        """Find separators in a class body that do not close a field definition."""
        spans = []
        previous: Optional[SyntaxNode] = None

        for child in class_body.children:
            if child.is_trivia:
                continue
            if child.is_terminator and (previous is None or previous.kind not in CLASS_FIELD_KINDS):
                spans.append((child.start, child.end))
            previous = child

        return spans


def coalesce(spans: List[Span]) -> List[Span]:
    """Merge touching spans so each cluster is removed by one splice."""
    merged: List[Span] = []
    for start, end in sorted(spans):
        if start >= end:
            continue
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(end, merged[-1][1]))
        else:
            merged.append((start, end))
    return merged
