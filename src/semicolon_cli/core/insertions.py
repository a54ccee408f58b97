"""
Insertion planning: find statements that rely on automatic semicolon insertion.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .classifier import StatementClassifier, TerminatorPolicy
from .document_model import TERMINATOR, Insertion, ProcessingContext, SourceDocument, SyntaxNode
from .traversal import traverse


class InsertionPlanner:
    """
    Records an insertion after every statement whose terminator is required
    but missing.

    Statements are evaluated independently: an exempt wrapper never hides
    the statements nested inside it.
    """

    def __init__(self, classifier: Optional[StatementClassifier] = None):
        self.classifier = classifier or StatementClassifier()
        self.logger = logging.getLogger(__name__)

    def plan(self, context: ProcessingContext) -> List[Insertion]:
        """
        Append the insertions for a document to its context.

        Args:
            context: Context holding the document and its tree

        Returns:
            The insertions added by this run
        """
        added: List[Insertion] = []

        for visit in traverse(context.root):
            node = visit.node
            if not visit.is_statement_position or not node.named or node.is_trivia:
                continue

            if not self.classifier.is_supported(node, visit.context):
                self.logger.debug(f"Leaving unsupported node {node} untouched")
                continue

            if self.classifier.is_ambiguous_export(node):
                self.logger.warning(
                    f"Export at offset {node.start} wraps an unrecognized declaration; "
                    f"using policy '{self.classifier.ambiguous_export_policy.value}'"
                )

            policy = self.classifier.terminator_policy(node, visit.context)
            if policy is TerminatorPolicy.EXEMPT:
                continue

            if self._is_terminated(node, context.document):
                continue

            added.append(context.add_insertion(node.last_significant_leaf().end, TERMINATOR))

        self.logger.debug(f"Planned {len(added)} insertions")
        return added

    def _is_terminated(self, node: SyntaxNode, document: SourceDocument) -> bool:
        """
        Check if a terminator closes the node or directly follows it.

        The terminator may sit inside a nested payload, as with
        `export var a = 1;`, and trailing comments are skipped.
        """
        last_leaf = node.last_significant_leaf()
        if last_leaf is not node and last_leaf.is_terminator:
            return True

        following = document.token_after(last_leaf.end)
        return following is not None and following.is_terminator
