"""
Applies a finalized patch plan to the original source text.
"""

from __future__ import annotations

import difflib
from typing import List, Sequence, Tuple, Union

from ..core.document_model import Insertion, ProcessingContext, Removal


Patch = Union[Insertion, Removal]


class PatchApplier:
    """
    Splices insertions and removals into text in a single forward pass.

    Every patch refers to the original text, so no offset adjustment is
    needed while the output is assembled.
    """

    def apply(self, context: ProcessingContext) -> str:
        """Apply the plan held by a context to its source."""
        if not context.is_finalized:
            context.finalize()
        return apply_patches(context.source, context.insertions, context.removals)

    def unified_diff(self, context: ProcessingContext, path: str = "source") -> str:
        """Render the effect of the plan as a unified diff."""
        before = context.source.splitlines(keepends=True)
        after = self.apply(context).splitlines(keepends=True)
        return "".join(difflib.unified_diff(before, after, fromfile=f"a/{path}", tofile=f"b/{path}"))


def apply_patches(text: str, insertions: Sequence[Insertion], removals: Sequence[Removal]) -> str:
    """
    Apply patches expressed in original-text offsets.

    Args:
        text: Original text
        insertions: Insertions, any order
        removals: Non-overlapping removals, any order

    Returns:
        The patched text
    """
    edits: List[Tuple[int, int, Patch]] = [(r.start, 0, r) for r in removals]
    edits.extend((i.index, 1, i) for i in insertions)
    edits.sort(key=lambda edit: (edit[0], edit[1]))

    pieces: List[str] = []
    cursor = 0
    for offset, _, patch in edits:
        if offset < cursor:
            raise ValueError(f"Patch at offset {offset} overlaps an earlier removal ending at {cursor}")
        pieces.append(text[cursor:offset])
        if isinstance(patch, Removal):
            cursor = patch.end
        else:
            pieces.append(patch.content)
            cursor = offset
    pieces.append(text[cursor:])

    return "".join(pieces)
