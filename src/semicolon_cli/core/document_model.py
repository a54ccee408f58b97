"""
Core document model: source text, syntax tree and the patch plan.

The tree is produced by a parser collaborator and is never mutated here.
Patches are always expressed as offsets into the original text.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

from pydantic import BaseModel, model_validator


TERMINATOR = ";"

# Extras that may appear anywhere in a tree without affecting statement shape
TRIVIA_KINDS = frozenset({"comment", "html_comment", "hash_bang_line"})


class InconsistentOffsetsError(ValueError):
    """Raised when a syntax tree reports offsets that do not fit its document."""


class PatchConflictError(ValueError):
    """Raised when a finalized plan would touch the same text twice."""


class Insertion(BaseModel):
    """Text to insert at an offset of the original document."""

    index: int
    content: str = TERMINATOR


class Removal(BaseModel):
    """Half-open range of the original document to delete."""

    start: int
    end: int

    @model_validator(mode="after")
    def check_range(self) -> Removal:
        if self.start < 0 or self.start >= self.end:
            raise ValueError(f"Invalid removal range [{self.start}, {self.end})")
        return self

    def contains(self, offset: int) -> bool:
        """Check if an offset falls inside this range."""
        return self.start <= offset < self.end


@dataclass
class SyntaxNode:
    """A node of the parsed tree, with character offsets into the source."""

    kind: str
    start: int
    end: int
    named: bool = True
    field_name: Optional[str] = None
    children: List[SyntaxNode] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.kind}[{self.start}:{self.end}]"

    @property
    def is_trivia(self) -> bool:
        return self.kind in TRIVIA_KINDS

    @property
    def is_terminator(self) -> bool:
        return not self.named and self.kind == TERMINATOR

    @property
    def named_children(self) -> List[SyntaxNode]:
        return [child for child in self.children if child.named and not child.is_trivia]

    def child_by_field(self, name: str) -> Optional[SyntaxNode]:
        """Get the first child stored under a grammar field."""
        for child in self.children:
            if child.field_name == name:
                return child
        return None

    def last_significant_child(self) -> Optional[SyntaxNode]:
        """Get the last child that is not a comment."""
        for child in reversed(self.children):
            if not child.is_trivia:
                return child
        return None

    def last_significant_leaf(self) -> SyntaxNode:
        """Get the last token of the node, ignoring comments at every level."""
        node = self
        while True:
            last_child = node.last_significant_child()
            if last_child is None:
                return node
            node = last_child

    def walk(self) -> Iterator[SyntaxNode]:
        """Iterate over this node and its descendants in source order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def leaves(self) -> Iterator[SyntaxNode]:
        if not self.children:
            yield self
            return
        for child in self.children:
            yield from child.leaves()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SyntaxNode:
        """Create a tree from nested dictionaries (``type``/``start``/``end``/``children``)."""
        return cls(
            kind=data.get("type", data.get("kind", "")),
            start=data["start"],
            end=data["end"],
            named=data.get("named", True),
            field_name=data.get("field"),
            children=[cls.from_dict(child) for child in data.get("children", [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: Dict[str, Any] = {
            "type": self.kind,
            "start": self.start,
            "end": self.end,
            "named": self.named,
        }
        if self.field_name:
            result["field"] = self.field_name
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass(frozen=True)
class Token:
    """A leaf token of the parse."""

    kind: str
    start: int
    end: int
    named: bool = False

    @property
    def is_trivia(self) -> bool:
        return self.kind in TRIVIA_KINDS

    @property
    def is_terminator(self) -> bool:
        return not self.named and self.kind == TERMINATOR


class SourceDocument:
    """
    Immutable source text plus the token stream produced by parsing.

    Tokens are kept sorted by start offset so the planners can ask for the
    token that follows any position.
    """

    def __init__(self, text: str, tokens: Optional[Sequence[Token]] = None, path: Optional[str] = None):
        self._text = text
        self._tokens = tuple(sorted(tokens or (), key=lambda token: token.start))
        self._starts = [token.start for token in self._tokens]
        self.path = path

    @classmethod
    def from_tree(cls, text: str, root: SyntaxNode, path: Optional[str] = None) -> SourceDocument:
        """Build a document whose token stream is the leaves of a tree."""
        tokens = [Token(leaf.kind, leaf.start, leaf.end, leaf.named) for leaf in root.leaves() if leaf is not root]
        return cls(text, tokens, path=path)

    @property
    def text(self) -> str:
        return self._text

    @property
    def tokens(self) -> Sequence[Token]:
        return self._tokens

    def __len__(self) -> int:
        return len(self._text)

    def token_after(self, offset: int) -> Optional[Token]:
        """Get the first non-comment token starting at or after an offset."""
        for token in self._tokens[bisect_left(self._starts, offset):]:
            if not token.is_trivia:
                return token
        return None


class ProcessingContext:
    """
    Aggregates the document, its tree and the patch plan being built.

    Each planner appends to its own container; ``finalize`` performs the
    explicit merge step that restores ordering and checks that the two kinds
    of patch never touch the same text. A context is used for one document
    only.
    """

    def __init__(self, document: SourceDocument, root: SyntaxNode):
        self.document = document
        self.root = root
        self.insertions: List[Insertion] = []
        self.removals: List[Removal] = []
        self.is_finalized = False

        validate_offsets(root, len(document))

    @property
    def source(self) -> str:
        return self.document.text

    def add_insertion(self, index: int, content: str = TERMINATOR) -> Insertion:
        insertion = Insertion(index=index, content=content)
        self.insertions.append(insertion)
        return insertion

    def add_removal(self, start: int, end: int) -> Removal:
        removal = Removal(start=start, end=end)
        self.removals.append(removal)
        return removal

    def finalize(self) -> ProcessingContext:
        """Sort both containers by offset and verify the plan is conflict free."""
        insertions: List[Insertion] = []
        for insertion in sorted(self.insertions, key=lambda item: item.index):
            if insertions and insertions[-1].index == insertion.index:
                # Two statements ending at one offset need a single terminator
                continue
            insertions.append(insertion)

        removals = sorted(self.removals, key=lambda item: item.start)
        for previous, current in zip(removals, removals[1:]):
            if current.start < previous.end:
                raise PatchConflictError(
                    f"Overlapping removals [{previous.start}, {previous.end}) and [{current.start}, {current.end})"
                )

        for insertion in insertions:
            for removal in removals:
                if removal.contains(insertion.index):
                    raise PatchConflictError(
                        f"Insertion at {insertion.index} falls inside removal [{removal.start}, {removal.end})"
                    )

        self.insertions = insertions
        self.removals = removals
        self.is_finalized = True
        return self

    @property
    def has_changes(self) -> bool:
        return bool(self.insertions or self.removals)

    def get_stats(self) -> Dict[str, Any]:
        """Get plan statistics."""
        return {
            "path": self.document.path,
            "length": len(self.document),
            "insertions": len(self.insertions),
            "removals": len(self.removals),
            "removed_characters": sum(r.end - r.start for r in self.removals),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert the plan to the output contract."""
        return {
            "insertions": [insertion.model_dump() for insertion in self.insertions],
            "removals": [removal.model_dump() for removal in self.removals],
        }


def validate_offsets(root: SyntaxNode, length: int) -> None:
    """
    Check that every node lies inside the document and inside its parent.

    Raises:
        InconsistentOffsetsError: if the tree does not fit the document
    """
    stack = [root]
    while stack:
        node = stack.pop()
        if node.start < 0 or node.end > length or node.start > node.end:
            raise InconsistentOffsetsError(f"Node {node} does not fit a document of length {length}")

        previous_end = node.start
        for child in node.children:
            if child.start < node.start or child.end > node.end:
                raise InconsistentOffsetsError(f"Child {child} escapes its parent {node}")
            if child.start < previous_end:
                raise InconsistentOffsetsError(f"Child {child} overlaps a preceding sibling in {node}")
            previous_end = child.end
            stack.append(child)
