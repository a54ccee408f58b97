"""
Core statement-terminator planning modules.
"""

from .document_model import (
    InconsistentOffsetsError,
    Insertion,
    PatchConflictError,
    ProcessingContext,
    Removal,
    SourceDocument,
    SyntaxNode,
    Token,
)
from .classifier import ParentContext, StatementClassifier, TerminatorPolicy
from .insertions import InsertionPlanner
from .removals import RemovalPlanner
from .processor import SemicolonProcessor, process

__all__ = [
    "InconsistentOffsetsError",
    "Insertion",
    "PatchConflictError",
    "ProcessingContext",
    "Removal",
    "SourceDocument",
    "SyntaxNode",
    "Token",
    "ParentContext",
    "StatementClassifier",
    "TerminatorPolicy",
    "InsertionPlanner",
    "RemovalPlanner",
    "SemicolonProcessor",
    "process",
]
