"""
Statement classification for terminator requirements.

Maps a node kind, together with the structural position it occupies, to a
terminator policy. Kind names follow the tree-sitter JavaScript grammar.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet

from .document_model import SyntaxNode


class TerminatorPolicy(Enum):
    """Whether a statement must end with a terminator."""
    REQUIRED = "required"
    EXEMPT = "exempt"


class ParentContext(Enum):
    """Structural position of a node, as decided by its parent."""
    STATEMENT_LIST = "statement_list"
    EMBEDDED_BODY = "embedded_body"
    LOOP_HEADER = "loop_header"
    EXPORT_PAYLOAD = "export_payload"
    CLASS_BODY = "class_body"
    EXPRESSION = "expression"


# Statements whose syntax ends with a terminator
TERMINATED_STATEMENT_KINDS: FrozenSet[str] = frozenset({
    "expression_statement",
    "variable_declaration",
    "lexical_declaration",
    "return_statement",
    "throw_statement",
    "continue_statement",
    "break_statement",
    "debugger_statement",
    "do_statement",
    "import_statement",
})

# Statements closed by their own braces or by a nested statement
SELF_TERMINATED_KINDS: FrozenSet[str] = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "statement_block",
    "if_statement",
    "for_statement",
    "for_in_statement",
    "while_statement",
    "try_statement",
    "switch_statement",
    "labeled_statement",
    "with_statement",
    "empty_statement",
})

EXPORTED_BLOCK_DECLARATION_KINDS: FrozenSet[str] = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
})

EXPORTED_TERMINATED_DECLARATION_KINDS: FrozenSet[str] = frozenset({
    "variable_declaration",
    "lexical_declaration",
})

# `export default function () {}` is a hoisted declaration even without a name
DEFAULT_EXPORT_FUNCTION_KINDS: FrozenSet[str] = frozenset({
    "function",
    "function_expression",
    "generator_function",
})

CLASS_FIELD_KINDS: FrozenSet[str] = frozenset({"field_definition", "public_field_definition"})

CLASS_MEMBER_KINDS: FrozenSet[str] = frozenset({
    "method_definition",
    "class_static_block",
    "decorator",
}) | CLASS_FIELD_KINDS

STATEMENT_CONTAINER_KINDS: FrozenSet[str] = frozenset({"program", "statement_block"})
SWITCH_CLAUSE_KINDS: FrozenSet[str] = frozenset({"switch_case", "switch_default"})
LOOP_KINDS: FrozenSet[str] = frozenset({"for_statement", "for_in_statement"})
BODY_OWNER_KINDS: FrozenSet[str] = frozenset({
    "while_statement",
    "do_statement",
    "with_statement",
    "labeled_statement",
})


def child_context(parent: SyntaxNode, child: SyntaxNode) -> ParentContext:
    """Decide the structural position a parent gives one of its children."""
    kind = parent.kind

    if kind in STATEMENT_CONTAINER_KINDS:
        return ParentContext.STATEMENT_LIST
    if kind in SWITCH_CLAUSE_KINDS:
        if child.field_name == "value":
            return ParentContext.EXPRESSION
        return ParentContext.STATEMENT_LIST
    if kind in LOOP_KINDS:
        if child.field_name == "body":
            return ParentContext.EMBEDDED_BODY
        return ParentContext.LOOP_HEADER
    if kind in BODY_OWNER_KINDS:
        if child.field_name == "body":
            return ParentContext.EMBEDDED_BODY
        return ParentContext.EXPRESSION
    if kind == "if_statement":
        if child.field_name == "consequence":
            return ParentContext.EMBEDDED_BODY
        return ParentContext.EXPRESSION
    if kind == "else_clause":
        return ParentContext.EMBEDDED_BODY
    if kind == "export_statement":
        if child.field_name == "declaration":
            return ParentContext.EXPORT_PAYLOAD
        return ParentContext.EXPRESSION
    if kind == "class_body":
        return ParentContext.CLASS_BODY

    return ParentContext.EXPRESSION


class StatementClassifier:
    """
    Context-aware classifier deciding whether a statement needs a terminator.

    The classifier never walks the tree: callers pass the structural context
    of the node, and the only children it looks at are an export's payload.
    """

    def __init__(self, ambiguous_export_policy: TerminatorPolicy = TerminatorPolicy.REQUIRED):
        self.ambiguous_export_policy = ambiguous_export_policy

    def terminator_policy(self, node: SyntaxNode, parent_context: ParentContext) -> TerminatorPolicy:
        """Get the terminator policy for a node in the given position."""
        if parent_context in (ParentContext.LOOP_HEADER, ParentContext.EXPORT_PAYLOAD, ParentContext.EXPRESSION):
            return TerminatorPolicy.EXEMPT

        kind = node.kind

        if parent_context is ParentContext.CLASS_BODY:
            if kind in CLASS_FIELD_KINDS:
                return TerminatorPolicy.REQUIRED
            return TerminatorPolicy.EXEMPT

        if kind in TERMINATED_STATEMENT_KINDS:
            return TerminatorPolicy.REQUIRED
        if kind == "export_statement":
            return self.export_policy(node)
        if kind in SELF_TERMINATED_KINDS:
            return TerminatorPolicy.EXEMPT

        # Unsupported kinds are left untouched
        return TerminatorPolicy.EXEMPT

    def export_policy(self, node: SyntaxNode) -> TerminatorPolicy:
        """Get the policy of an export statement from its payload."""
        declaration = node.child_by_field("declaration")
        value = node.child_by_field("value")

        if declaration is not None:
            if declaration.kind in EXPORTED_BLOCK_DECLARATION_KINDS:
                return TerminatorPolicy.EXEMPT
            if declaration.kind in EXPORTED_TERMINATED_DECLARATION_KINDS:
                return TerminatorPolicy.REQUIRED
            return self.ambiguous_export_policy

        if value is not None and value.kind in DEFAULT_EXPORT_FUNCTION_KINDS:
            return TerminatorPolicy.EXEMPT

        # Expressions, class expressions, export lists and re-exports
        return TerminatorPolicy.REQUIRED

    def is_ambiguous_export(self, node: SyntaxNode) -> bool:
        """Check if an export wraps a declaration shape the table does not know."""
        if node.kind != "export_statement":
            return False
        declaration = node.child_by_field("declaration")
        if declaration is None:
            return False
        return declaration.kind not in (EXPORTED_BLOCK_DECLARATION_KINDS | EXPORTED_TERMINATED_DECLARATION_KINDS)

    def is_supported(self, node: SyntaxNode, parent_context: ParentContext) -> bool:
        """Check if the node kind is covered by the policy table for its position."""
        if parent_context in (ParentContext.LOOP_HEADER, ParentContext.EXPORT_PAYLOAD):
            return True
        if parent_context is ParentContext.CLASS_BODY:
            return node.kind in CLASS_MEMBER_KINDS
        return (
            node.kind in TERMINATED_STATEMENT_KINDS
            or node.kind in SELF_TERMINATED_KINDS
            or node.kind == "export_statement"
        )
