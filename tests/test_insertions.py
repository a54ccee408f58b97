"""Tests for insertion planning on parsed JavaScript."""

import pytest

from semicolon_cli.converters.patch_applier import PatchApplier
from semicolon_cli.core.document_model import Insertion, ProcessingContext, SourceDocument, SyntaxNode
from semicolon_cli.core.insertions import InsertionPlanner
from semicolon_cli.core.processor import SemicolonProcessor


def semi(index):
    return {"index": index, "content": ";"}


# --- Statement kinds ---


@pytest.mark.parametrize(
    "source, expected",
    [
        ("foo", [semi(3)]),
        ("foo;", []),
        ("for (var i = 0; i < 2; i++) {}", []),
        ("function foo() { return 21 }", [semi(26)]),
        ("throw 1", [semi(7)]),
        ("for (;;) { continue }", [semi(19)]),
        ("do {} while (true)", [semi(18)]),
        ("for (;;) { break }", [semi(16)]),
        ("debugger", [semi(8)]),
        ('import "foo"', [semi(12)]),
        ("export { a }", [semi(12)]),
        ("export var a = 1", [semi(16)]),
        ("export var a = 1;", []),
        ("export const a = 1;\nfoo();", []),
        ("export function foo(){}", []),
        ("export default class {}", [semi(23)]),
    ],
)
def test_statement_kinds(plan, source, expected):
    """Test each statement shape that takes part in semicolon insertion."""
    assert plan(source)["insertions"] == expected


def test_every_statement_gets_its_own_insertion(plan):
    assert plan("foo\nbar")["insertions"] == [semi(3), semi(7)]


def test_do_while_with_terminator(plan):
    assert plan("do {} while (true);")["insertions"] == []


def test_lexical_declarations(plan):
    assert plan("let a = 1\nconst b = 2")["insertions"] == [semi(9), semi(21)]


def test_embedded_bodies(plan):
    assert plan("if (a) b")["insertions"] == [semi(8)]
    assert plan("for (const x of xs) f(x)")["insertions"] == [semi(24)]


def test_switch_case_bodies(plan):
    assert plan("switch (a) { case 1: b }")["insertions"] == [semi(22)]


def test_trailing_comment_is_not_a_terminator(plan):
    assert plan("foo // bar")["insertions"] == [semi(3)]


def test_insertion_goes_before_trailing_comment(plan):
    assert plan("foo // bar\nbaz")["insertions"] == [semi(3), semi(14)]
    assert plan('import a from "a" // c')["insertions"] == [semi(17)]


def test_comment_inside_statement_is_skipped():
    """Grammars may attach a trailing comment to the statement it follows."""
    root = SyntaxNode.from_dict({
        "type": "program", "start": 0, "end": 10,
        "children": [{
            "type": "expression_statement", "start": 0, "end": 10,
            "children": [
                {"type": "identifier", "start": 0, "end": 3},
                {"type": "comment", "start": 4, "end": 10},
            ],
        }],
    })
    context = ProcessingContext(SourceDocument.from_tree("foo // bar", root), root)

    assert InsertionPlanner().plan(context) == [Insertion(index=3)]


# --- Exports ---


def test_export_declaration_gets_single_insertion(plan):
    """The export carries the terminator, not its declaration payload."""
    assert plan("export const a = 1")["insertions"] == [semi(18)]


def test_export_default_expression(plan):
    assert plan("export default foo")["insertions"] == [semi(18)]


def test_export_default_declarations_are_exempt(plan):
    assert plan("export default class A {}")["insertions"] == []
    assert plan("export default function () {}")["insertions"] == []


# --- Nesting ---


def test_nested_statements_are_independent(plan):
    """An exempt wrapper does not hide the statements inside it."""
    assert plan("let x = () => { return 1 }")["insertions"] == [semi(24), semi(26)]


def test_class_field_definitions(plan):
    assert plan("class A { x = 1 }")["insertions"] == [semi(15)]
    assert plan("class A { x = 1; }")["insertions"] == []


def test_offsets_are_characters_not_bytes(plan):
    assert plan('x = "é"')["insertions"] == [semi(7)]


# --- Properties ---


SAMPLES = [
    "foo\nbar",
    "function foo() { return 21 }",
    "export default class {}",
    "let x = () => { return 1 }\nx()",
    "class A { x = 1\n y() { return this.x } }",
    "do { a() } while (b)\nfor (;;) { break }",
    'import a from "a"\nexport { a }',
    "export let b = 2;\nfoo",
    "foo // c\nbar",
    'import a from "a" // c',
]


@pytest.mark.parametrize("source", SAMPLES)
def test_insertion_is_idempotent(parser, source):
    """Applying the insertions leaves nothing to insert on a second run."""
    context = SemicolonProcessor().process(parser.parse(source))
    assert context.insertions

    fixed = PatchApplier().apply(context)
    second = SemicolonProcessor().process(parser.parse(fixed))
    assert second.insertions == []


@pytest.mark.parametrize("source", SAMPLES)
def test_insertions_are_strictly_ascending(plan, source):
    indexes = [insertion["index"] for insertion in plan(source)["insertions"]]
    assert indexes == sorted(set(indexes))


@pytest.mark.parametrize("source", ["export var a = 1;", "export const a = 1;\nfoo();", "foo; // c\nbar;"])
def test_terminated_sources_are_left_alone(parser, source):
    context = SemicolonProcessor().process(parser.parse(source))
    assert context.insertions == []
    assert PatchApplier().apply(context) == source
