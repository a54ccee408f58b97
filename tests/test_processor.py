"""Tests for running both planners through the processor."""

import pytest

from semicolon_cli.config import SemicolonConfig
from semicolon_cli.core.classifier import TerminatorPolicy
from semicolon_cli.core.processor import SemicolonProcessor, process

SOURCE = "class A {; a() { return 1 }; }\nfoo;;\nexport default class {}\nfor (;;);"


def test_process_plans_both_kinds(parser):
    context = process(parser.parse(SOURCE))

    assert context.is_finalized
    assert [i.index for i in context.insertions] == [25, 60]
    assert [(r.start, r.end) for r in context.removals] == [(9, 10), (27, 28), (35, 36)]


def test_parallel_matches_sequential(parser):
    sequential = SemicolonProcessor().process(parser.parse(SOURCE))
    parallel = SemicolonProcessor(parallel=True).process(parser.parse(SOURCE))

    assert parallel.to_dict() == sequential.to_dict()


def test_planners_can_be_switched_off(parser):
    only_insertions = SemicolonProcessor(remove_redundant=False).process(parser.parse(SOURCE))
    only_removals = SemicolonProcessor(insert_missing=False).process(parser.parse(SOURCE))

    assert only_insertions.insertions and not only_insertions.removals
    assert only_removals.removals and not only_removals.insertions


def test_context_is_not_reused(parser):
    processor = SemicolonProcessor()
    context = processor.process(parser.parse("foo"))

    with pytest.raises(RuntimeError):
        processor.process(context)


def test_from_config():
    config = SemicolonConfig(ambiguous_export_policy=TerminatorPolicy.EXEMPT, parallel=True)
    processor = SemicolonProcessor.from_config(config)

    assert processor.classifier.ambiguous_export_policy is TerminatorPolicy.EXEMPT
    assert processor.parallel
