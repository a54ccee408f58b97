"""Shared fixtures for semicolon-cli tests."""

from typing import Any, Dict

import pytest

from semicolon_cli.converters.tree_sitter_parser import TreeSitterParser
from semicolon_cli.core.processor import SemicolonProcessor


@pytest.fixture(scope="session")
def parser():
    return TreeSitterParser()


@pytest.fixture
def plan(parser):
    """Parse source and return its finalized plan as plain dictionaries."""

    def _plan(source: str, processor: SemicolonProcessor = None) -> Dict[str, Any]:
        context = parser.parse(source)
        (processor or SemicolonProcessor()).process(context)
        return context.to_dict()

    return _plan
