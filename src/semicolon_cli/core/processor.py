"""
Runs the insertion and removal planners over a processing context.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from .classifier import StatementClassifier, TerminatorPolicy
from .document_model import ProcessingContext
from .insertions import InsertionPlanner
from .removals import RemovalPlanner


class SemicolonProcessor:
    """
    Produces the complete patch plan for a document.

    The planners read the same immutable tree and append to disjoint
    containers, so they can run one after the other or side by side. Either
    way the context is finalized afterwards, which restores ordering and
    rejects conflicting patches.
    """

    def __init__(
        self,
        ambiguous_export_policy: TerminatorPolicy = TerminatorPolicy.REQUIRED,
        insert_missing: bool = True,
        remove_redundant: bool = True,
        parallel: bool = False,
    ):
        self.classifier = StatementClassifier(ambiguous_export_policy)
        self.insertion_planner = InsertionPlanner(self.classifier)
        self.removal_planner = RemovalPlanner()
        self.insert_missing = insert_missing
        self.remove_redundant = remove_redundant
        self.parallel = parallel
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config) -> SemicolonProcessor:
        """Create a processor from a loaded SemicolonConfig."""
        return cls(
            ambiguous_export_policy=config.ambiguous_export_policy,
            insert_missing=config.insert_missing,
            remove_redundant=config.remove_redundant,
            parallel=config.parallel,
        )

    def process(self, context: ProcessingContext) -> ProcessingContext:
        """Plan all insertions and removals for the context and finalize it."""
        if context.is_finalized:
            raise RuntimeError("Processing context has already been used")

        if self.parallel and self.insert_missing and self.remove_redundant:
            with ThreadPoolExecutor(max_workers=2) as executor:
                insertions = executor.submit(self.insertion_planner.plan, context)
                removals = executor.submit(self.removal_planner.plan, context)
                insertions.result()
                removals.result()
        else:
            if self.insert_missing:
                self.insertion_planner.plan(context)
            if self.remove_redundant:
                self.removal_planner.plan(context)

        context.finalize()

        if context.document.path:
            self.logger.info(
                f"{context.document.path}: {len(context.insertions)} insertions, "
                f"{len(context.removals)} removals"
            )
        return context


def process(context: ProcessingContext, processor: Optional[SemicolonProcessor] = None) -> ProcessingContext:
    """Plan a document with default settings unless a processor is given."""
    return (processor or SemicolonProcessor()).process(context)
