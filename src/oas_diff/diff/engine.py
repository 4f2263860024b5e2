"""Comparison engine: runs every rule over an (old, new) document pair."""

import logging
from collections.abc import Sequence
from pathlib import Path

from oas_diff.diff.changes import ApiChange, ComparisonResult
from oas_diff.errors import ComparisonError
from oas_diff.parser.base import Document
from oas_diff.parser.openapi import DEFAULT_TIMEOUT, load_document
from oas_diff.rules.base import Rule
from oas_diff.rules.registry import default_rules

logger = logging.getLogger(__name__)


class ComparisonEngine:
    """Applies a fixed rule set to document pairs.

    Every rule runs exactly once per comparison and its findings are
    appended in rule order. A rule that raises aborts the whole comparison
    with :class:`ComparisonError`.
    """

    def __init__(self, rules: Sequence[Rule] | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.rules = tuple(rules) if rules is not None else default_rules()
        self.timeout = timeout

    def compare(self, old: Document, new: Document) -> ComparisonResult:
        logger.info(
            "Comparing API %s -> %s with %d rules",
            old.version_label, new.version_label, len(self.rules),
        )
        changes: list[ApiChange] = []
        for rule in self.rules:
            try:
                found = rule.evaluate(old, new)
            except Exception as e:
                logger.error("Rule '%s' failed, aborting comparison", rule.name)
                raise ComparisonError(rule.name, e) from e
            if found:
                logger.debug("%s: %d changes", rule.name, len(found))
            changes.extend(found)

        result = ComparisonResult(
            old_version=old.version_label,
            new_version=new.version_label,
            changes=tuple(changes),
        )
        logger.info(result.summary())
        return result

    def compare_locations(self, old_location: str | Path, new_location: str | Path) -> ComparisonResult:
        """Load both documents, then compare them."""
        old = load_document(old_location, timeout=self.timeout)
        new = load_document(new_location, timeout=self.timeout)
        return self.compare(old, new)


def compare(old: Document, new: Document) -> ComparisonResult:
    """Compare two documents with the built-in rules."""
    return ComparisonEngine().compare(old, new)


def compare_locations(old_location: str | Path, new_location: str | Path) -> ComparisonResult:
    return ComparisonEngine().compare_locations(old_location, new_location)
