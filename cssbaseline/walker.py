"""Walk a stylesheet in source order and report features below the threshold.

For every feature found the checks run in a fixed order: allow-lists, then
the features granted by enclosing `@supports` rules, then the compatibility
data. Malformed parts of the tree (`Raw` nodes) are never inspected.
"""

from __future__ import annotations
import logging

from cssbaseline.compat import CompatibilityDatabase
from cssbaseline.config import Configuration
from cssbaseline.css import AtRule, Component, Declaration, FunctionBlock, Node, QualifiedRule, Raw, Stylesheet
from cssbaseline.css.tokens import String, Url
from cssbaseline.diagnostics import Diagnostic
from cssbaseline.exemptions import ExemptionFilter
from cssbaseline.features import (
    Feature,
    media_conditions,
    resolve_at_rule,
    resolve_declaration,
    resolve_selectors,
)
from cssbaseline.scope import ScopeTracker, is_supports_rule
from cssbaseline.threshold import ThresholdEvaluator

__all__ = ["Analyzer", "Walker"]

logger = logging.getLogger(__name__)

# At-rules whose prelude holds a media query list.
MEDIA_QUERY_RULES = frozenset({"media", "import"})


def media_query_list(rule: AtRule) -> list[Component]:
    """The prelude minus the url, `layer()` and `supports()` of an `@import`."""
    return [
        component
        for component in rule.prelude
        if not isinstance(component, (FunctionBlock, String, Url))
    ]


class Analyzer:
    """Configuration and compatibility data shared by any number of walks."""

    def __init__(self, config: Configuration | None = None, database: CompatibilityDatabase | None = None) -> None:
        self.config = config if config is not None else Configuration()
        self.database = database if database is not None else CompatibilityDatabase.default()
        self.exemptions = ExemptionFilter(self.config)
        self.evaluator = ThresholdEvaluator(self.database, self.config.available)

    def analyze(self, stylesheet: Stylesheet) -> list[Diagnostic]:
        return Walker(self).walk(stylesheet)


class Walker:
    """One traversal. Owns the `@supports` frame stack and the diagnostics."""

    def __init__(self, analyzer: Analyzer) -> None:
        self.analyzer = analyzer
        self.scope = ScopeTracker()
        self.diagnostics: list[Diagnostic] = []

    def walk(self, stylesheet: Stylesheet) -> list[Diagnostic]:
        for rule in stylesheet.rules:
            self.visit(rule)
        logger.debug("%s: %d diagnostics", stylesheet.href or "<string>", len(self.diagnostics))
        return self.diagnostics

    def visit(self, node: Node):
        if isinstance(node, Declaration):
            self.visit_declaration(node)
        elif isinstance(node, QualifiedRule):
            self.visit_qualified_rule(node)
        elif isinstance(node, AtRule):
            self.visit_at_rule(node)
        elif isinstance(node, Raw):
            logger.debug("skipping malformed input: %s", node.error)

    def visit_children(self, children: list[Node]):
        for child in children:
            self.visit(child)

    def visit_declaration(self, decl: Declaration):
        for feature in resolve_declaration(decl):
            self.check(feature)

    def visit_qualified_rule(self, rule: QualifiedRule):
        for feature in resolve_selectors(rule.prelude):
            self.check(feature)
        self.visit_children(rule.children)

    def visit_at_rule(self, rule: AtRule):
        if (feature := resolve_at_rule(rule)) is not None:
            self.check(feature)
            if feature.key in MEDIA_QUERY_RULES:
                for condition in media_conditions(media_query_list(rule)):
                    self.check(condition)

        if is_supports_rule(rule):
            with self.scope.supports(rule):
                self.visit_children(rule.children)
        else:
            self.visit_children(rule.children)

    def check(self, feature: Feature):
        if self.analyzer.exemptions.exempts(feature):
            return
        if self.scope.allows(feature):
            return

        evaluation = self.analyzer.evaluator.evaluate(feature)
        if not evaluation.supported:
            diagnostic = Diagnostic.from_feature(feature, evaluation.availability)
            logger.debug("%s %s: %s", diagnostic.range, diagnostic.message_id, diagnostic.message)
            self.diagnostics.append(diagnostic)
