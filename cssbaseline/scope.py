"""Features declared supported by enclosing `@supports` rules.

An `@supports` condition is parsed into a small expression tree. Only the
terms that must hold whenever the block applies are taken as supported:
anything under `not` or `or` is ignored, and `and` keeps the terms of all of
its operands. Inside the block those terms join the ones already granted by
the enclosing blocks; leaving the block restores the enclosing frame.
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
import logging
from typing import Iterator, Union
from typing_extensions import TypeAliasType

from cssbaseline.css import AtRule, Block, Component, Declaration, FunctionBlock
from cssbaseline.css.tokens import Colon, Ident, LParantheses, Whitespace
from cssbaseline.features import Feature, FeatureKind, resolve_declaration, resolve_selectors

__all__ = [
    "And",
    "Condition",
    "Leaf",
    "Not",
    "Or",
    "ScopeFrame",
    "ScopeTracker",
    "asserted",
    "is_supports_rule",
    "parse_condition",
]

logger = logging.getLogger(__name__)

ScopeKey = TypeAliasType("ScopeKey", tuple[FeatureKind, str])
NOTHING: frozenset[ScopeKey] = frozenset()


@dataclass(frozen=True)
class Leaf:
    """A feature test or `selector()` test and the keys it stands for."""
    keys: frozenset[ScopeKey] = NOTHING

@dataclass(frozen=True)
class Not:
    operand: Condition

@dataclass(frozen=True)
class And:
    operands: tuple[Condition, ...]

@dataclass(frozen=True)
class Or:
    operands: tuple[Condition, ...]

Condition = TypeAliasType("Condition", Union[Leaf, Not, And, Or])


def parse_condition(components: list[Component]) -> Condition:
    """Parse the prelude of an `@supports` rule, or the inside of a group."""
    tokens = [component for component in components if not isinstance(component, Whitespace)]
    if len(tokens) == 0:
        return Leaf()
    if _keyword(tokens[0]) == "not":
        return Not(parse_condition(tokens[1:]))

    terms: list[Condition] = []
    operators = set()
    for token in tokens:
        if (keyword := _keyword(token)) in ("and", "or"):
            operators.add(keyword)
        else:
            terms.append(_term(token))

    if len(terms) == 1 and len(operators) == 0:
        return terms[0]
    # Mixing `and` with `or` without grouping is invalid; treat it as `or`.
    if "or" in operators:
        return Or(tuple(terms))
    return And(tuple(terms))


def _keyword(component: Component) -> str | None:
    if isinstance(component, Ident):
        return component.raw.lower()
    return None


def _term(component: Component) -> Condition:
    if isinstance(component, Block) and isinstance(component.token, LParantheses):
        if (decl := _feature_test(component.value)) is not None:
            return Leaf(_keys(resolve_declaration(decl)))
        return parse_condition(component.value)
    elif isinstance(component, FunctionBlock) and component.name.lower() == "selector":
        return Leaf(_keys(resolve_selectors(component.value)))
    # font-tech(), font-format() and general enclosed terms
    return Leaf()


def _feature_test(value: list[Component]) -> Declaration | None:
    tokens = [component for component in value if not isinstance(component, Whitespace)]
    if len(tokens) < 2 or not isinstance(tokens[0], Ident) or not isinstance(tokens[1], Colon):
        return None
    rest = value[value.index(tokens[1]) + 1:]
    while len(rest) > 0 and isinstance(rest[0], Whitespace):
        rest = rest[1:]
    while len(rest) > 0 and isinstance(rest[-1], Whitespace):
        rest = rest[:-1]
    return Declaration(tokens[0], list(rest))


def _keys(features: Iterator[Feature]) -> frozenset[ScopeKey]:
    return frozenset(feature.scope_key for feature in features)


def asserted(condition: Condition) -> frozenset[ScopeKey]:
    """Keys that hold whenever the condition does."""
    if isinstance(condition, Leaf):
        return condition.keys
    elif isinstance(condition, And):
        return frozenset().union(*(asserted(operand) for operand in condition.operands))
    return NOTHING


@dataclass(frozen=True)
class ScopeFrame:
    keys: frozenset[ScopeKey] = NOTHING
    parent: ScopeFrame | None = None

    def push(self, keys: frozenset[ScopeKey]) -> ScopeFrame:
        return ScopeFrame(self.keys | keys, self)

    def __contains__(self, key: ScopeKey) -> bool:
        return key in self.keys

    @property
    def depth(self) -> int:
        return 0 if self.parent is None else self.parent.depth + 1


def is_supports_rule(rule: AtRule) -> bool:
    return rule.name.lower() == "supports"


class ScopeTracker:
    """The frame stack of one traversal."""

    def __init__(self) -> None:
        self.frame = ScopeFrame()

    @contextmanager
    def supports(self, rule: AtRule) -> Iterator[ScopeFrame]:
        keys = asserted(parse_condition(rule.prelude))
        self.frame = self.frame.push(keys)
        logger.debug(
            "entering @supports at %s (depth %d): %s",
            rule.start, self.frame.depth, sorted(key for _, key in keys)
        )
        try:
            yield self.frame
        finally:
            self.frame = self.frame.parent

    def allows(self, feature: Feature) -> bool:
        return feature.scope_key in self.frame
