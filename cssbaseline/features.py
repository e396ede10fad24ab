"""Map syntax constructs to the canonical feature keys of the compatibility data.

Each resolver takes a node of the syntax tree and yields the `Feature`s it
uses, in source order. Keys are lower-cased; the name as written is kept for
diagnostics. Vendor-prefixed names never produce a feature.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from cssbaseline.css import AtRule, Block, Component, Declaration, FunctionBlock, Position
from cssbaseline.css.tokens import Colon, Delim, Ident, Whitespace

__all__ = [
    "Feature",
    "FeatureKind",
    "is_vendor_prefixed",
    "media_conditions",
    "property_value_key",
    "resolve_at_rule",
    "resolve_declaration",
    "resolve_functions",
    "resolve_selectors",
]

VENDOR_PREFIXES = ("-webkit-", "-moz-", "-ms-", "-o-")
RANGE_FORM_PREFIXES = ("min-", "max-")
COMPARISONS = "<>="


class FeatureKind(Enum):
    """The kinds of feature the analyzer knows how to look up.

    The value is the section name in the compatibility data.
    """
    PROPERTY = "properties"
    PROPERTY_VALUE = "propertyValues"
    AT_RULE = "atRules"
    SELECTOR = "selectors"
    FUNCTION = "functions"
    MEDIA_CONDITION = "mediaConditions"

    @property
    def message_id(self) -> str:
        return _MESSAGE_IDS[self]


_MESSAGE_IDS = {
    FeatureKind.PROPERTY: "notBaselineProperty",
    FeatureKind.PROPERTY_VALUE: "notBaselinePropertyValue",
    FeatureKind.AT_RULE: "notBaselineAtRule",
    FeatureKind.SELECTOR: "notBaselineSelector",
    FeatureKind.FUNCTION: "notBaselineFunction",
    FeatureKind.MEDIA_CONDITION: "notBaselineMediaCondition",
}


@dataclass(frozen=True)
class Feature:
    """One use of a feature in a stylesheet."""
    kind: FeatureKind
    key: str
    start: Position
    end: Position
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def scope_key(self) -> tuple[FeatureKind, str]:
        return (self.kind, self.key)


def is_vendor_prefixed(name: str) -> bool:
    return name.lower().startswith(VENDOR_PREFIXES)


def property_value_key(property: str, value: str) -> str:
    return f"{property.lower()}:{value.lower()}"


def resolve_declaration(decl: Declaration) -> Iterator[Feature]:
    """The property, its keyword values and every function in its value."""
    if decl.name.startswith("--") or is_vendor_prefixed(decl.name):
        return

    yield Feature(
        FeatureKind.PROPERTY,
        decl.name.lower(),
        decl.token.start,
        decl.token.end,
        {"property": decl.name},
    )
    for component in decl.value:
        if isinstance(component, Ident) and not is_vendor_prefixed(component.raw):
            yield Feature(
                FeatureKind.PROPERTY_VALUE,
                property_value_key(decl.name, component.raw),
                component.start,
                component.end,
                {"property": decl.name, "value": component.raw},
            )
        else:
            yield from resolve_functions([component])


def resolve_functions(components: list[Component]) -> Iterator[Feature]:
    for component in components:
        if isinstance(component, FunctionBlock):
            if not is_vendor_prefixed(component.name):
                yield Feature(
                    FeatureKind.FUNCTION,
                    component.name.lower(),
                    component.start,
                    component.end,
                    {"function": component.name},
                )
            yield from resolve_functions(component.value)
        elif isinstance(component, Block):
            yield from resolve_functions(component.value)


def resolve_at_rule(rule: AtRule) -> Feature | None:
    if is_vendor_prefixed(rule.name):
        return None
    return Feature(
        FeatureKind.AT_RULE,
        rule.name.lower(),
        rule.token.start,
        rule.token.end,
        {"atRule": rule.name},
    )


def resolve_selectors(prelude: list[Component]) -> Iterator[Feature]:
    """Pseudo-classes, pseudo-elements and `&` found in a selector list."""
    index = 0
    while index < len(prelude):
        component = prelude[index]
        if isinstance(component, Colon):
            double = index + 1 < len(prelude) and isinstance(prelude[index + 1], Colon)
            name_index = index + 2 if double else index + 1
            if name_index < len(prelude):
                feature = _pseudo(component.start, prelude[name_index])
                if feature is not None:
                    yield feature
                if isinstance(prelude[name_index], FunctionBlock):
                    yield from resolve_selectors(prelude[name_index].value)
            index = name_index + 1
            continue
        elif isinstance(component, Delim) and component.raw == "&":
            yield Feature(
                FeatureKind.SELECTOR,
                "nesting",
                component.start,
                component.end,
                {"selector": "nesting"},
            )
        elif isinstance(component, FunctionBlock):
            yield from resolve_selectors(component.value)
        index += 1


def _pseudo(start: Position, name: Component) -> Feature | None:
    if isinstance(name, Ident):
        raw, end = name.raw, name.end
    elif isinstance(name, FunctionBlock):
        raw, end = name.name, name.token.name_end
    else:
        return None
    if is_vendor_prefixed(raw):
        return None
    return Feature(FeatureKind.SELECTOR, raw.lower(), start, end, {"selector": raw})


def media_conditions(prelude: list[Component]) -> Iterator[Feature]:
    """Media features named inside the parenthesized terms of a media query list."""
    for component in prelude:
        if isinstance(component, Block):
            name = _media_feature_name(component.value)
            if name is not None:
                if not is_vendor_prefixed(name.raw):
                    yield Feature(
                        FeatureKind.MEDIA_CONDITION,
                        _media_feature_key(name.raw),
                        name.start,
                        name.end,
                        {"condition": name.raw},
                    )
            else:
                yield from media_conditions(component.value)
        elif isinstance(component, FunctionBlock):
            yield from media_conditions(component.value)


def _media_feature_name(value: list[Component]) -> Ident | None:
    """The feature of `(name)`, `(name: value)` or a range such as `(400px <= width)`."""
    tokens = [component for component in value if not isinstance(component, Whitespace)]
    if len(tokens) == 0:
        return None
    first = tokens[0]
    if isinstance(first, Ident):
        if len(tokens) == 1 or isinstance(tokens[1], Colon) or _is_comparison(tokens[1]):
            return first
        return None
    for previous, token in zip(tokens, tokens[1:]):
        if isinstance(token, Ident) and _is_comparison(previous):
            return token
    return None


def _is_comparison(component: Component) -> bool:
    return isinstance(component, Delim) and not isinstance(component, Colon) and component.raw in COMPARISONS


def _media_feature_key(name: str) -> str:
    key = name.lower()
    for prefix in RANGE_FORM_PREFIXES:
        if key.startswith(prefix):
            return key[len(prefix):]
    return key
