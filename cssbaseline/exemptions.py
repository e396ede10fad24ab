from __future__ import annotations

from cssbaseline.config import Configuration
from cssbaseline.features import Feature, FeatureKind

__all__ = ["ExemptionFilter"]


class ExemptionFilter:
    """User allow-lists. A listed feature is never reported.

    Properties and selectors match exactly as configured; at-rule names match
    case-insensitively. Property values are exempt when their property is.
    """

    def __init__(self, config: Configuration) -> None:
        self.properties = config.allow_properties
        self.at_rules = frozenset(name.lower() for name in config.allow_at_rules)
        self.selectors = config.allow_selectors

    def exempts(self, feature: Feature) -> bool:
        if feature.kind in (FeatureKind.PROPERTY, FeatureKind.PROPERTY_VALUE):
            return feature.data["property"] in self.properties
        elif feature.kind is FeatureKind.AT_RULE:
            return feature.key in self.at_rules
        elif feature.kind is FeatureKind.SELECTOR:
            return feature.key in self.selectors
        return False
