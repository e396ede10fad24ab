from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from cssbaseline.features import Feature, FeatureKind

__all__ = ["Diagnostic", "Range", "MESSAGES"]

MESSAGES = {
    FeatureKind.PROPERTY: "Property '{property}' is not a {availability} available baseline feature.",
    FeatureKind.PROPERTY_VALUE: "Value '{value}' of property '{property}' is not a {availability} available baseline feature.",
    FeatureKind.AT_RULE: "At-rule '@{atRule}' is not a {availability} available baseline feature.",
    FeatureKind.SELECTOR: "Selector '{selector}' is not a {availability} available baseline feature.",
    FeatureKind.FUNCTION: "Function '{function}' is not a {availability} available baseline feature.",
    FeatureKind.MEDIA_CONDITION: "Media condition '{condition}' is not a {availability} available baseline feature.",
}
AS_OF_YEAR = " is not available as of {availability}."
NOT_A_LEVEL = " is not a {availability} available baseline feature."


@dataclass(frozen=True)
class Range:
    """1-based, end exclusive."""
    line: int
    column: int
    end_line: int
    end_column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Diagnostic:
    kind: FeatureKind
    data: dict[str, Any]
    range: Range

    @staticmethod
    def from_feature(feature: Feature, availability: str | int) -> Diagnostic:
        return Diagnostic(
            feature.kind,
            {**feature.data, "availability": availability},
            Range(feature.start.line, feature.start.column, feature.end.line, feature.end.column),
        )

    @property
    def message_id(self) -> str:
        return self.kind.message_id

    @property
    def message(self) -> str:
        template = MESSAGES[self.kind]
        if isinstance(self.data["availability"], int):
            template = template.replace(NOT_A_LEVEL, AS_OF_YEAR)
        return template.format(**self.data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "messageId": self.message_id,
            "message": self.message,
            "data": dict(self.data),
            "line": self.range.line,
            "column": self.range.column,
            "endLine": self.range.end_line,
            "endColumn": self.range.end_column,
        }
