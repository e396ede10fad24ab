from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from cssbaseline.compat import CompatibilityDatabase, CompatibilityRecord, Status
from cssbaseline.config import Threshold
from cssbaseline.features import Feature

__all__ = ["Evaluation", "ThresholdEvaluator"]

NEWLY_OR_BETTER = frozenset({Status.NEWLY, Status.WIDELY})


@dataclass(frozen=True)
class Evaluation:
    supported: bool
    availability: Union[str, int]


class ThresholdEvaluator:
    """Compare the Baseline status of features against one threshold.

    Features without a record are treated as supported. With a year
    threshold the diagnostic availability is the configured year, not the
    year the feature became available.
    """

    def __init__(self, database: CompatibilityDatabase, threshold: Threshold = "widely") -> None:
        self.database = database
        self.threshold = threshold

    def evaluate(self, feature: Feature) -> Evaluation:
        record = self.database.get(feature.kind, feature.key)
        if record is None:
            return Evaluation(True, self.threshold)
        return Evaluation(self.meets(record), self.threshold)

    def meets(self, record: CompatibilityRecord) -> bool:
        if self.threshold == "widely":
            return record.status is Status.WIDELY
        elif self.threshold == "newly":
            return record.status in NEWLY_OR_BETTER
        return record.since_year is not None and record.since_year <= self.threshold
