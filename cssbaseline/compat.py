"""Read-only Baseline compatibility data.

The data file is a JSON object with a `version` string and one section per
`FeatureKind`. Property values are nested under their property::

    {
        "version": "2026.09",
        "properties": {"accent-color": {"status": "newly", "since": 2022}},
        "propertyValues": {"clip-path": {"fill-box": {"status": "not-baseline", "since": null}}}
    }

A database never changes after it is built, so one instance can be shared by
any number of analyses running in parallel.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from functools import cache
from importlib import resources
import json
import logging
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from cssbaseline.errors import DatabaseError
from cssbaseline.features import FeatureKind, property_value_key

__all__ = ["CompatibilityDatabase", "CompatibilityRecord", "Status"]

logger = logging.getLogger(__name__)


class Status(Enum):
    NOT_BASELINE = "not-baseline"
    NEWLY = "newly"
    WIDELY = "widely"


@dataclass(frozen=True)
class CompatibilityRecord:
    feature_key: str
    kind: FeatureKind
    status: Status
    since_year: int | None = None


class CompatibilityDatabase:
    def __init__(self, records: Mapping[tuple[FeatureKind, str], CompatibilityRecord] | None = None, version: str = "") -> None:
        self._records_ = MappingProxyType(dict(records or {}))
        self.version = version

    def get(self, kind: FeatureKind, key: str) -> CompatibilityRecord | None:
        return self._records_.get((kind, key.lower()))

    def __contains__(self, item: tuple[FeatureKind, str]) -> bool:
        kind, key = item
        return (kind, key.lower()) in self._records_

    def __len__(self) -> int:
        return len(self._records_)

    def __iter__(self) -> Iterator[CompatibilityRecord]:
        return iter(self._records_.values())

    def __repr__(self) -> str:
        return f"CompatibilityDatabase(version={self.version!r}, records={len(self)})"

    @staticmethod
    def from_records(*records: CompatibilityRecord, version: str = "") -> CompatibilityDatabase:
        return CompatibilityDatabase(
            {(record.kind, record.feature_key.lower()): record for record in records},
            version,
        )

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> CompatibilityDatabase:
        if not isinstance(data, Mapping):
            raise DatabaseError("Compatibility data must be a JSON object")

        records: dict[tuple[FeatureKind, str], CompatibilityRecord] = {}
        for kind in FeatureKind:
            section = data.get(kind.value, {})
            if not isinstance(section, Mapping) or (
                kind is FeatureKind.PROPERTY_VALUE and not all(isinstance(v, Mapping) for v in section.values())
            ):
                raise DatabaseError(f"{kind.value}: expected an object")
            if kind is FeatureKind.PROPERTY_VALUE:
                entries = {
                    property_value_key(prop, value): entry
                    for prop, values in section.items()
                    for value, entry in values.items()
                }
            else:
                entries = {name.lower(): entry for name, entry in section.items()}

            for key, entry in entries.items():
                records[(kind, key)] = _record(kind, key, entry)

        database = CompatibilityDatabase(records, str(data.get("version", "")))
        logger.debug("loaded %r", database)
        return database

    @staticmethod
    def from_path(path: str) -> CompatibilityDatabase:
        try:
            with open(path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except json.JSONDecodeError as error:
            raise DatabaseError(f"{path}: {error}") from error
        return CompatibilityDatabase.from_dict(data)

    @staticmethod
    @cache
    def default() -> CompatibilityDatabase:
        """The snapshot bundled with the package."""
        source = resources.files("cssbaseline").joinpath("data/baseline.json")
        try:
            data = json.loads(source.read_text(encoding="utf-8"))
        except json.JSONDecodeError as error:
            raise DatabaseError(f"bundled compatibility data: {error}") from error
        return CompatibilityDatabase.from_dict(data)


def _record(kind: FeatureKind, key: str, entry: Any) -> CompatibilityRecord:
    if not isinstance(entry, Mapping):
        raise DatabaseError(f"{kind.value}.{key}: expected an object")
    try:
        status = Status(entry.get("status"))
    except ValueError as error:
        raise DatabaseError(f"{kind.value}.{key}: unknown status {entry.get('status')!r}") from error
    since = entry.get("since")
    if since is not None and (isinstance(since, bool) or not isinstance(since, int)):
        raise DatabaseError(f"{kind.value}.{key}: 'since' must be a year or null")
    return CompatibilityRecord(key, kind, status, since)
