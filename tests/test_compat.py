import json

import pytest

from cssbaseline import DatabaseError
from cssbaseline.compat import CompatibilityDatabase, Status
from cssbaseline.features import FeatureKind


class TestBundledData:
    def test_loads(self, database):
        assert len(database) > 0
        assert database.version != ""

    def test_cached(self, database):
        assert CompatibilityDatabase.default() is database

    @pytest.mark.parametrize("kind, key, status", [
        (FeatureKind.PROPERTY, "accent-color", Status.NOT_BASELINE),
        (FeatureKind.PROPERTY, "backdrop-filter", Status.NEWLY),
        (FeatureKind.PROPERTY_VALUE, "clip-path:stroke-box", Status.NOT_BASELINE),
        (FeatureKind.AT_RULE, "view-transition", Status.NOT_BASELINE),
        (FeatureKind.SELECTOR, "has", Status.NEWLY),
        (FeatureKind.FUNCTION, "abs", Status.NOT_BASELINE),
        (FeatureKind.MEDIA_CONDITION, "color-gamut", Status.WIDELY),
    ])
    def test_records(self, database, kind, key, status):
        assert database.get(kind, key).status is status

    def test_lookup_is_case_insensitive(self, database):
        assert database.get(FeatureKind.AT_RULE, "VIEW-TRANSITION") is not None
        assert (FeatureKind.AT_RULE, "Media") in database

    def test_absent(self, database):
        assert database.get(FeatureKind.PROPERTY, "not-a-property") is None


class TestFromDict:
    def test_shape(self):
        database = CompatibilityDatabase.from_dict({
            "version": "test",
            "properties": {"Foo": {"status": "newly", "since": 2024}},
            "propertyValues": {"foo": {"bar": {"status": "widely", "since": 2015}}},
        })
        record = database.get(FeatureKind.PROPERTY, "foo")
        assert record.status is Status.NEWLY
        assert record.since_year == 2024
        assert record.kind is FeatureKind.PROPERTY
        assert database.get(FeatureKind.PROPERTY_VALUE, "foo:bar").since_year == 2015
        assert database.version == "test"
        assert len(database) == 2

    @pytest.mark.parametrize("data", [
        [],
        {"properties": []},
        {"propertyValues": {"clip-path": "fill-box"}},
        {"properties": {"foo": "widely"}},
        {"properties": {"foo": {"status": "sometimes"}}},
        {"properties": {"foo": {"status": "widely", "since": "2015"}}},
        {"properties": {"foo": {"status": "widely", "since": True}}},
    ])
    def test_invalid(self, data):
        with pytest.raises(DatabaseError):
            CompatibilityDatabase.from_dict(data)

    def test_from_path(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"functions": {"abs": {"status": "widely", "since": 2025}}}))
        database = CompatibilityDatabase.from_path(str(path))
        assert database.get(FeatureKind.FUNCTION, "abs").status is Status.WIDELY

    def test_from_path_not_json(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{")
        with pytest.raises(DatabaseError):
            CompatibilityDatabase.from_path(str(path))
