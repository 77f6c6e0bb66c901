"""Tests for DependencyRecord and collection normalisation."""

import pytest
from pydantic import ValidationError

from depo_client.models.dependency import DependencyRecord, dependency_map, dependency_records


class TestDependencyRecord:
    def test_optional_fields_default_to_none(self):
        dep = DependencyRecord(name="fmt")
        assert dep.version is None
        assert dep.version_constraint is None
        assert dep.installed is None

    def test_name_is_stripped(self):
        assert DependencyRecord(name="  fmt ").name == "fmt"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            DependencyRecord(name="   ")

    def test_unknown_keys_ignored(self):
        dep = DependencyRecord.model_validate({"name": "fmt", "stars": 42})
        assert dep == DependencyRecord(name="fmt")

    def test_payload_omits_unset_fields(self):
        dep = DependencyRecord(name="left-pad", version_constraint="^1.0.0")
        assert dep.to_payload() == {"name": "left-pad", "version_constraint": "^1.0.0"}

    def test_qualified_name_prefers_full_name(self):
        dep = DependencyRecord(name="json", full_name="nlohmann/json")
        assert dep.qualified_name == "nlohmann/json"
        assert DependencyRecord(name="zlib").qualified_name == "zlib"

    def test_records_are_immutable(self):
        dep = DependencyRecord(name="fmt")
        with pytest.raises(ValidationError):
            dep.version = "1.0"  # type: ignore[misc]


class TestDependencyMap:
    def test_none_is_empty(self):
        assert dependency_map(None) == {}

    def test_object_keyed_by_name(self):
        result = dependency_map({"lodash": {"name": "lodash", "version": "4.17.21"}})
        assert result == {"lodash": DependencyRecord(name="lodash", version="4.17.21")}

    def test_object_key_used_when_name_missing(self):
        result = dependency_map({"fmt": {"version": "10.2.1"}})
        assert result["fmt"].name == "fmt"
        assert result["fmt"].version == "10.2.1"

    def test_array_of_records(self):
        result = dependency_map(
            [
                {"name": "fmt", "full_name": "fmtlib/fmt", "url": "https://github.com/fmtlib/fmt"},
                {"name": "spdlog", "version_constraint": "^1.12"},
            ]
        )
        assert list(result) == ["fmt", "spdlog"]
        assert result["fmt"].full_name == "fmtlib/fmt"

    def test_accepts_record_instances(self):
        dep = DependencyRecord(name="fmt")
        assert dependency_map({"fmt": dep}) == {"fmt": dep}

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="duplicate dependency name 'fmt'"):
            dependency_map([{"name": "fmt"}, {"name": "fmt", "version": "1"}])

    def test_unexpected_shape_rejected(self):
        with pytest.raises(ValueError, match="expected object or array"):
            dependency_map("fmt")

    def test_invalid_record_rejected(self):
        with pytest.raises(ValueError):
            dependency_map([{"version": "1.0"}])


class TestDependencyRecords:
    def test_same_names_allowed(self):
        records = dependency_records(
            [
                {"name": "json", "full_name": "nlohmann/json"},
                {"name": "json", "full_name": "open-source-parsers/json"},
            ]
        )
        assert [r.full_name for r in records] == ["nlohmann/json", "open-source-parsers/json"]

    def test_none_is_empty(self):
        assert dependency_records(None) == []

    def test_object_key_used_when_name_missing(self):
        assert dependency_records({"fmt": {"version": "10"}}) == [
            DependencyRecord(name="fmt", version="10")
        ]
