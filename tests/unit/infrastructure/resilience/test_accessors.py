"""Unit tests for snapshot accessors."""

from types import SimpleNamespace

import pytest

from resilient_provisioning.domain.resilience import CHECKSET
from resilient_provisioning.infrastructure.resilience import (
    as_accessor,
    checkset_accessor,
    path_accessor,
)

SNAPSHOT = {
    "Reservations": [
        {"Instances": [{"InstanceId": "i-1", "State": {"Name": "running", "Code": 16}}]}
    ],
    "Tags": [],
}


@pytest.mark.unit
class TestPathAccessor:
    """Test cases for path_accessor."""

    def test_nested_keys_and_indexes(self):
        accessor = path_accessor("Reservations[0].Instances[0].State.Name")

        assert accessor(SNAPSHOT) == "running"

    def test_dollar_prefix(self):
        assert path_accessor("$.Reservations[0].Instances[0].InstanceId")(SNAPSHOT) == "i-1"

    def test_missing_pieces_yield_none(self):
        assert path_accessor("Reservations[3].Instances[0].State")(SNAPSHOT) is None
        assert path_accessor("Nope.Deeper")(SNAPSHOT) is None
        assert path_accessor("Reservations.Name")(SNAPSHOT) is None

    def test_attributes(self):
        snapshot = SimpleNamespace(status=SimpleNamespace(phase="Ready"))

        assert path_accessor("status.phase")(snapshot) == "Ready"

    def test_root_path_returns_snapshot(self):
        assert path_accessor("$")(SNAPSHOT) is SNAPSHOT

    def test_invalid_segment(self):
        with pytest.raises(ValueError):
            path_accessor("Reservations[x]")


@pytest.mark.unit
class TestCheckSetAccessor:
    """Test cases for checkset_accessor."""

    def test_populated_value(self):
        assert checkset_accessor("Reservations[0].Instances[0].InstanceId")(SNAPSHOT) == CHECKSET

    def test_empty_values(self):
        assert checkset_accessor("Tags")(SNAPSHOT) == ""
        assert checkset_accessor("Missing")(SNAPSHOT) == ""
        assert checkset_accessor("Missing")(None) == ""


@pytest.mark.unit
class TestAsAccessor:
    """Test cases for as_accessor."""

    def test_callable_is_returned(self):
        def accessor(snapshot):
            return snapshot

        assert as_accessor(accessor) is accessor

    def test_string_becomes_path(self):
        assert as_accessor("Tags")(SNAPSHOT) == []

    def test_other_types_are_rejected(self):
        with pytest.raises(TypeError):
            as_accessor(42)
