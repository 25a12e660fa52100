"""Unit tests for buildoffice.documents.versioning — version number arithmetic."""

import pytest

from buildoffice.documents.versioning import INITIAL_VERSION, next_version_number, parse_version
from buildoffice.engine.errors import ValidationError


class TestNextVersionNumber:
    @pytest.mark.parametrize("current,expected", [
        ("1.0", "1.1"),
        ("1.1", "1.2"),
        ("1.9", "2.0"),
        ("9.9", "10.0"),
        ("2", "2.1"),
    ])
    def test_increments_by_one_tenth(self, current, expected):
        assert next_version_number(current) == expected

    def test_no_float_drift(self):
        version = INITIAL_VERSION
        for _ in range(30):
            version = next_version_number(version)
        assert version == "4.0"

    def test_extra_places_round_half_up(self):
        assert next_version_number("1.25") == "1.4"
        assert next_version_number("1.04") == "1.1"

    @pytest.mark.parametrize("bad", ["", "abc", "NaN", "Infinity", "-1.0"])
    def test_rejects_invalid(self, bad):
        with pytest.raises(ValidationError):
            next_version_number(bad)


class TestParseVersion:
    def test_parses_decimal(self):
        assert str(parse_version("1.2")) == "1.2"
