"""Tests for length validation."""

from threadfit.core.config import SegmenterConfig
from threadfit.segment.validate import (
    analyze_lengths,
    has_long_units,
    has_short_units,
    validate_lengths,
)


class TestAnalyzeLengths:
    def test_flags_long_and_short(self, config):
        units = ["a" * 50, "b" * 310, "c" * 150]
        analysis = analyze_lengths(units, config)

        assert [a.index for a in analysis] == [0, 1, 2]
        assert [a.length for a in analysis] == [50, 310, 150]
        assert [a.too_short for a in analysis] == [True, False, False]
        assert [a.too_long for a in analysis] == [False, True, False]

    def test_short_last_unit_is_acceptable(self, config):
        analysis = analyze_lengths(["a" * 150, "Follow for more."], config)
        assert not analysis[-1].too_short

    def test_single_short_unit_is_not_flagged(self, config):
        assert not analyze_lengths(["tiny"], config)[0].too_short

    def test_boundaries_are_inclusive(self):
        config = SegmenterConfig(min_unit_length=10, max_unit_length=20)
        analysis = analyze_lengths(["a" * 10, "b" * 20, "c"], config)
        assert not analysis[0].too_short
        assert not analysis[1].too_long

    def test_does_not_mutate_input(self, config):
        units = ["a" * 50, "b" * 300]
        analyze_lengths(units, config)
        assert units == ["a" * 50, "b" * 300]

    def test_empty_sequence(self, config):
        assert analyze_lengths([], config) == []


class TestValidateLengths:
    def test_issue_messages(self, config):
        report = validate_lengths(["a" * 50, "b" * 310, "c"], config)

        assert not report.valid
        assert report.issues == [
            "Unit 1 is 50 chars (<100)",
            "Unit 2 is 310 chars (>280)",
        ]
        assert report.has_long_units
        assert report.has_short_units

    def test_clean_sequence_is_valid(self, config):
        report = validate_lengths(["a" * 150, "b" * 200, "end"], config)
        assert report.valid
        assert report.issues == []

    def test_payload_uses_camel_case(self, config):
        payload = validate_lengths(["a" * 300], config).to_payload()
        assert payload["valid"] is False
        assert payload["analysis"][0] == {
            "index": 0,
            "length": 300,
            "tooLong": True,
            "tooShort": False,
        }

    def test_helpers(self, config):
        assert has_long_units(["a" * 281], config)
        assert not has_long_units(["a" * 280], config)
        assert has_short_units(["a", "b"], config)
        assert not has_short_units(["a" * 100, "b"], config)
