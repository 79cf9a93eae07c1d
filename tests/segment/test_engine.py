"""Tests for the optimize entry point: scenarios, contracts and invariants."""

import json

import pytest
from pydantic import TypeAdapter

from threadfit.core.config import SegmenterConfig
from threadfit.core.errors import ConfigurationError
from threadfit.core.models import OptimizationResult, SequenceResult, SingleResult
from threadfit.segment.engine import (
    COMPRESSED_TO_SINGLE,
    MERGED_SHORT_UNITS,
    SPLIT_LONG_UNIT,
    SPLIT_LONG_UNITS,
    optimize,
)


def _words(word, count):
    return " ".join([word] * count)


def _sentence_unit(tail_words):
    """A 200-char sentence followed by ``tail_words`` four-letter words."""
    return _words("word", 40) + ". " + _words("tail", tail_words)


FIVE_DENSE_UNITS = [
    _words("alpha", 30),  # 179
    _words("bravo", 35),  # 209
    _words("charlie", 25),  # 199
    _words("delta", 40),  # 239
    _words("echo", 40),  # 199
]


class TestScenarios:
    """End-to-end behaviour on representative generator output."""

    def test_thin_sequence_collapses_to_single(self):
        result = optimize('["Short line one.", "Short line two."]')

        assert isinstance(result, SingleResult)
        assert result.content == "Short line one. Short line two."
        assert not result.is_multi_unit
        assert result.metadata.transformations == [COMPRESSED_TO_SINGLE]
        assert result.metadata.original_unit_count == 2
        assert result.metadata.original_format == "sequence"
        assert result.metadata.reason

    def test_unescaped_quotes_recovered_then_collapsed(self):
        second = "Second part here, with more detail to pad the length out past one hundred characters easily."
        raw = '["He said "hi" to me", "' + second + '"]'

        result = optimize(raw)

        assert result.metadata.parse_strategy == "heuristic"
        assert isinstance(result, SingleResult)
        assert result.content == 'He said "hi" to me ' + second
        assert "\\" not in result.content

    def test_unescaped_quotes_recovered_as_sequence(self):
        second = _words("detail", 38)  # 265 chars, too long to merge with the opener
        raw = '["He said "hi" to me", "' + second + '"]'

        result = optimize(raw)

        assert isinstance(result, SequenceResult)
        assert result.units == ['He said "hi" to me', second]
        assert result.metadata.parse_strategy == "heuristic"
        assert result.metadata.transformations == []
        assert result.metadata.validation.issues == ["Unit 1 is 18 chars (<100)"]

    def test_mixed_escaped_and_unescaped_quotes(self):
        raw = r'["He said \"hi\" to "me"", "' + _words("detail", 38) + '"]'
        result = optimize(raw)
        assert result.units[0] == 'He said "hi" to "me"'

    def test_long_single_unit_split_at_sentence(self):
        text = _sentence_unit(30)
        assert len(text) == 350

        result = optimize(text)

        assert isinstance(result, SequenceResult)
        assert len(result.units) == 2
        assert result.units[0].endswith(".")
        assert len(result.units[0]) <= 280
        assert " ".join(result.units) == text
        assert result.metadata.original_format == "single"
        assert result.metadata.transformations == [SPLIT_LONG_UNIT]
        assert result.metadata.unit_count == 2

    def test_one_long_unit_in_sequence_is_split(self):
        long_unit = _sentence_unit(22)
        assert len(long_unit) == 310
        units = [_words("alpha", 25)] * 3 + [long_unit] + [_words("alpha", 25)] * 2

        result = optimize(json.dumps(units))

        assert isinstance(result, SequenceResult)
        assert len(result.units) == 7
        assert result.metadata.transformations == [SPLIT_LONG_UNITS]
        assert result.metadata.original_unit_count == 6
        assert result.metadata.unit_count == 7
        assert result.units[3] == _words("word", 40) + "."
        assert result.units[4] == _words("tail", 22)

    def test_dense_sequence_left_untouched(self):
        result = optimize(json.dumps(FIVE_DENSE_UNITS))

        assert isinstance(result, SequenceResult)
        assert result.is_multi_unit
        assert result.units == FIVE_DENSE_UNITS
        assert result.metadata.transformations == []
        assert result.metadata.validation.valid

    def test_invalid_config_rejected_before_parsing(self, monkeypatch):
        def _fail(raw_text):
            raise AssertionError("parser must not run")

        monkeypatch.setattr("threadfit.segment.engine.parse_units", _fail)

        with pytest.raises(ConfigurationError):
            optimize("anything", SegmenterConfig(min_unit_length=300, max_unit_length=200))

        bypassed = SegmenterConfig.model_construct(
            min_unit_length=300,
            max_unit_length=200,
            auto_collapse=True,
            collapse_threshold=240,
            pair_collapse_threshold=260,
            boundary_floor_ratio=0.6,
        )
        with pytest.raises(ConfigurationError):
            optimize("anything", bypassed)


class TestPipelineStages:
    """Stage-level behaviour of the orchestrator."""

    def test_short_plain_text_returned_as_single(self):
        result = optimize("  Just a thought about promises.\n")
        assert isinstance(result, SingleResult)
        assert result.content == "  Just a thought about promises.\n"
        assert result.metadata.transformations == []
        assert result.metadata.original_format == "single"
        assert result.metadata.parse_strategy == "fallback"

    def test_padding_trimmed_only_when_it_breaks_the_cap(self, config):
        text = "x" * 279
        result = optimize("  " + text + "\n", config)
        assert isinstance(result, SingleResult)
        assert result.content == text
        assert result.metadata.transformations == []

    def test_one_element_array_takes_single_path(self):
        result = optimize('["Only one unit here."]')
        assert isinstance(result, SingleResult)
        assert result.content == "Only one unit here."
        assert result.metadata.original_format == "sequence"

    def test_collapse_disabled_keeps_sequence(self):
        config = SegmenterConfig(auto_collapse=False)
        result = optimize('["Short line one.", "Short line two."]', config)
        assert isinstance(result, SequenceResult)
        # The opener is short and merges with the closing unit
        assert result.units == ["Short line one. Short line two."]
        assert result.metadata.transformations == [MERGED_SHORT_UNITS]

    def test_split_then_merge_recorded_in_order(self):
        units = [_words("alpha", 30), "x" * 290, "Short bridge.", _words("bravo", 30)]
        result = optimize(json.dumps(units))

        assert result.metadata.transformations == [SPLIT_LONG_UNITS, MERGED_SHORT_UNITS]
        assert all(len(u) <= 280 for u in result.units)

    def test_unmergeable_short_unit_records_no_transformation(self):
        units = ["Too short.", _words("detail", 39), _words("alpha", 30)]
        result = optimize(json.dumps(units))
        assert result.units == units
        assert result.metadata.transformations == []
        assert not result.metadata.validation.valid

    def test_fenced_output_is_handled(self):
        raw = "```json\n" + json.dumps(FIVE_DENSE_UNITS, indent=2) + "\n```"
        result = optimize(raw)
        assert result.units == FIVE_DENSE_UNITS
        assert result.metadata.parse_strategy == "extracted"

    def test_payload_shape(self):
        payload = optimize(json.dumps(FIVE_DENSE_UNITS)).to_payload()

        assert payload["content"] == FIVE_DENSE_UNITS
        assert payload["isMultiUnit"] is True
        meta = payload["metadata"]
        assert meta["originalFormat"] == "sequence"
        assert meta["transformations"] == []
        assert meta["unitCount"] == 5
        assert meta["originalUnitCount"] == 5
        assert meta["validation"]["valid"] is True

    def test_result_round_trips_through_discriminated_union(self):
        result = optimize(json.dumps(FIVE_DENSE_UNITS))
        adapter = TypeAdapter(OptimizationResult)
        restored = adapter.validate_python(result.model_dump())
        assert isinstance(restored, SequenceResult)
        assert restored.units == result.units

    def test_non_string_input_raises_type_error(self):
        with pytest.raises(TypeError):
            optimize(None)  # type: ignore[arg-type]

    def test_wrong_config_type_raises_type_error(self):
        with pytest.raises(TypeError):
            optimize("text", {"max_unit_length": 280})  # type: ignore[arg-type]

    def test_library_call_writes_nothing(self, capsys):
        """Without setup_logging, debug and info events stay silent."""
        optimize('["Short line one.", "Short line two."]')
        optimize(json.dumps(FIVE_DENSE_UNITS))

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""


MALFORMED_INPUTS = [
    "",
    "   ",
    "[",
    "[]",
    '[""]',
    "[1, 2, 3]",
    '{"tweet": "not a list"}',
    "null",
    "[" * 3000,
    '["unterminated',
    '```json\n["fenced", "but "broken""]\n```',
    "x" * 1000,
    "🚀 " * 200,
    "word, " * 120,
    json.dumps(["a" * 600, "b", "c" * 400]),
    json.dumps(["tiny"] * 40),
]


class TestInvariants:
    """Properties that hold for any string input and valid config."""

    @pytest.mark.parametrize("raw", MALFORMED_INPUTS)
    def test_never_raises_and_respects_cap(self, raw, config):
        result = optimize(raw, config)

        assert all(isinstance(u, str) for u in result.units)
        assert all(len(u) <= config.max_unit_length for u in result.units)
        if raw.strip():
            assert result.units and all(result.units)

    @pytest.mark.parametrize("max_length", [20, 64, 140, 280, 500])
    def test_cap_holds_across_configs(self, max_length):
        config = SegmenterConfig(min_unit_length=max_length // 2, max_unit_length=max_length)
        text = " ".join(f"Point {i}: this matters, truly." for i in range(50))
        result = optimize(json.dumps([text, "closing"]), config)
        assert all(len(u) <= max_length for u in result.units)

    def test_content_preserved_when_only_splitting(self, config):
        text = " ".join(f"Clause {i} goes here, then a pause. Next" for i in range(30))
        result = optimize(text, config)
        assert result.metadata.transformations == [SPLIT_LONG_UNIT]
        assert " ".join(result.units) == text

    def test_content_preserved_through_merge(self, config):
        units = ["Short.", _words("alpha", 30), "Also short.", _words("bravo", 30), "Bye."]
        result = optimize(json.dumps(units), config)
        assert " ".join(result.units) == " ".join(units)

    def test_order_preserved(self, config):
        units = [f"{i:02d} " + _words("unit", 40) for i in range(8)]
        result = optimize(json.dumps(units), config)
        prefixes = [u[:2] for u in result.units]
        assert prefixes == sorted(prefixes)

    def test_deterministic(self, config):
        raw = '["He said "hi" to me", "' + _words("detail", 38) + '"]'
        assert optimize(raw, config) == optimize(raw, config)


class TestIdempotence:
    """Re-running on previous output (same input shape) changes nothing."""

    @pytest.mark.parametrize(
        "raw",
        [
            json.dumps(FIVE_DENSE_UNITS),
            json.dumps([_words("alpha", 25)] * 3 + [_sentence_unit(22)] + [_words("alpha", 25)] * 2),
            _sentence_unit(30),
            '["Short line one.", "Short line two."]',
        ],
    )
    def test_second_pass_has_no_transformations(self, raw, config):
        first = optimize(raw, config)
        if isinstance(first, SequenceResult):
            again = optimize(json.dumps(first.units), config)
        else:
            again = optimize(first.content, config)

        assert again.metadata.transformations == []
        assert again.units == first.units
