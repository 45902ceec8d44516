"""Tests for shaping raw response values."""

from dataclasses import dataclass

import pytest

from persona_sharpener.schema import QuestionType, RankedItem
from persona_sharpener.values import (
    BlankValue,
    ChoiceValue,
    RankingValue,
    ScenarioValue,
    SelectionValue,
    SliderValue,
    ValueShapeError,
    canonical_json,
    item_id,
    item_key,
    parse_value,
)


class TestCanonicalJson:

    def test_key_order_ignored(self):
        assert canonical_json({"b": 1, "a": [1, 2]}) == canonical_json({"a": [1, 2], "b": 1})

    def test_bool_and_number_differ(self):
        assert canonical_json(True) != canonical_json(1)

    def test_unserializable_values_fall_back(self):
        """Objects json cannot encode are rendered via str()."""
        assert canonical_json({"when": object}) == canonical_json({"when": object})


class TestItemId:
    """Tests for ranking/selection item ids."""

    def test_plain_id(self):
        assert item_id("save-time") == "save-time"

    def test_dict_item(self):
        assert item_id({"id": "save-time", "label": "Save time"}) == "save-time"
        assert item_id({"label": "no id"}) is None

    def test_model_item(self):
        assert item_id(RankedItem(id="ads", label="Paid ads")) == "ads"

    def test_object_with_id_attribute(self):
        @dataclass
        class Item:
            id: str

        assert item_id(Item(id="x")) == "x"

    def test_unwrapped_id_kept_as_is(self):
        assert item_id({"id": ["a"]}) == ["a"]


class TestItemKey:
    """Tests for item comparison keys."""

    def test_plain_and_wrapped_ids_share_a_key(self):
        assert item_key("save-time") == item_key({"id": "save-time"}) == '"save-time"'

    def test_unhashable_ids(self):
        assert item_key(["a", "b"]) == canonical_json(["a", "b"])
        assert item_key({"id": {"b": 1, "a": 2}}) == item_key({"id": {"a": 2, "b": 1}})

    def test_numbers_and_booleans_differ(self):
        assert len({item_key(1), item_key(1.0), item_key(True)}) == 3

    def test_missing_id(self):
        assert item_key({"label": "no id"}) is None
        assert item_key(None) is None


class TestParseValue:
    """Tests for per-type value shaping."""

    def test_choice(self):
        value = parse_value(QuestionType.EXACT_CHOICE, "younger")
        assert value == ChoiceValue(canonical='"younger"')

    def test_slider(self):
        assert parse_value(QuestionType.SLIDER, 72) == SliderValue(position=72.0)
        assert parse_value(QuestionType.SLIDER, 12.5) == SliderValue(position=12.5)

    @pytest.mark.parametrize("raw", ["72", None, True, [], float("inf")])
    def test_slider_fallback(self, raw):
        assert parse_value(QuestionType.SLIDER, raw) == SliderValue(position=50.0)

    def test_ranking_keeps_order(self):
        value = parse_value(QuestionType.RANKING, ["b", {"id": "a"}, {"label": "x"}])
        assert value == RankingValue(item_ids=('"b"', '"a"', None))

    def test_selection_ignores_order_and_duplicates(self):
        first = parse_value(QuestionType.MULTI_SELECT, ["a", "b", "a"])
        second = parse_value(QuestionType.MULTI_SELECT, ("b", "a"))
        assert first == second == SelectionValue(option_ids=frozenset({'"a"', '"b"'}))

    def test_blanks_normalized(self):
        value = parse_value(QuestionType.FILL_BLANK, {"blank": "  Lose Weight ", "timeframe": None})
        assert isinstance(value, BlankValue)
        assert value.as_dict() == {"blank": "lose weight", "timeframe": ""}

    def test_scenario_lowercased(self):
        assert parse_value(QuestionType.SCENARIO, "Tried APPS") == ScenarioValue(text="tried apps")

    @pytest.mark.parametrize("raw", [None, "", 0, False])
    def test_scenario_missing_text(self, raw):
        assert parse_value(QuestionType.SCENARIO, raw) == ScenarioValue(text="")

    @pytest.mark.parametrize("question_type,raw", [
        (QuestionType.RANKING, "save-time"),
        (QuestionType.RANKING, None),
        (QuestionType.MULTI_SELECT, "privacy"),
        (QuestionType.MULTI_SELECT, {"privacy": True}),
        (QuestionType.FILL_BLANK, ["a"]),
        (QuestionType.FILL_BLANK, "text"),
    ])
    def test_malformed_values_raise(self, question_type, raw):
        with pytest.raises(ValueShapeError) as exc_info:
            parse_value(question_type, raw)
        assert exc_info.value.question_type == question_type

    def test_shape_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_value(QuestionType.RANKING, 3)
