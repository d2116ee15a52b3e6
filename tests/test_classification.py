"""Tests for goal name classification."""
import pytest

from goaltrack.models.goal import GoalCategory, GoalDirection
from goaltrack.services.classification import (
    classify_direction,
    classify_goal,
    is_duration_goal,
    match_body_composition,
    match_wearable_metric,
    metric_name_variants,
)

LOWER = GoalDirection.LOWER_IS_BETTER
HIGHER = GoalDirection.HIGHER_IS_BETTER


class TestWearableMetrics:

    @pytest.mark.parametrize("name, metric", [
        ("Recovery 70+", "Recovery Score"),
        ("Восстановление", "Recovery Score"),
        ("HRV above 60", "HRV"),
        ("Resting HR under 55", "Resting Heart Rate"),
        ("Sleep 8 hours", "Sleep Duration"),
        ("Bench press", None),
    ])
    def test_match(self, name, metric):
        assert match_wearable_metric(name) == metric

    def test_classified_as_wearable(self):
        result = classify_goal("HRV 65 ms")
        assert result.category == GoalCategory.WEARABLE_METRIC
        assert result.metric_name == "HRV"
        assert result.direction == HIGHER

    def test_variants(self):
        assert metric_name_variants("HRV") == ("HRV", "HRV RMSSD")
        assert metric_name_variants("Steps") == ("Steps",)


class TestBodyComposition:

    def test_body_fat_wins_over_weight(self):
        assert match_body_composition("Body fat weight") == GoalCategory.BODY_FAT

    @pytest.mark.parametrize("name, category, direction", [
        ("Body fat 11%", GoalCategory.BODY_FAT, LOWER),
        ("Процент жира", GoalCategory.BODY_FAT, LOWER),
        ("Weight 75kg", GoalCategory.WEIGHT, LOWER),
        ("Вес 75", GoalCategory.WEIGHT, LOWER),
        ("Muscle mass 40kg", GoalCategory.MUSCLE_MASS, HIGHER),
        ("Мышцы 40 кг", GoalCategory.MUSCLE_MASS, HIGHER),
    ])
    def test_classify(self, name, category, direction):
        result = classify_goal(name)
        assert result.category == category
        assert result.direction == direction
        assert result.metric_name is None


class TestDirection:

    def test_running_is_lower_is_better(self):
        assert classify_direction("5k run time") == LOWER
        assert classify_direction("Бег 10 км") == LOWER

    def test_crunches_are_not_running(self):
        assert classify_direction("100 crunches") == HIGHER

    def test_duration_overrides_lower_keywords(self):
        assert is_duration_goal("Plank hold 3 min")
        assert classify_direction("Weighted plank") == HIGHER
        assert classify_direction("VO2 max") == HIGHER

    def test_unknown_name_is_generic_higher(self):
        result = classify_goal("Bench press 100kg")
        assert result.category == GoalCategory.GENERIC
        assert result.direction == HIGHER


class TestWordStartKeywords:

    @pytest.mark.parametrize("name, category", [
        ("Персональный вес", GoalCategory.WEIGHT),
        ("Весна: вес 70", GoalCategory.WEIGHT),
        ("Весна без жира", GoalCategory.BODY_FAT),
    ])
    def test_sleep_keywords_inside_words_are_ignored(self, name, category):
        result = classify_goal(name)
        assert result.category == category
        assert result.metric_name is None

    @pytest.mark.parametrize("name", ["Сон 8 часов", "Без сна не больше 1 ночи", "Deep sleep 2h"])
    def test_sleep_keywords_at_word_start(self, name):
        assert match_wearable_metric(name) == "Sleep Duration"
