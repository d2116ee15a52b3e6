"""Tests for current value resolution."""
from datetime import date, datetime, timedelta, timezone

import pytest

from goaltrack.models.challenge import Challenge, ChallengeParticipation
from goaltrack.models.goal import Goal, GoalCategory, GoalDirection
from goaltrack.models.measurement import Measurement
from goaltrack.models.metrics import BodyCompositionReading, GoalCurrentValue, UnifiedMetric
from goaltrack.services.body_metrics import aggregate_body_metrics
from goaltrack.services.value_resolver import ValueResolver

TODAY = date(2024, 5, 20)


def day(days_ago):
    return TODAY - timedelta(days=days_ago)


def make_goal(name, category=GoalCategory.GENERIC, direction=GoalDirection.HIGHER_IS_BETTER, **kwargs):
    return Goal(id=1, user_id=1, name=name, category=category, direction=direction, **kwargs)


def measurements(*values, source="manual"):
    """Newest first, one per day ending today."""
    return [
        Measurement(id=i + 1, goal_id=1, user_id=1, value=value, measurement_date=day(i), source=source)
        for i, value in enumerate(values)
    ]


def unified(metric_name, value, days_ago, source="wearable"):
    return UnifiedMetric(user_id=1, metric_name=metric_name, value=value, source=source, measurement_date=day(days_ago))


def body_fat_reading(source, days_ago, value):
    return BodyCompositionReading(user_id=1, source=source, measurement_date=day(days_ago), body_fat=value)


@pytest.fixture
def resolver():
    return ValueResolver(today=TODAY)


@pytest.fixture
def body_fat_goal():
    return make_goal("Body fat 11%", GoalCategory.BODY_FAT, GoalDirection.LOWER_IS_BETTER, target_value=11.0)


class TestWearableMetrics:

    @pytest.fixture
    def hrv_goal(self):
        return make_goal("HRV 65", GoalCategory.WEARABLE_METRIC, metric_name="HRV", target_value=65.0)

    def test_wearable_beats_manual(self, resolver, hrv_goal):
        history = [
            unified("HRV RMSSD", 62.0, 0, source="whoop"),
            unified("Steps", 9000, 0),
            unified("HRV", 58.0, 1, source="oura"),
        ]
        resolved = resolver.resolve(hrv_goal, measurements(50.0), unified_history=history)

        assert resolved.current_value == 62.0
        assert resolved.source == "wearable"
        assert [point.value for point in resolved.sparkline] == [62.0, 58.0]
        assert resolved.baseline_value == 58.0
        assert resolved.has_data

    def test_competing_sources(self, resolver, hrv_goal):
        history = [unified("HRV", 62.0, 0, source="whoop"), unified("HRV", 58.0, 1, source="oura")]
        resolved = resolver.resolve(hrv_goal, [], unified_history=history)

        assert {(c.source, c.label, c.value) for c in resolved.competing} == {
            ("whoop", "Whoop", 62.0),
            ("oura", "Oura", 58.0),
        }

    def test_single_source_has_no_competition(self, resolver, hrv_goal):
        history = [unified("HRV", 62.0, 0), unified("HRV", 58.0, 1)]
        assert resolver.resolve(hrv_goal, [], unified_history=history).competing == []

    def test_falls_back_to_measurements(self, resolver, hrv_goal):
        resolved = resolver.resolve(hrv_goal, measurements(55.0, 54.0), unified_history=[unified("Steps", 1, 0)])
        assert resolved.current_value == 55.0
        assert resolved.source == "manual"


class TestBodyComposition:

    def test_aggregate_wins(self, resolver, body_fat_goal):
        body_metrics = aggregate_body_metrics([
            body_fat_reading("withings", 0, 15.2),
            body_fat_reading("inbody", 3, 15.0),
            body_fat_reading("inbody", 10, 16.5),
        ])
        resolved = resolver.resolve(body_fat_goal, measurements(14.0), body_metrics=body_metrics)

        assert resolved.current_value == 15.0
        assert resolved.source == "inbody"
        assert [point.value for point in resolved.sparkline] == [15.2, 15.0, 16.5]
        assert resolved.baseline_value == 16.5
        assert [c.source for c in resolved.competing] == ["inbody", "withings"]
        assert resolved.competing[0].label == "InBody"

    def test_challenge_baseline_since_start(self, resolver, body_fat_goal):
        body_metrics = aggregate_body_metrics([
            body_fat_reading("inbody", 0, 16.0),
            body_fat_reading("inbody", 10, 17.0),
            body_fat_reading("inbody", 30, 19.0),
        ])
        challenge = Challenge(id=7, title="Spring Cut", start_date=day(20))
        participation = ChallengeParticipation(challenge_id=7, user_id=1, baseline_body_fat=18.5)

        resolved = resolver.resolve(
            body_fat_goal, [], body_metrics=body_metrics, participation=participation, challenge=challenge,
        )

        assert [point.value for point in resolved.sparkline] == [16.0, 17.0]
        assert resolved.baseline_value == 17.0

    def test_baseline_recorded_at_overrides_challenge_start(self, resolver, body_fat_goal):
        body_metrics = aggregate_body_metrics([
            body_fat_reading("inbody", 0, 16.0),
            body_fat_reading("inbody", 10, 17.0),
        ])
        challenge = Challenge(id=7, title="Spring Cut", start_date=day(20))
        participation = ChallengeParticipation(
            challenge_id=7, user_id=1, baseline_recorded_at=datetime.combine(day(5), datetime.min.time(), tzinfo=timezone.utc),
            baseline_body_fat=18.5,
        )

        resolved = resolver.resolve(
            body_fat_goal, [], body_metrics=body_metrics, participation=participation, challenge=challenge,
        )

        assert [point.value for point in resolved.sparkline] == [16.0]
        assert resolved.baseline_value == 18.5

    def test_no_readings_since_start_uses_snapshot(self, resolver, body_fat_goal):
        body_metrics = aggregate_body_metrics([body_fat_reading("inbody", 30, 19.0)])
        challenge = Challenge(id=7, title="Spring Cut", start_date=day(20))
        participation = ChallengeParticipation(challenge_id=7, user_id=1, baseline_body_fat=18.5)

        resolved = resolver.resolve(
            body_fat_goal, [], body_metrics=body_metrics, participation=participation, challenge=challenge,
        )

        assert resolved.current_value == 19.0
        assert resolved.sparkline == []
        assert resolved.baseline_value == 18.5

    def test_stale_body_fat_measurements_are_ignored(self, resolver, body_fat_goal):
        resolved = resolver.resolve(body_fat_goal, measurements_at(40, 15.0))
        assert not resolved.has_data
        assert resolved.current_value == 0.0

    def test_fresh_measurement_uses_participation_snapshot(self, resolver, body_fat_goal):
        participation = ChallengeParticipation(challenge_id=7, user_id=1, baseline_body_fat=18.0)
        resolved = resolver.resolve(body_fat_goal, measurements(14.0), participation=participation)

        assert resolved.current_value == 14.0
        assert resolved.baseline_value == 18.0

    def test_weight_measurements_never_go_stale(self, resolver):
        goal = make_goal("Weight 75", GoalCategory.WEIGHT, GoalDirection.LOWER_IS_BETTER)
        resolved = resolver.resolve(goal, measurements_at(60, 80.0))
        assert resolved.current_value == 80.0


class TestCurrentValueRecord:

    @pytest.fixture
    def goal(self):
        return make_goal("Bench press", target_value=90.0)

    def test_record_beats_measurements(self, resolver, goal):
        record = GoalCurrentValue(goal_id=1, current_value=85.0, source="strava")
        resolved = resolver.resolve(goal, measurements(80.0, 75.0, 70.0), current_value=record)

        assert resolved.current_value == 85.0
        assert resolved.source == "strava"
        assert [point.value for point in resolved.sparkline] == [80.0, 75.0, 70.0]
        assert resolved.baseline_value == 70.0

    def test_sparkline_from_unified_history_with_goal_name(self, resolver, goal):
        record = GoalCurrentValue(goal_id=1, current_value=85.0, source="manual")
        history = [unified("Bench press", 85.0, 0), unified("Bench press", 82.0, 3)]
        resolved = resolver.resolve(goal, measurements(80.0), unified_history=history, current_value=record)

        assert [point.value for point in resolved.sparkline] == [85.0, 82.0]
        assert resolved.baseline_value == 82.0

    def test_zero_record_is_ignored(self, resolver, goal):
        record = GoalCurrentValue(goal_id=1, current_value=0.0, source="manual")
        resolved = resolver.resolve(goal, measurements(80.0), current_value=record)
        assert resolved.current_value == 80.0


class TestMeasurements:

    def test_latest_measurement(self, resolver):
        goal = make_goal("Pull-ups")
        resolved = resolver.resolve(goal, measurements(12.0, 10.0, 8.0))

        assert resolved.current_value == 12.0
        assert resolved.source == "manual"
        assert resolved.baseline_value == 8.0

    def test_single_measurement_has_no_baseline(self, resolver):
        resolved = resolver.resolve(make_goal("Pull-ups"), measurements(12.0))
        assert resolved.baseline_value is None

    def test_sparkline_is_capped(self, resolver):
        values = [float(v) for v in range(30, 10, -1)]
        resolved = resolver.resolve(make_goal("Pull-ups"), measurements(*values))

        assert len(resolved.sparkline) == 14
        assert resolved.sparkline[0].value == 30.0
        assert resolved.baseline_value == 17.0

    def test_goal_baseline_overrides_derived_one(self, resolver):
        goal = make_goal("Pull-ups", baseline_value=5.0)
        assert resolver.resolve(goal, measurements(12.0, 10.0)).baseline_value == 5.0


class TestNoData:

    def test_empty_sources(self, resolver):
        resolved = resolver.resolve(make_goal("Pull-ups", target_value=20.0), [])

        assert not resolved.has_data
        assert resolved.current_value == 0.0
        assert resolved.source == "manual"
        assert resolved.sparkline == []
        assert resolved.baseline_value is None


def measurements_at(days_ago, value):
    return [Measurement(id=1, goal_id=1, user_id=1, value=value, measurement_date=day(days_ago))]


class TestWearableNamesWithBodyMetrics:

    @pytest.fixture
    def goal(self):
        return make_goal(
            "Weight after sleep", GoalCategory.WEARABLE_METRIC, GoalDirection.LOWER_IS_BETTER,
            metric_name="Sleep Duration", target_value=75.0,
        )

    def test_body_metric_used_without_wearable_readings(self, resolver, goal):
        body_metrics = aggregate_body_metrics([
            BodyCompositionReading(user_id=1, source="withings", measurement_date=day(0), weight=80.5),
        ])
        resolved = resolver.resolve(goal, [], body_metrics=body_metrics)

        assert resolved.current_value == 80.5
        assert resolved.source == "withings"

    def test_wearable_readings_still_win(self, resolver, goal):
        body_metrics = aggregate_body_metrics([
            BodyCompositionReading(user_id=1, source="withings", measurement_date=day(0), weight=80.5),
        ])
        history = [unified("Sleep Hours", 7.5, 0)]
        resolved = resolver.resolve(goal, [], unified_history=history, body_metrics=body_metrics)

        assert resolved.current_value == 7.5
        assert resolved.source == "wearable"


class TestStaleBodyFatBaseline:

    def test_baseline_ignores_readings_outside_window(self, resolver, body_fat_goal):
        rows = measurements(14.0) + measurements_at(40, 20.0)
        resolved = resolver.resolve(body_fat_goal, rows)

        assert resolved.current_value == 14.0
        assert resolved.baseline_value == 14.0
