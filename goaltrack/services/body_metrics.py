"""
Multi-source body composition aggregation.

Scanner, smart scale, tracker and manual readings are merged per metric.
The best candidate is picked by source priority first and recency second:

1. InBody (most accurate, rare)
2. Withings (daily scales)
3. Garmin / Oura (medium accuracy)
4. Whoop (weight only)
5. Manual entries (lowest priority)
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from goaltrack.models.metrics import BodyCompositionReading
from goaltrack.schemas.views import (
    AggregatedBodyMetric,
    BodyMetrics,
    SourceReading,
    SparklinePoint,
)

SOURCE_PRIORITY: Dict[str, int] = {
    "inbody": 1,
    "withings": 2,
    "garmin": 3,
    "oura": 4,
    "whoop": 5,
    "manual": 6,
}
UNKNOWN_SOURCE_PRIORITY = 99

SOURCE_CONFIDENCE: Dict[str, int] = {
    "inbody": 95,
    "withings": 85,
    "garmin": 75,
    "oura": 75,
    "whoop": 70,
    "manual": 50,
}
DEFAULT_CONFIDENCE = 50

BODY_METRIC_FIELDS = ("weight", "body_fat", "muscle_mass")


def source_priority(source: str) -> int:
    return SOURCE_PRIORITY.get(source.lower(), UNKNOWN_SOURCE_PRIORITY)


def aggregate_metric(readings: Iterable[BodyCompositionReading], field: str) -> Optional[AggregatedBodyMetric]:
    """Merge one metric (weight, body_fat or muscle_mass) across all sources."""
    candidates = [r for r in readings if getattr(r, field) is not None]
    if not candidates:
        return None

    best = min(
        candidates,
        key=lambda r: (source_priority(r.source), -r.measurement_date.toordinal()),
    )

    # Latest reading per source
    sources: Dict[str, SourceReading] = {}
    for reading in sorted(candidates, key=lambda r: r.measurement_date, reverse=True):
        source = reading.source.lower()
        if source not in sources:
            sources[source] = SourceReading(
                value=getattr(reading, field),
                measurement_date=reading.measurement_date,
            )

    # One point per day, taken from the best source of that day
    per_day: Dict = {}
    for reading in candidates:
        day = reading.measurement_date
        current = per_day.get(day)
        if current is None or source_priority(reading.source) < source_priority(current.source):
            per_day[day] = reading
    sparkline: List[SparklinePoint] = [
        SparklinePoint(value=getattr(reading, field), measurement_date=day)
        for day, reading in sorted(per_day.items(), key=lambda item: item[0], reverse=True)
    ]

    source = best.source.lower()
    return AggregatedBodyMetric(
        value=getattr(best, field),
        source=source,
        measurement_date=best.measurement_date,
        confidence=SOURCE_CONFIDENCE.get(source, DEFAULT_CONFIDENCE),
        sparkline=sparkline,
        sources=sources,
    )


def aggregate_body_metrics(readings: Iterable[BodyCompositionReading]) -> BodyMetrics:
    readings = list(readings)
    return BodyMetrics(**{field: aggregate_metric(readings, field) for field in BODY_METRIC_FIELDS})
