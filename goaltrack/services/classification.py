"""
Goal classification.

Direction and category are decided once, when a goal is created or renamed,
and stored on the goal. Reads look at the name again only to find the body
metric a wearable goal may also name.
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from goaltrack.models.goal import GoalCategory, GoalDirection

logger = logging.getLogger(__name__)

# Canonical unified metric name -> (name keywords, metric names stored by devices)
WEARABLE_METRICS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    "Recovery Score": (("recovery", "восстановлен"), ("Recovery Score",)),
    "HRV": (("hrv", "вариабельн"), ("HRV", "HRV RMSSD")),
    "Resting Heart Rate": (("resting heart rate", "resting hr", "пульс покоя"), ("Resting Heart Rate",)),
    "Sleep Duration": (("sleep", "сон", "сна"), ("Sleep Duration", "Sleep Hours")),
}

# Keywords match at a word start only: "сон" must not hit "персональный", nor "сна" "весна"
WEARABLE_PATTERNS = {
    canonical: re.compile("|".join(r"\b" + re.escape(keyword) for keyword in keywords))
    for canonical, (keywords, _) in WEARABLE_METRICS.items()
}

# Checked in order; body fat comes before weight so "body fat weight" stays body fat
BODY_COMPOSITION_KEYWORDS: List[Tuple[GoalCategory, Tuple[str, ...]]] = [
    (GoalCategory.BODY_FAT, ("fat", "жир")),
    (GoalCategory.MUSCLE_MASS, ("muscle", "мышц")),
    (GoalCategory.WEIGHT, ("weight", "вес")),
]

# "run" only at a word start so "crunches" is not a running goal
LOWER_IS_BETTER_PATTERN = re.compile(r"fat|жир|weight|вес|\brun|бег|км")
DURATION_KEYWORDS = ("plank", "планк", "vo2", "duration", "hold", "удержан", "длительн")


@dataclass(frozen=True)
class GoalClassification:
    direction: GoalDirection
    category: GoalCategory
    metric_name: Optional[str] = None


def _contains_any(text: str, keywords) -> bool:
    return any(keyword in text for keyword in keywords)


def match_wearable_metric(name: str) -> Optional[str]:
    """Return the canonical wearable metric a goal name refers to, if any."""
    name_lower = name.lower()
    for canonical, pattern in WEARABLE_PATTERNS.items():
        if pattern.search(name_lower):
            return canonical
    return None


def metric_name_variants(metric_name: str) -> Tuple[str, ...]:
    """All unified metric names that count as readings for a canonical metric."""
    if metric_name in WEARABLE_METRICS:
        return WEARABLE_METRICS[metric_name][1]
    return (metric_name,)


def match_body_composition(name: str) -> Optional[GoalCategory]:
    name_lower = name.lower()
    for category, keywords in BODY_COMPOSITION_KEYWORDS:
        if _contains_any(name_lower, keywords):
            return category
    return None


def is_duration_goal(name: str) -> bool:
    return _contains_any(name.lower(), DURATION_KEYWORDS)


def classify_direction(name: str, category: GoalCategory = GoalCategory.GENERIC) -> GoalDirection:
    """Lower is better for fat, weight and running goals unless the goal is a duration."""
    if category == GoalCategory.MUSCLE_MASS or is_duration_goal(name):
        return GoalDirection.HIGHER_IS_BETTER
    if LOWER_IS_BETTER_PATTERN.search(name.lower()):
        return GoalDirection.LOWER_IS_BETTER
    return GoalDirection.HIGHER_IS_BETTER


def classify_goal(name: str) -> GoalClassification:
    metric_name = match_wearable_metric(name)
    if metric_name is not None:
        category = GoalCategory.WEARABLE_METRIC
    else:
        category = match_body_composition(name) or GoalCategory.GENERIC

    if category == GoalCategory.GENERIC and not LOWER_IS_BETTER_PATTERN.search(name.lower()):
        logger.debug(f"No known vocabulary in goal name '{name}', treating as generic higher-is-better")

    return GoalClassification(
        direction=classify_direction(name, category),
        category=category,
        metric_name=metric_name,
    )
