"""Turn solved package counts into picks, nutrient totals and a score."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from nutriopt.data.nutrients import (
    DEFAULT_PRIORITIES,
    NUTRIENT_COUNT,
    NUTRIENT_INDEX,
    Nutrient,
    PriorityWeights,
    find_nutrient,
    get_nutrient_unit,
)
from nutriopt.optimizer.models import Food, NutrientSummary, NutrientTarget, Pick

# Achievement rates in this range (percent) score a full 100
PLATEAU_LOW = 80.0
PLATEAU_HIGH = 120.0
# Score lost per percentage point outside the plateau is 1 / SCORE_SLOPE
SCORE_SLOPE = 0.8


def build_picks(
    foods: Sequence[Food],
    counts: Sequence[int],
    multipliers: Sequence[float],
) -> list[Pick]:
    """Build picks for every food with a positive count."""
    picks = []
    for food, count, multiplier in zip(foods, counts, multipliers):
        count = int(count)
        if count <= 0:
            continue
        amount = count * float(multiplier)
        picks.append(
            Pick(
                food=food,
                count=count,
                amount=amount,
                cost=food.price_per_100g * amount,
            )
        )
    return picks


def nutrient_totals(picks: Sequence[Pick]) -> np.ndarray:
    """Total of every registry nutrient across the picks, shape (35,)."""
    totals = np.zeros(NUTRIENT_COUNT)
    for pick in picks:
        totals += np.asarray(pick.food.nutrients, dtype=float) * pick.amount
    return totals


def achievement_rate(actual: float, reference: Optional[float]) -> float:
    """Actual amount as a percentage of the reference (0 without a positive reference)."""
    if reference is None or reference <= 0:
        return 0.0
    return actual / reference * 100.0


def nutrient_score(rate: float) -> float:
    """Score 0-100 for an achievement rate.

    Full marks on the plateau, falling linearly on both sides with the same
    slope.
    """
    if PLATEAU_LOW <= rate <= PLATEAU_HIGH:
        return 100.0
    if rate < PLATEAU_LOW:
        return max(0.0, rate / SCORE_SLOPE)
    return max(0.0, 100.0 - (rate - PLATEAU_HIGH) / SCORE_SLOPE)


def build_summary(
    picks: Sequence[Pick],
    targets: Sequence[NutrientTarget],
    unknown_keys: Sequence[str] = (),
    priorities: PriorityWeights = DEFAULT_PRIORITIES,
) -> tuple[dict[str, NutrientSummary], float]:
    """Summarize nutrient achievement for a solution.

    Targeted nutrients come first, keyed by their registry key. Every other
    registry nutrient follows with no target, and unknown target keys are
    listed with a NaN actual value.

    Args:
        picks: Chosen foods
        targets: Nutrient targets
        unknown_keys: Target keys missing from the registry
        priorities: Tier weights for the aggregate score

    Returns:
        (summary, nutrition_score) where nutrition_score is the tier-weighted
        average of per-nutrient scores over targets with a positive reference
    """
    totals = nutrient_totals(picks)
    summary: dict[str, NutrientSummary] = {}
    weighted_scores: list[tuple[float, float]] = []

    for target in targets:
        nutrient = find_nutrient(target.nutrient_key)
        if nutrient is None:
            continue

        actual = float(totals[NUTRIENT_INDEX[nutrient]])
        reference = target.reference_value()
        rate = achievement_rate(actual, reference)

        if reference is not None and reference > 0:
            weighted_scores.append((nutrient_score(rate), priorities.weight(nutrient)))

        summary[nutrient.key] = NutrientSummary(
            actual=actual,
            target=reference,
            min_value=target.min_value,
            max_value=target.max_value,
            achievement_rate=rate,
            unit=target.unit or get_nutrient_unit(nutrient),
        )

    for nutrient in Nutrient:
        if nutrient.key not in summary:
            summary[nutrient.key] = NutrientSummary(
                actual=float(totals[NUTRIENT_INDEX[nutrient]]),
                target=None,
                min_value=None,
                max_value=None,
                achievement_rate=0.0,
                unit=get_nutrient_unit(nutrient),
            )

    by_key = {t.nutrient_key.lower(): t for t in reversed(list(targets))}
    for key in unknown_keys:
        target = by_key.get(key.lower())
        summary[key] = NutrientSummary(
            actual=math.nan,
            target=target.recommended if target else None,
            min_value=target.min_value if target else None,
            max_value=target.max_value if target else None,
            achievement_rate=0.0,
            unit=target.unit if target else "",
        )

    score = 0.0
    if weighted_scores:
        total_weight = sum(w for _, w in weighted_scores)
        score = sum(s * w for s, w in weighted_scores) / total_weight

    return summary, score
