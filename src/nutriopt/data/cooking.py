"""Vitamin retention after cooking.

Rates are the percentage of a vitamin left after preparing a food with a
given method (e.g. vitamin C keeps 60% when heated).
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Mapping, Optional

from nutriopt.data.nutrients import NUTRIENT_INDEX, Nutrient

if TYPE_CHECKING:
    from nutriopt.optimizer.models import Food

NO_COOKING = "none"

RETAINED_NUTRIENTS: tuple[Nutrient, ...] = (
    Nutrient.VITAMIN_C,
    Nutrient.VITAMIN_B1,
    Nutrient.VITAMIN_B2,
    Nutrient.VITAMIN_B3,
    Nutrient.VITAMIN_B5,
    Nutrient.VITAMIN_B6,
    Nutrient.VITAMIN_B9,
)

# method -> nutrient -> retention percent
DEFAULT_RETENTION_RATES: dict[str, dict[Nutrient, float]] = {
    NO_COOKING: {n: 100.0 for n in RETAINED_NUTRIENTS},
    # Stir-frying, steaming, grilling
    "heated": {
        Nutrient.VITAMIN_C: 60.0,
        Nutrient.VITAMIN_B1: 75.0,
        Nutrient.VITAMIN_B2: 80.0,
        Nutrient.VITAMIN_B3: 85.0,
        Nutrient.VITAMIN_B5: 80.0,
        Nutrient.VITAMIN_B6: 75.0,
        Nutrient.VITAMIN_B9: 70.0,
    },
    "fried": {
        Nutrient.VITAMIN_C: 50.0,
        Nutrient.VITAMIN_B1: 70.0,
        Nutrient.VITAMIN_B2: 75.0,
        Nutrient.VITAMIN_B3: 80.0,
        Nutrient.VITAMIN_B5: 75.0,
        Nutrient.VITAMIN_B6: 70.0,
        Nutrient.VITAMIN_B9: 65.0,
    },
}


def get_retention_rate(
    cooking_method: str,
    nutrient: Nutrient,
    rates: Optional[Mapping[str, Mapping[Nutrient, float]]] = None,
) -> float:
    """Percentage of a nutrient retained by a cooking method (100 if unknown)."""
    table = DEFAULT_RETENTION_RATES if rates is None else rates
    return table.get(cooking_method.strip().lower(), {}).get(nutrient, 100.0)


def apply_cooking_retention(
    food: Food,
    rates: Optional[Mapping[str, Mapping[Nutrient, float]]] = None,
) -> Food:
    """Return a copy of the food with cooking losses applied.

    Uses the food's own cooking_method. Retained values are rounded to
    2 decimals.
    """
    method = (food.cooking_method or NO_COOKING).strip().lower()
    if method == NO_COOKING:
        return food

    values = list(food.nutrients)
    for nutrient in RETAINED_NUTRIENTS:
        i = NUTRIENT_INDEX[nutrient]
        rate = get_retention_rate(method, nutrient, rates)
        values[i] = round(values[i] * rate / 100.0, 2)

    return replace(food, nutrients=tuple(values))
