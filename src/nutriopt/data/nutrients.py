"""Nutrient registry and priority weights.

Every food carries a fixed vector of 35 nutrient values per 100g (or 100ml),
ordered by the ``Nutrient`` enum. String keys are matched case-insensitively
only at the input boundary; everything past that works with enum members.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Mapping, Optional

if TYPE_CHECKING:
    from nutriopt.optimizer.models import Food


class Nutrient(Enum):
    """Nutrients tracked for every food, keyed by their external name."""

    # Basics
    KCAL = "kcal"
    MOISTURE = "moisture_g"
    PROTEIN = "protein_g"
    FAT = "fat_g"
    SATURATED_FAT = "saturated_fat_g"
    TRANS_FAT = "trans_fat_g"
    CARBS = "carbs_g"
    FIBER = "fiber_g"
    SUGAR = "sugar_g"
    SODIUM = "sodium_mg"
    CHOLESTEROL = "cholesterol_mg"
    # Minerals
    CALCIUM = "calcium_mg"
    IRON = "iron_mg"
    MAGNESIUM = "magnesium_mg"
    PHOSPHORUS = "phosphorus_mg"
    POTASSIUM = "potassium_mg"
    ZINC = "zinc_mg"
    COPPER = "copper_mg"
    MANGANESE = "manganese_mg"
    SELENIUM = "selenium_ug"
    MOLYBDENUM = "molybdenum_ug"
    IODINE = "iodine_ug"
    # Vitamins
    VITAMIN_A = "vitamin_a_ug"
    VITAMIN_C = "vitamin_c_mg"
    VITAMIN_D = "vitamin_d_ug"
    VITAMIN_E = "vitamin_e_mg"
    VITAMIN_K = "vitamin_k_ug"
    VITAMIN_B1 = "vitamin_b1_mg"
    VITAMIN_B2 = "vitamin_b2_mg"
    VITAMIN_B3 = "vitamin_b3_mg"
    VITAMIN_B5 = "vitamin_b5_mg"
    VITAMIN_B6 = "vitamin_b6_mg"
    VITAMIN_B7 = "vitamin_b7_ug"
    VITAMIN_B9 = "vitamin_b9_ug"
    VITAMIN_B12 = "vitamin_b12_ug"

    @property
    def key(self) -> str:
        return self.value


# Slot of each nutrient in a food's nutrient vector
NUTRIENT_INDEX: Mapping[Nutrient, int] = MappingProxyType(
    {n: i for i, n in enumerate(Nutrient)}
)

NUTRIENT_COUNT = len(NUTRIENT_INDEX)

NUTRIENT_UNITS: dict[Nutrient, str] = {
    Nutrient.KCAL: "kcal",
    Nutrient.MOISTURE: "g",
    Nutrient.PROTEIN: "g",
    Nutrient.FAT: "g",
    Nutrient.SATURATED_FAT: "g",
    Nutrient.TRANS_FAT: "g",
    Nutrient.CARBS: "g",
    Nutrient.FIBER: "g",
    Nutrient.SUGAR: "g",
    Nutrient.SODIUM: "mg",
    Nutrient.CHOLESTEROL: "mg",
    Nutrient.CALCIUM: "mg",
    Nutrient.IRON: "mg",
    Nutrient.MAGNESIUM: "mg",
    Nutrient.PHOSPHORUS: "mg",
    Nutrient.POTASSIUM: "mg",
    Nutrient.ZINC: "mg",
    Nutrient.COPPER: "mg",
    Nutrient.MANGANESE: "mg",
    Nutrient.SELENIUM: "ug",
    Nutrient.MOLYBDENUM: "ug",
    Nutrient.IODINE: "ug",
    Nutrient.VITAMIN_A: "ug",
    Nutrient.VITAMIN_C: "mg",
    Nutrient.VITAMIN_D: "ug",
    Nutrient.VITAMIN_E: "mg",
    Nutrient.VITAMIN_K: "ug",
    Nutrient.VITAMIN_B1: "mg",
    Nutrient.VITAMIN_B2: "mg",
    Nutrient.VITAMIN_B3: "mg",
    Nutrient.VITAMIN_B5: "mg",
    Nutrient.VITAMIN_B6: "mg",
    Nutrient.VITAMIN_B7: "ug",
    Nutrient.VITAMIN_B9: "ug",
    Nutrient.VITAMIN_B12: "ug",
}

NUTRIENT_DISPLAY_NAMES: dict[Nutrient, str] = {
    Nutrient.KCAL: "Calories",
    Nutrient.MOISTURE: "Moisture",
    Nutrient.PROTEIN: "Protein",
    Nutrient.FAT: "Total Fat",
    Nutrient.SATURATED_FAT: "Saturated Fat",
    Nutrient.TRANS_FAT: "Trans Fat",
    Nutrient.CARBS: "Carbohydrates",
    Nutrient.FIBER: "Fiber",
    Nutrient.SUGAR: "Sugar",
    Nutrient.SODIUM: "Sodium",
    Nutrient.CHOLESTEROL: "Cholesterol",
    Nutrient.CALCIUM: "Calcium",
    Nutrient.IRON: "Iron",
    Nutrient.MAGNESIUM: "Magnesium",
    Nutrient.PHOSPHORUS: "Phosphorus",
    Nutrient.POTASSIUM: "Potassium",
    Nutrient.ZINC: "Zinc",
    Nutrient.COPPER: "Copper",
    Nutrient.MANGANESE: "Manganese",
    Nutrient.SELENIUM: "Selenium",
    Nutrient.MOLYBDENUM: "Molybdenum",
    Nutrient.IODINE: "Iodine",
    Nutrient.VITAMIN_A: "Vitamin A",
    Nutrient.VITAMIN_C: "Vitamin C",
    Nutrient.VITAMIN_D: "Vitamin D",
    Nutrient.VITAMIN_E: "Vitamin E",
    Nutrient.VITAMIN_K: "Vitamin K",
    Nutrient.VITAMIN_B1: "Thiamin (B1)",
    Nutrient.VITAMIN_B2: "Riboflavin (B2)",
    Nutrient.VITAMIN_B3: "Niacin (B3)",
    Nutrient.VITAMIN_B5: "Pantothenic Acid (B5)",
    Nutrient.VITAMIN_B6: "Vitamin B6",
    Nutrient.VITAMIN_B7: "Biotin (B7)",
    Nutrient.VITAMIN_B9: "Folate (B9)",
    Nutrient.VITAMIN_B12: "Vitamin B12",
}

_BY_KEY: dict[str, Nutrient] = {n.value: n for n in Nutrient}


def _normalize_key(key: str) -> str:
    return key.strip().lower().replace(" ", "_").replace("-", "_")


def find_nutrient(key: str) -> Optional[Nutrient]:
    """Look up a nutrient by key, ignoring case.

    Args:
        key: Nutrient key (e.g., 'protein_g', 'Vitamin_C_mg')

    Returns:
        The matching Nutrient, or None if the key is unknown
    """
    return _BY_KEY.get(_normalize_key(key))


def get_nutrient(key: str) -> Nutrient:
    """Look up a nutrient by key.

    Raises:
        KeyError: If nutrient key not found
    """
    nutrient = find_nutrient(key)
    if nutrient is None:
        raise KeyError(
            f"Unknown nutrient: {key}. "
            f"Available nutrients: {', '.join(sorted(_BY_KEY))}"
        )
    return nutrient


def get_extractor(key: str) -> Optional[Callable[[Food], float]]:
    """Return a function reading the given nutrient from a food, or None."""
    nutrient = find_nutrient(key)
    if nutrient is None:
        return None
    index = NUTRIENT_INDEX[nutrient]
    return lambda food: food.nutrients[index]


def get_nutrient_unit(nutrient: Nutrient) -> str:
    return NUTRIENT_UNITS.get(nutrient, "?")


def get_nutrient_display_name(nutrient: Nutrient) -> str:
    return NUTRIENT_DISPLAY_NAMES.get(nutrient, nutrient.value)


class PriorityTier(Enum):
    """How strongly a nutrient's deviation from target is penalized."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    DEFAULT = "default"


PRIMARY_NUTRIENTS = frozenset({
    Nutrient.KCAL,
    Nutrient.PROTEIN,
    Nutrient.CARBS,
    Nutrient.FIBER,
    Nutrient.CALCIUM,
    Nutrient.IRON,
    Nutrient.MAGNESIUM,
    Nutrient.PHOSPHORUS,
    Nutrient.POTASSIUM,
    Nutrient.VITAMIN_C,
})

SECONDARY_NUTRIENTS = frozenset({
    Nutrient.FAT,
    Nutrient.ZINC,
    Nutrient.COPPER,
    Nutrient.VITAMIN_A,
    Nutrient.VITAMIN_E,
    Nutrient.VITAMIN_K,
    Nutrient.VITAMIN_B12,
    Nutrient.VITAMIN_B1,
    Nutrient.VITAMIN_B2,
    Nutrient.VITAMIN_B3,
    Nutrient.VITAMIN_B5,
    Nutrient.VITAMIN_B6,
    Nutrient.VITAMIN_B7,
    Nutrient.VITAMIN_B9,
})

TERTIARY_NUTRIENTS = frozenset({
    Nutrient.MANGANESE,
    Nutrient.SELENIUM,
    Nutrient.MOLYBDENUM,
    Nutrient.IODINE,
})


def _default_tiers() -> Mapping[Nutrient, PriorityTier]:
    tiers: dict[Nutrient, PriorityTier] = {}
    for nutrient in Nutrient:
        if nutrient in PRIMARY_NUTRIENTS:
            tiers[nutrient] = PriorityTier.PRIMARY
        elif nutrient in SECONDARY_NUTRIENTS:
            tiers[nutrient] = PriorityTier.SECONDARY
        elif nutrient in TERTIARY_NUTRIENTS:
            tiers[nutrient] = PriorityTier.TERTIARY
    return MappingProxyType(tiers)


def _default_tier_weights() -> Mapping[PriorityTier, float]:
    return MappingProxyType({
        PriorityTier.PRIMARY: 100.0,
        PriorityTier.SECONDARY: 10.0,
        PriorityTier.TERTIARY: 5.0,
        PriorityTier.DEFAULT: 1.0,
    })


@dataclass(frozen=True)
class PriorityWeights:
    """Tier classification and per-tier weights.

    Deviation penalties and the aggregate nutrition score both scale by these
    weights. Nutrients missing from ``tiers`` fall into the DEFAULT tier.
    """

    tiers: Mapping[Nutrient, PriorityTier] = field(default_factory=_default_tiers)
    weights: Mapping[PriorityTier, float] = field(default_factory=_default_tier_weights)

    def tier(self, nutrient: Nutrient) -> PriorityTier:
        return self.tiers.get(nutrient, PriorityTier.DEFAULT)

    def weight(self, nutrient: Nutrient) -> float:
        return self.weights[self.tier(nutrient)]


DEFAULT_PRIORITIES = PriorityWeights()
