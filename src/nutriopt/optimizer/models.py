"""Data models for optimization requests and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from nutriopt.data.nutrients import NUTRIENT_COUNT, NUTRIENT_INDEX, get_nutrient
from nutriopt.data.packaging import packaging_multiplier


class ObjectiveMode(Enum):
    """Optimization objective modes."""

    MINIMIZE_COST = "minimize_cost"  # cost only, targets as hard bounds
    BALANCED_NUTRITION = "balanced_nutrition"  # soft targets, relaxed bounds
    COST_WITH_NUTRITION = "cost_with_nutrition"  # cost first, targets as bounds
    CUSTOM_WEIGHTED = "custom_weighted"  # soft targets, exact bounds

    @property
    def uses_deviation(self) -> bool:
        return self in (ObjectiveMode.BALANCED_NUTRITION, ObjectiveMode.CUSTOM_WEIGHTED)

    @classmethod
    def parse(cls, value: str) -> "ObjectiveMode":
        """Parse a mode name such as 'balanced_nutrition' or 'BalancedNutrition'."""
        normalized = value.strip().replace("-", "_")
        if "_" in normalized or normalized.isupper():
            snake = normalized.lower()
        else:
            # CamelCase -> snake_case
            snake = "".join(
                f"_{c.lower()}" if c.isupper() and i > 0 else c.lower()
                for i, c in enumerate(normalized)
            )
        for mode in cls:
            if mode.value == snake:
                return mode
        raise ValueError(
            f"Unknown objective: {value}. "
            f"Available objectives: {', '.join(m.value for m in cls)}"
        )


def nutrient_vector(values: Optional[Mapping[str, float]] = None) -> tuple[float, ...]:
    """Build a full nutrient vector from a mapping of nutrient keys.

    Missing nutrients are 0.

    Raises:
        KeyError: If a key is not a known nutrient
    """
    vector = [0.0] * NUTRIENT_COUNT
    for key, value in (values or {}).items():
        vector[NUTRIENT_INDEX[get_nutrient(key)]] = float(value)
    return tuple(vector)


@dataclass(frozen=True)
class Food:
    """A purchasable food with nutrient values per 100g (or 100ml)."""

    id: str
    name: str
    category: str
    price_per_100g: float
    packaging: str
    nutrients: tuple[float, ...]
    cooking_method: str = "none"
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.nutrients) != NUTRIENT_COUNT:
            raise ValueError(
                f"Food {self.id} has {len(self.nutrients)} nutrient values, "
                f"expected {NUTRIENT_COUNT}"
            )

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        category: str = "",
        price_per_100g: float = 0.0,
        packaging: str = "100g",
        nutrients: Optional[Mapping[str, float]] = None,
        cooking_method: str = "none",
        notes: Optional[str] = None,
    ) -> "Food":
        """Create a food from a mapping of nutrient keys to per-100g values."""
        return cls(
            id=id,
            name=name,
            category=category,
            price_per_100g=float(price_per_100g),
            packaging=packaging,
            nutrients=nutrient_vector(nutrients),
            cooking_method=cooking_method,
            notes=notes,
        )

    @property
    def package_multiplier(self) -> float:
        """Number of 100g units in one package."""
        return packaging_multiplier(self.packaging)

    @property
    def package_price(self) -> float:
        """Price of one whole package."""
        return round(self.price_per_100g * self.package_multiplier, 2)


@dataclass
class NutrientTarget:
    """A target for a single nutrient.

    At least one of min_value, max_value, recommended or sufficient is
    expected. Only recommended, min_value and max_value feed the reference value.
    """

    nutrient_key: str
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    recommended: Optional[float] = None
    sufficient: Optional[float] = None
    unit: str = ""

    def reference_value(self) -> Optional[float]:
        """Single number the optimizer aims for.

        Recommended if set, else the midpoint of min/max, else whichever of
        min/max is set.
        """
        if self.recommended is not None:
            return self.recommended
        if self.min_value is not None and self.max_value is not None:
            return (self.min_value + self.max_value) / 2.0
        if self.min_value is not None:
            return self.min_value
        if self.max_value is not None:
            return self.max_value
        return None


@dataclass(frozen=True)
class CategoryConstraint:
    """Selection rules for all foods sharing a category.

    Foods in the category must be picked at least min_count times in total,
    and no single food more than max_count_per_food times.
    """

    category: str
    min_count: int = 0
    max_count_per_food: int = 3

    def __post_init__(self) -> None:
        if self.min_count < 0:
            raise ValueError("min_count must be non-negative")
        if self.max_count_per_food < 0:
            raise ValueError("max_count_per_food must be non-negative")


@dataclass
class OptimizationRequest:
    """Input specification for the optimizer."""

    foods: list[Food] = field(default_factory=list)
    targets: list[NutrientTarget] = field(default_factory=list)
    category_constraints: list[CategoryConstraint] = field(default_factory=list)
    objective: ObjectiveMode = ObjectiveMode.BALANCED_NUTRITION
    step_size: float = 50.0  # accepted but does not change variable granularity
    cost_weight: float = 1.0
    nutrition_weight: float = 10.0
    default_max_per_food: int = 3
    time_limit_seconds: float = 30.0
    exclude_food_ids: list[str] = field(default_factory=list)

    def eligible_foods(self) -> list[Food]:
        """Foods left after removing excluded IDs."""
        if not self.exclude_food_ids:
            return list(self.foods)
        excluded = set(self.exclude_food_ids)
        return [f for f in self.foods if f.id not in excluded]


@dataclass
class Pick:
    """A food chosen by the optimizer."""

    food: Food
    count: int  # packages
    amount: float  # in 100g units
    cost: float


@dataclass
class NutrientSummary:
    """Achievement of a single nutrient in the result."""

    actual: float
    target: Optional[float]
    min_value: Optional[float]
    max_value: Optional[float]
    achievement_rate: float
    unit: str = ""


@dataclass
class OptimizationResult:
    """Complete output from the optimizer."""

    picks: list[Pick]
    total_cost: float
    nutrient_summary: dict[str, NutrientSummary]
    feasible: bool
    infeasible_reason: Optional[str]
    nutrition_score: float  # 0-100
    warnings: list[str] = field(default_factory=list)
    solver_info: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def infeasible(
        cls,
        reason: str,
        warnings: Optional[list[str]] = None,
        solver_info: Optional[dict[str, Any]] = None,
    ) -> "OptimizationResult":
        """Empty result for a problem with no usable solution."""
        return cls(
            picks=[],
            total_cost=0.0,
            nutrient_summary={},
            feasible=False,
            infeasible_reason=reason,
            nutrition_score=0.0,
            warnings=warnings or [],
            solver_info=solver_info or {},
        )


# Custom exceptions


class NutriOptError(Exception):
    """Base exception for nutriopt errors."""

    pass


class InvalidRequestError(NutriOptError, ValueError):
    """Raised when optimizer arguments are out of range."""

    pass


class SolverUnavailableError(NutriOptError):
    """Raised when the MIP solver backend cannot be loaded."""

    pass
