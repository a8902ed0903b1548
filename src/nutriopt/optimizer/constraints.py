"""Build the mixed-integer program for the optimizer."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import numpy as np
import yaml

from nutriopt.data.nutrients import (
    DEFAULT_PRIORITIES,
    NUTRIENT_COUNT,
    NUTRIENT_INDEX,
    Nutrient,
    PriorityWeights,
    find_nutrient,
)
from nutriopt.optimizer.models import (
    CategoryConstraint,
    Food,
    NutrientTarget,
    ObjectiveMode,
    OptimizationRequest,
)
from nutriopt.optimizer.serialization import deserialize_request

if TYPE_CHECKING:
    from nutriopt.config.settings import OptimizationConfig

# Keeps the deviation weight finite for zero targets
DEVIATION_EPSILON = 1e-6

# Bound relaxation used in BALANCED_NUTRITION mode
RELAXED_MIN_FACTOR = 0.9
RELAXED_MAX_FACTOR = 1.1


class ConstraintBuilder:
    """Builds the objective, bounds and constraint rows for scipy.optimize.milp.

    Variable layout: one integer package count per food, followed by a
    (dev_pos, dev_neg) pair for every target with a deviation term.
    """

    def __init__(
        self,
        foods: list[Food],
        targets: list[NutrientTarget],
        objective: ObjectiveMode = ObjectiveMode.BALANCED_NUTRITION,
        cost_weight: float = 1.0,
        nutrition_weight: float = 10.0,
        default_max_per_food: int = 3,
        category_constraints: Optional[list[CategoryConstraint]] = None,
        priorities: PriorityWeights = DEFAULT_PRIORITIES,
    ):
        """Initialize the constraint builder.

        Args:
            foods: Candidate foods
            targets: Nutrient targets
            objective: Objective mode
            cost_weight: Scale of the cost term
            nutrition_weight: Scale of the deviation term
            default_max_per_food: Package cap for foods without a category rule
            category_constraints: Per-category minimum counts and caps
            priorities: Tier weights for the deviation penalties
        """
        self.foods = foods
        self.targets = targets
        self.objective = objective
        self.cost_weight = cost_weight
        self.nutrition_weight = nutrition_weight
        self.default_max_per_food = default_max_per_food
        self.category_constraints = category_constraints or []
        self.priorities = priorities
        self._known: list[tuple[NutrientTarget, Nutrient]] = []
        self._unknown_keys: list[str] = []

    def build(self) -> dict[str, Any]:
        """Build all matrices and vectors needed for optimization.

        Returns:
            Dict with:
                - food_ids: list[str] - ordered list of food IDs
                - multipliers: np.ndarray - 100g units per package
                - costs: np.ndarray - price per package
                - nutrient_matrix: np.ndarray - shape (n_foods, 35), per 100g
                - coefficients: np.ndarray - shape (n_foods, 35), per package
                - c: np.ndarray - objective coefficients for all variables
                - integrality: np.ndarray - 1 for counts, 0 for deviations
                - lower, upper: np.ndarray - variable bounds
                - A, row_lb, row_ub: constraint rows row_lb <= A @ x <= row_ub
                - row_names: list[str] - one name per row
                - deviation_keys: list[str] - nutrient key per deviation pair
                - unknown_keys: list[str] - target keys missing from the registry
        """
        self._classify_targets()

        multipliers = self._build_multipliers()
        nutrient_matrix = self._build_nutrient_matrix()
        coefficients = nutrient_matrix * multipliers[:, np.newaxis]
        costs = self._build_cost_vector(multipliers)

        deviations = self._build_deviation_terms()
        n_foods = len(self.foods)
        n_vars = n_foods + 2 * len(deviations)

        c = np.zeros(n_vars)
        c[:n_foods] = costs * self.cost_weight

        integrality = np.zeros(n_vars)
        integrality[:n_foods] = 1

        lower = np.zeros(n_vars)
        upper = np.full(n_vars, np.inf)
        upper[:n_foods] = self._build_food_bounds()

        rows: list[np.ndarray] = []
        row_lb: list[float] = []
        row_ub: list[float] = []
        row_names: list[str] = []

        # Deviation rows: actual - dev_pos + dev_neg = reference
        for k, (nutrient, reference, weight) in enumerate(deviations):
            pos = n_foods + 2 * k
            neg = pos + 1
            c[pos] = weight
            c[neg] = weight

            row = np.zeros(n_vars)
            row[:n_foods] = coefficients[:, NUTRIENT_INDEX[nutrient]]
            row[pos] = -1.0
            row[neg] = 1.0
            rows.append(row)
            row_lb.append(reference)
            row_ub.append(reference)
            row_names.append(f"deviation_{nutrient.key}")

        # Min/max bounds
        relax = self.objective == ObjectiveMode.BALANCED_NUTRITION
        for target, nutrient in self._known:
            col = coefficients[:, NUTRIENT_INDEX[nutrient]]

            if target.min_value is not None:
                bound = target.min_value * RELAXED_MIN_FACTOR if relax else target.min_value
                row = np.zeros(n_vars)
                row[:n_foods] = col
                rows.append(row)
                row_lb.append(bound)
                row_ub.append(np.inf)
                row_names.append(f"min_{nutrient.key}")

            if target.max_value is not None:
                bound = target.max_value * RELAXED_MAX_FACTOR if relax else target.max_value
                row = np.zeros(n_vars)
                row[:n_foods] = col
                rows.append(row)
                row_lb.append(-np.inf)
                row_ub.append(bound)
                row_names.append(f"max_{nutrient.key}")

        # Category minimum counts (no category-wide maximum)
        for cc in self.category_constraints:
            members = self._category_members(cc.category)
            if not members:
                continue
            row = np.zeros(n_vars)
            row[members] = 1.0
            rows.append(row)
            row_lb.append(float(cc.min_count))
            row_ub.append(np.inf)
            row_names.append(f"category_min_{cc.category}")

        A = np.array(rows) if rows else np.zeros((0, n_vars))

        return {
            "food_ids": [f.id for f in self.foods],
            "multipliers": multipliers,
            "costs": costs,
            "nutrient_matrix": nutrient_matrix,
            "coefficients": coefficients,
            "c": c,
            "integrality": integrality,
            "lower": lower,
            "upper": upper,
            "A": A,
            "row_lb": np.array(row_lb),
            "row_ub": np.array(row_ub),
            "row_names": row_names,
            "deviation_keys": [n.key for n, _, _ in deviations],
            "unknown_keys": list(self._unknown_keys),
        }

    def _classify_targets(self) -> None:
        """Split targets into registry nutrients and unknown keys."""
        self._known = []
        self._unknown_keys = []
        seen_unknown: set[str] = set()

        for target in self.targets:
            nutrient = find_nutrient(target.nutrient_key)
            if nutrient is not None:
                self._known.append((target, nutrient))
            elif target.nutrient_key.lower() not in seen_unknown:
                seen_unknown.add(target.nutrient_key.lower())
                self._unknown_keys.append(target.nutrient_key)

    def _build_multipliers(self) -> np.ndarray:
        """Build the package-to-100g multiplier for each food."""
        return np.array([f.package_multiplier for f in self.foods], dtype=float)

    def _build_nutrient_matrix(self) -> np.ndarray:
        """Build matrix where [i, j] = nutrient j per 100g of food i."""
        if not self.foods:
            return np.zeros((0, NUTRIENT_COUNT))
        return np.array([f.nutrients for f in self.foods], dtype=float)

    def _build_cost_vector(self, multipliers: np.ndarray) -> np.ndarray:
        """Build price per package vector."""
        prices = np.array([f.price_per_100g for f in self.foods], dtype=float)
        return prices * multipliers

    def _build_food_bounds(self) -> np.ndarray:
        """Build the maximum package count for each food.

        A matching category constraint's max_count_per_food overrides the
        default. Categories match case-insensitively; blank categories never
        match.
        """
        category_max = {
            cc.category.lower(): cc.max_count_per_food
            for cc in self.category_constraints
        }

        bounds = []
        for food in self.foods:
            max_count = self.default_max_per_food
            if food.category and food.category.lower() in category_max:
                max_count = category_max[food.category.lower()]
            bounds.append(float(max_count))

        return np.array(bounds)

    def _build_deviation_terms(self) -> list[tuple[Nutrient, float, float]]:
        """Build (nutrient, reference, penalty weight) for each soft target."""
        if not self.objective.uses_deviation:
            return []

        terms = []
        for target, nutrient in self._known:
            reference = target.reference_value()
            if reference is None:
                continue
            weight = (
                self.nutrition_weight * self.priorities.weight(nutrient)
            ) / (reference + DEVIATION_EPSILON)
            terms.append((nutrient, reference, weight))

        return terms

    def _category_members(self, category: str) -> list[int]:
        """Indices of foods in a category."""
        wanted = category.lower()
        return [
            i for i, f in enumerate(self.foods)
            if f.category and f.category.lower() == wanted
        ]


def load_profile_from_yaml(
    yaml_path: Path,
    defaults: Optional[OptimizationConfig] = None,
) -> OptimizationRequest:
    """Parse a YAML problem profile into an OptimizationRequest.

    Args:
        yaml_path: Path to the YAML profile file
        defaults: Option values used where the profile is silent

    Returns:
        OptimizationRequest configured from the YAML

    Raises:
        FileNotFoundError: If file doesn't exist
        KeyError: If a food lists an unknown nutrient
    """
    with open(yaml_path) as f:
        data = yaml.safe_load(f) or {}

    return deserialize_request(data, defaults)
