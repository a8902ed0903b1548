"""Serialization utilities for OptimizationRequest round-trip.

The dict format is the same as the YAML problem profile read by
load_profile_from_yaml(), so a request can be written to JSON/YAML and read
back into an equivalent OptimizationRequest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from nutriopt.data.cooking import NO_COOKING, apply_cooking_retention
from nutriopt.data.nutrients import NUTRIENT_INDEX, Nutrient
from nutriopt.optimizer.models import (
    CategoryConstraint,
    Food,
    NutrientTarget,
    ObjectiveMode,
    OptimizationRequest,
)

if TYPE_CHECKING:
    from nutriopt.config.settings import OptimizationConfig


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def serialize_food(food: Food) -> dict[str, Any]:
    """Convert a Food to a dict, listing only non-zero nutrients."""
    data: dict[str, Any] = {
        "id": food.id,
        "name": food.name,
        "category": food.category,
        "price_per_100g": food.price_per_100g,
        "packaging": food.packaging,
        "nutrients": {
            n.key: food.nutrients[NUTRIENT_INDEX[n]]
            for n in Nutrient
            if food.nutrients[NUTRIENT_INDEX[n]] != 0
        },
    }
    if food.cooking_method and food.cooking_method != NO_COOKING:
        data["cooking_method"] = food.cooking_method
        # Stored values already include cooking losses
        data["retention_applied"] = True
    if food.notes:
        data["notes"] = food.notes
    return data


def deserialize_food(data: dict[str, Any]) -> Food:
    """Convert a dict into a Food, applying cooking losses if needed.

    Raises:
        KeyError: If a nutrient key is unknown or 'id' is missing
    """
    food = Food.create(
        id=str(data["id"]),
        name=str(data.get("name", data["id"])),
        category=str(data.get("category") or ""),
        price_per_100g=float(data.get("price_per_100g", 0.0)),
        packaging=str(data.get("packaging") or "100g"),
        nutrients=data.get("nutrients") or {},
        cooking_method=str(data.get("cooking_method") or NO_COOKING),
        notes=data.get("notes"),
    )
    if not data.get("retention_applied", False):
        food = apply_cooking_retention(food)
    return food


def serialize_request(request: OptimizationRequest) -> dict[str, Any]:
    """Convert OptimizationRequest to a JSON-serializable dict.

    Args:
        request: The optimization request to serialize

    Returns:
        Dictionary that can be JSON-serialized and later deserialized
    """
    data: dict[str, Any] = {}

    data["foods"] = [serialize_food(f) for f in request.foods]

    if request.targets:
        targets: dict[str, dict[str, Any]] = {}
        for t in request.targets:
            entry: dict[str, Any] = {}
            if t.min_value is not None:
                entry["min"] = t.min_value
            if t.max_value is not None:
                entry["max"] = t.max_value
            if t.recommended is not None:
                entry["recommended"] = t.recommended
            if t.sufficient is not None:
                entry["sufficient"] = t.sufficient
            if t.unit:
                entry["unit"] = t.unit
            targets[t.nutrient_key] = entry
        data["targets"] = targets

    if request.category_constraints:
        data["categories"] = [
            {
                "category": cc.category,
                "min_count": cc.min_count,
                "max_count_per_food": cc.max_count_per_food,
            }
            for cc in request.category_constraints
        ]

    if request.exclude_food_ids:
        data["exclude_foods"] = list(request.exclude_food_ids)

    data["options"] = {
        "objective": request.objective.value,
        "step_size": request.step_size,
        "cost_weight": request.cost_weight,
        "nutrition_weight": request.nutrition_weight,
        "default_max_per_food": request.default_max_per_food,
        "time_limit_seconds": request.time_limit_seconds,
    }

    return data


def deserialize_request(
    data: dict[str, Any],
    defaults: Optional[OptimizationConfig] = None,
) -> OptimizationRequest:
    """Convert a JSON/dict back into an OptimizationRequest.

    Args:
        data: Dictionary containing the serialized request
        defaults: Option values used where data has none

    Returns:
        OptimizationRequest reconstructed from the data

    Raises:
        KeyError: If a food lists an unknown nutrient
        ValueError: If the objective name is unknown or a target is malformed
    """
    request = OptimizationRequest()

    if defaults is not None:
        request.objective = ObjectiveMode.parse(defaults.objective)
        request.step_size = defaults.step_size
        request.cost_weight = defaults.cost_weight
        request.nutrition_weight = defaults.nutrition_weight
        request.default_max_per_food = defaults.default_max_per_food
        request.time_limit_seconds = defaults.time_limit_seconds

    # Parse options
    options = data.get("options") or {}
    if "objective" in options:
        request.objective = ObjectiveMode.parse(str(options["objective"]))
    if "step_size" in options:
        request.step_size = float(options["step_size"])
    if "cost_weight" in options:
        request.cost_weight = float(options["cost_weight"])
    if "nutrition_weight" in options:
        request.nutrition_weight = float(options["nutrition_weight"])
    if "default_max_per_food" in options:
        request.default_max_per_food = int(options["default_max_per_food"])
    if "time_limit_seconds" in options:
        request.time_limit_seconds = float(options["time_limit_seconds"])

    # Parse foods
    request.foods = [deserialize_food(f) for f in data.get("foods") or []]

    # Parse targets (unknown keys are kept; the optimizer reports them)
    for key, bounds in (data.get("targets") or {}).items():
        if bounds is None:
            bounds = {}
        elif isinstance(bounds, (int, float)) and not isinstance(bounds, bool):
            # Shorthand: "kcal: 2000" is a recommended amount
            bounds = {"recommended": bounds}
        elif not isinstance(bounds, dict):
            raise ValueError(
                f"Target {key} must be a number or a mapping of min/max/recommended, "
                f"got {type(bounds).__name__}"
            )
        request.targets.append(
            NutrientTarget(
                nutrient_key=str(key),
                min_value=_optional_float(bounds.get("min")),
                max_value=_optional_float(bounds.get("max")),
                recommended=_optional_float(bounds.get("recommended")),
                sufficient=_optional_float(bounds.get("sufficient")),
                unit=str(bounds.get("unit") or ""),
            )
        )

    # Parse category constraints
    for entry in data.get("categories") or []:
        request.category_constraints.append(
            CategoryConstraint(
                category=str(entry["category"]),
                min_count=int(entry.get("min_count", 0)),
                max_count_per_food=int(
                    entry.get("max_count_per_food", request.default_max_per_food)
                ),
            )
        )

    request.exclude_food_ids = [str(fid) for fid in data.get("exclude_foods") or []]

    return request
