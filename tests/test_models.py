"""Tests for optimizer data models."""

from __future__ import annotations

import pytest

from nutriopt.optimizer.models import (
    CategoryConstraint,
    Food,
    InvalidRequestError,
    NutriOptError,
    NutrientTarget,
    ObjectiveMode,
    OptimizationRequest,
    OptimizationResult,
    nutrient_vector,
)


class TestObjectiveMode:
    """Tests for parsing objective names."""

    @pytest.mark.parametrize(
        "name",
        ["balanced_nutrition", "BALANCED_NUTRITION", "BalancedNutrition", "balanced-nutrition"],
    )
    def test_parse_spellings(self, name):
        assert ObjectiveMode.parse(name) is ObjectiveMode.BALANCED_NUTRITION

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown objective"):
            ObjectiveMode.parse("maximize_joy")

    def test_deviation_modes(self):
        assert ObjectiveMode.BALANCED_NUTRITION.uses_deviation
        assert ObjectiveMode.CUSTOM_WEIGHTED.uses_deviation
        assert not ObjectiveMode.MINIMIZE_COST.uses_deviation
        assert not ObjectiveMode.COST_WITH_NUTRITION.uses_deviation


class TestFood:
    """Tests for the Food model."""

    def test_create_fills_missing_nutrients(self):
        food = Food.create(id="x", name="X", nutrients={"kcal": 50})
        assert len(food.nutrients) == 35
        assert food.nutrients[0] == 50.0
        assert sum(food.nutrients) == 50.0

    def test_wrong_vector_length(self):
        with pytest.raises(ValueError, match="expected 35"):
            Food(id="x", name="X", category="", price_per_100g=1.0,
                 packaging="100g", nutrients=(1.0, 2.0))

    def test_unknown_nutrient_key(self):
        with pytest.raises(KeyError):
            nutrient_vector({"unobtainium_mg": 1})

    def test_package_price(self):
        food = Food.create(id="m", name="Milk", price_per_100g=0.123, packaging="1L")
        assert food.package_multiplier == 10.0
        assert food.package_price == 1.23


class TestNutrientTarget:
    """Tests for the reference value."""

    def test_recommended_wins(self):
        target = NutrientTarget("kcal", min_value=1800, max_value=2200, recommended=2100)
        assert target.reference_value() == 2100

    def test_midpoint_of_bounds(self):
        target = NutrientTarget("kcal", min_value=1800, max_value=2200)
        assert target.reference_value() == 2000

    def test_single_bound(self):
        assert NutrientTarget("kcal", min_value=1800).reference_value() == 1800
        assert NutrientTarget("sodium_mg", max_value=2300).reference_value() == 2300

    def test_sufficient_only(self):
        assert NutrientTarget("kcal", sufficient=2500).reference_value() is None


class TestRequest:
    """Tests for request helpers and validation."""

    def test_negative_category_counts(self):
        with pytest.raises(ValueError):
            CategoryConstraint("veg", min_count=-1)
        with pytest.raises(ValueError):
            CategoryConstraint("veg", max_count_per_food=-2)

    def test_eligible_foods_drops_exclusions(self, pantry):
        request = OptimizationRequest(foods=pantry, exclude_food_ids=["milk", "rice"])
        assert [f.id for f in request.eligible_foods()] == ["chicken", "broccoli", "spinach"]

    def test_infeasible_result(self):
        result = OptimizationResult.infeasible("nope", warnings=["w"])
        assert not result.feasible
        assert result.picks == []
        assert result.total_cost == 0.0
        assert result.infeasible_reason == "nope"
        assert result.warnings == ["w"]

    def test_error_hierarchy(self):
        assert issubclass(InvalidRequestError, NutriOptError)
        assert issubclass(InvalidRequestError, ValueError)
