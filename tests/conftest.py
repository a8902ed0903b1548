"""Pytest fixtures for nutriopt tests."""

from __future__ import annotations

import logging

import pytest

from nutriopt.optimizer.models import Food, NutrientTarget


@pytest.fixture(autouse=True)
def reset_nutriopt_logger():
    """Drop handlers installed by configure_logging() between tests."""
    logger = logging.getLogger("nutriopt")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def calorie_foods() -> list[Food]:
    """Two 100g foods: A is calorie-dense and pricey, B is cheap."""
    return [
        Food.create(
            id="A", name="Food A", category="main",
            price_per_100g=10.0, packaging="100g",
            nutrients={"kcal": 100},
        ),
        Food.create(
            id="B", name="Food B", category="main",
            price_per_100g=3.0, packaging="100g",
            nutrients={"kcal": 50},
        ),
    ]


@pytest.fixture
def calorie_target() -> NutrientTarget:
    """Exactly 200 kcal."""
    return NutrientTarget("kcal", min_value=200, max_value=200, recommended=200)


@pytest.fixture
def pantry() -> list[Food]:
    """A small mixed pantry with realistic package sizes."""
    return [
        Food.create(
            id="chicken", name="Chicken breast", category="protein",
            price_per_100g=1.2, packaging="500g",
            nutrients={"kcal": 165, "protein_g": 31, "fat_g": 3.6, "sodium_mg": 74},
        ),
        Food.create(
            id="rice", name="Brown rice", category="grain",
            price_per_100g=0.3, packaging="1kg",
            nutrients={"kcal": 370, "protein_g": 7.9, "carbs_g": 77, "fiber_g": 3.5},
        ),
        Food.create(
            id="broccoli", name="Broccoli", category="vegetable",
            price_per_100g=0.5, packaging="300g",
            nutrients={"kcal": 34, "protein_g": 2.8, "carbs_g": 7, "fiber_g": 2.6,
                       "vitamin_c_mg": 89},
        ),
        Food.create(
            id="spinach", name="Spinach", category="vegetable",
            price_per_100g=0.8, packaging="200g",
            nutrients={"kcal": 23, "protein_g": 2.9, "carbs_g": 3.6, "fiber_g": 2.2,
                       "iron_mg": 2.7, "vitamin_c_mg": 28},
        ),
        Food.create(
            id="milk", name="Milk", category="dairy",
            price_per_100g=0.1, packaging="1L",
            nutrients={"kcal": 61, "protein_g": 3.2, "fat_g": 3.3, "carbs_g": 4.8,
                       "calcium_mg": 113},
        ),
    ]
