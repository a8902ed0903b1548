"""Mixed-integer food selection against nutrient targets."""

from nutriopt.optimizer import (
    CategoryConstraint,
    Food,
    InvalidRequestError,
    NutrientSummary,
    NutrientTarget,
    NutriOptError,
    ObjectiveMode,
    OptimizationRequest,
    OptimizationResult,
    Pick,
    SolverUnavailableError,
    optimize,
    solve_diet_problem,
)

__version__ = "0.1.0"

__all__ = [
    "ObjectiveMode",
    "Food",
    "NutrientTarget",
    "CategoryConstraint",
    "OptimizationRequest",
    "Pick",
    "NutrientSummary",
    "OptimizationResult",
    "NutriOptError",
    "InvalidRequestError",
    "SolverUnavailableError",
    "optimize",
    "solve_diet_problem",
]
