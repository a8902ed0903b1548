"""Optimization engine for food selection."""

from nutriopt.optimizer.models import (
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
)
from nutriopt.optimizer.solver import optimize, solve_diet_problem

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
