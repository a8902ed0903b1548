"""Core MIP solver implementation."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import numpy as np

from nutriopt.data.nutrients import DEFAULT_PRIORITIES, PriorityWeights
from nutriopt.optimizer.constraints import ConstraintBuilder
from nutriopt.optimizer.models import (
    CategoryConstraint,
    Food,
    InvalidRequestError,
    NutrientTarget,
    ObjectiveMode,
    OptimizationRequest,
    OptimizationResult,
    SolverUnavailableError,
)
from nutriopt.optimizer.scoring import build_picks, build_summary

logger = logging.getLogger(__name__)

SOLVER_TIME_LIMIT_SECONDS = 30.0

# scipy.optimize.milp status codes
_MILP_STATUS = {
    0: "optimal",
    1: "time_limit",
    2: "infeasible",
    3: "unbounded",
    4: "error",
}


def _load_milp():
    """Import the HiGHS-backed MILP solver from SciPy."""
    try:
        from scipy.optimize import Bounds, LinearConstraint, milp
    except ImportError as exc:
        raise SolverUnavailableError(
            "MIP solver not available: scipy.optimize.milp requires SciPy >= 1.9"
        ) from exc
    return milp, LinearConstraint, Bounds


def solve_mip(
    c: np.ndarray,
    integrality: np.ndarray,
    lower: np.ndarray,
    upper: np.ndarray,
    A: np.ndarray,
    row_lb: np.ndarray,
    row_ub: np.ndarray,
    time_limit: float = SOLVER_TIME_LIMIT_SECONDS,
) -> dict[str, Any]:
    """Solve a mixed-integer program using scipy.optimize.milp with HiGHS.

    Objective: min c'x
    Subject to:
        row_lb <= Ax <= row_ub
        lower <= x <= upper
        x[i] integer where integrality[i] == 1

    Args:
        c: Objective coefficients, shape (n_vars,)
        integrality: 1 for integer variables, 0 for continuous
        lower: Variable lower bounds
        upper: Variable upper bounds
        A: Constraint matrix, shape (n_rows, n_vars)
        row_lb: Row lower bounds (-inf for none)
        row_ub: Row upper bounds (inf for none)
        time_limit: Wall-clock limit in seconds

    Returns:
        Dict with status ('optimal', 'feasible', 'infeasible', 'unbounded',
        'time_limit', 'error'), x (None unless a solution was found), fun,
        message and elapsed_seconds

    Raises:
        SolverUnavailableError: If SciPy's milp cannot be imported
    """
    milp, LinearConstraint, Bounds = _load_milp()
    start_time = time.time()

    constraints = LinearConstraint(A, row_lb, row_ub) if A.shape[0] else None

    result = milp(
        c=c,
        integrality=integrality,
        bounds=Bounds(lower, upper),
        constraints=constraints,
        options={"time_limit": time_limit, "disp": False, "presolve": True},
    )

    elapsed = time.time() - start_time

    status = _MILP_STATUS.get(result.status, "error")
    x = result.x
    # Time limit reached with an incumbent solution
    if status == "time_limit" and x is not None:
        status = "feasible"
    if status not in ("optimal", "feasible"):
        x = None

    return {
        "status": status,
        "x": x,
        "fun": float(result.fun) if x is not None and result.fun is not None else None,
        "message": result.message,
        "elapsed_seconds": elapsed,
    }


def optimize(
    foods: list[Food],
    targets: list[NutrientTarget],
    step_size: float = 50.0,
    objective: ObjectiveMode = ObjectiveMode.BALANCED_NUTRITION,
    cost_weight: float = 1.0,
    nutrition_weight: float = 10.0,
    default_max_per_food: int = 3,
    category_constraints: Optional[list[CategoryConstraint]] = None,
    priorities: PriorityWeights = DEFAULT_PRIORITIES,
    time_limit: float = SOLVER_TIME_LIMIT_SECONDS,
) -> OptimizationResult:
    """Choose package counts that balance cost against nutrient targets.

    Args:
        foods: Candidate foods
        targets: Nutrient targets
        step_size: Portion step in grams; must be positive (does not change
            variable granularity)
        objective: Objective mode
        cost_weight: Scale of the cost term
        nutrition_weight: Scale of the deviation term
        default_max_per_food: Package cap for foods without a category rule
        category_constraints: Per-category minimum counts and caps
        priorities: Tier weights for deviation penalties and the score
        time_limit: Solver wall-clock limit in seconds

    Returns:
        OptimizationResult; infeasible problems give feasible=False with the
        solver status as the reason

    Raises:
        InvalidRequestError: If step_size <= 0 or default_max_per_food < 0
        SolverUnavailableError: If the MIP solver cannot be loaded
    """
    if step_size <= 0:
        raise InvalidRequestError("step_size must be positive.")
    if default_max_per_food < 0:
        raise InvalidRequestError("default_max_per_food must be non-negative.")

    if not foods:
        return OptimizationResult.infeasible(
            "No eligible foods found. Add foods or remove exclusions.",
            solver_info={"status": "error"},
        )

    builder = ConstraintBuilder(
        foods,
        targets,
        objective=objective,
        cost_weight=cost_weight,
        nutrition_weight=nutrition_weight,
        default_max_per_food=default_max_per_food,
        category_constraints=category_constraints,
        priorities=priorities,
    )
    data = builder.build()

    warnings: list[str] = []
    unknown_keys = data["unknown_keys"]
    if unknown_keys:
        message = f"Unknown nutrient targets: {', '.join(sorted(unknown_keys, key=str.lower))}"
        logger.warning(message)
        warnings.append(message)

    logger.debug(
        "Built model: %d foods, %d deviation pairs, %d rows",
        len(foods),
        len(data["deviation_keys"]),
        data["A"].shape[0],
    )

    result = solve_mip(
        c=data["c"],
        integrality=data["integrality"],
        lower=data["lower"],
        upper=data["upper"],
        A=data["A"],
        row_lb=data["row_lb"],
        row_ub=data["row_ub"],
        time_limit=time_limit,
    )

    solver_info = {
        "status": result["status"],
        "elapsed_seconds": result["elapsed_seconds"],
        "objective": result["fun"],
        "solver": "highs_milp",
    }

    if result["x"] is None:
        logger.info(
            "Optimization failed: status=%s elapsed=%.3fs",
            result["status"],
            result["elapsed_seconds"],
        )
        return OptimizationResult.infeasible(
            f"Solver status: {result['status']}",
            warnings=warnings,
            solver_info=solver_info,
        )

    counts = np.clip(np.rint(result["x"][: len(foods)]), 0, None).astype(int)
    picks = build_picks(foods, counts, data["multipliers"])
    summary, score = build_summary(picks, targets, unknown_keys, priorities)
    total_cost = float(sum(p.cost for p in picks))

    logger.info(
        "Optimization %s: %d picks, cost=%.2f score=%.1f elapsed=%.3fs",
        result["status"],
        len(picks),
        total_cost,
        score,
        result["elapsed_seconds"],
    )

    return OptimizationResult(
        picks=picks,
        total_cost=total_cost,
        nutrient_summary=summary,
        feasible=True,
        infeasible_reason=None,
        nutrition_score=score,
        warnings=warnings,
        solver_info=solver_info,
    )


def solve_diet_problem(
    request: OptimizationRequest,
    priorities: PriorityWeights = DEFAULT_PRIORITIES,
) -> OptimizationResult:
    """Main entry point for solving a diet optimization request.

    Args:
        request: The optimization request specification
        priorities: Tier weights for deviation penalties and the score

    Returns:
        OptimizationResult with solution or failure info
    """
    return optimize(
        foods=request.eligible_foods(),
        targets=request.targets,
        step_size=request.step_size,
        objective=request.objective,
        cost_weight=request.cost_weight,
        nutrition_weight=request.nutrition_weight,
        default_max_per_food=request.default_max_per_food,
        category_constraints=request.category_constraints,
        priorities=priorities,
        time_limit=request.time_limit_seconds,
    )
