"""Tests for result formatters."""

from __future__ import annotations

import io
import json

import pytest
from rich.console import Console

from nutriopt.export.formatters import JSONFormatter, MarkdownFormatter, format_result
from nutriopt.optimizer.models import NutrientTarget, OptimizationResult
from nutriopt.optimizer.scoring import build_picks, build_summary


@pytest.fixture
def result(calorie_foods) -> OptimizationResult:
    picks = build_picks(calorie_foods, [1, 2], [1.0, 1.0])
    targets = [
        NutrientTarget("kcal", min_value=180, max_value=220, recommended=200),
        NutrientTarget("unobtainium_mg", recommended=3),
    ]
    summary, score = build_summary(picks, targets, unknown_keys=["unobtainium_mg"])
    return OptimizationResult(
        picks=picks,
        total_cost=16.0,
        nutrient_summary=summary,
        feasible=True,
        infeasible_reason=None,
        nutrition_score=score,
        warnings=["Unknown nutrient targets: unobtainium_mg"],
        solver_info={"status": "optimal", "elapsed_seconds": 0.01, "solver": "highs_milp"},
    )


class TestJSONFormatter:
    """Tests for JSON output."""

    def test_picks_and_totals(self, result):
        data = json.loads(JSONFormatter().format(result, "demo"))

        assert data["profile"] == "demo"
        assert data["feasible"] is True
        assert [p["food_id"] for p in data["solution"]["picks"]] == ["A", "B"]
        assert data["solution"]["picks"][1]["grams"] == 200.0
        assert data["solution"]["total_cost"] == 16.0
        assert data["solution"]["nutrition_score"] == 100.0

    def test_nan_written_as_null(self, result):
        text = JSONFormatter().format(result)
        assert "NaN" not in text
        data = json.loads(text)
        assert data["solution"]["nutrients"]["unobtainium_mg"]["actual"] is None
        assert data["solution"]["nutrients"]["kcal"]["actual"] == 200.0


class TestMarkdownFormatter:
    """Tests for Markdown output."""

    def test_tables(self, result):
        text = MarkdownFormatter().format(result, "demo")

        assert "**Profile:** demo" in text
        assert "**Total Cost:** $16.00" in text
        assert "| Food B | 2 x 100g | 200g | $6.00 |" in text
        assert "| Calories | 200.0 kcal | 180-220 | 100% |" in text
        assert "| unobtainium_mg | unknown | 3 | - |" in text

    def test_infeasible(self):
        text = MarkdownFormatter().format(OptimizationResult.infeasible("Solver status: infeasible"))
        assert "infeasible (Solver status: infeasible)" in text


class TestFormatResult:
    """Tests for format dispatch."""

    def test_table_prints(self, result):
        buffer = io.StringIO()
        console = Console(file=buffer, width=120)

        assert format_result(result, "table", console=console) is None

        output = buffer.getvalue()
        assert "Selected Foods" in output
        assert "Food A" in output
        assert "Nutrition score" in output

    def test_unknown_format(self, result):
        with pytest.raises(ValueError, match="Unknown output format"):
            format_result(result, "xml")
