"""Output formatters for optimization results."""

from __future__ import annotations

import json
import math
from datetime import datetime
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nutriopt.data.nutrients import find_nutrient, get_nutrient_display_name
from nutriopt.optimizer.models import NutrientSummary, OptimizationResult


def _display_name(key: str) -> str:
    nutrient = find_nutrient(key)
    return get_nutrient_display_name(nutrient) if nutrient else key


def _targeted(result: OptimizationResult) -> list[tuple[str, NutrientSummary]]:
    """Summary entries that carry a target, in summary order."""
    return [
        (key, s) for key, s in result.nutrient_summary.items()
        if s.target is not None or s.min_value is not None or s.max_value is not None
    ]


def _clean(value: Optional[float], digits: int = 2) -> Optional[float]:
    """Round a float for JSON, mapping NaN to None."""
    if value is None or math.isnan(value):
        return None
    return round(value, digits)


class TableFormatter:
    """Format results as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format(
        self,
        result: OptimizationResult,
        profile_name: Optional[str] = None,
    ) -> None:
        """Print formatted tables to console.

        Args:
            result: Optimization result to format
            profile_name: Optional profile name to display
        """
        status = result.solver_info.get("status", "optimal" if result.feasible else "infeasible")
        status_color = "green" if result.feasible else "red"
        header_lines = [
            f"[bold]OPTIMIZATION RESULT[/bold] - {datetime.now().strftime('%Y-%m-%d %H:%M')}",
        ]
        if profile_name:
            header_lines.append(f"Profile: {profile_name}")
        header_lines.append(f"Status: [{status_color}]{status.upper()}[/{status_color}]")

        self.console.print(Panel("\n".join(header_lines), title="Food Plan"))

        for warning in result.warnings:
            self.console.print(f"[yellow]Warning: {warning}[/yellow]")

        if not result.feasible:
            self.console.print(f"[red]Error: {result.infeasible_reason}[/red]")
            return

        # Picks table
        food_table = Table(title="Selected Foods")
        food_table.add_column("Food", style="cyan", max_width=40)
        food_table.add_column("Packages", justify="right")
        food_table.add_column("Package", justify="right")
        food_table.add_column("Grams", justify="right")
        food_table.add_column("Cost", justify="right", style="green")

        total_grams = 0.0
        for pick in result.picks:
            grams = pick.amount * 100.0
            food_table.add_row(
                pick.food.name[:40],
                str(pick.count),
                f"{pick.food.packaging} (${pick.food.package_price:.2f})",
                f"{grams:.0f}",
                f"${pick.cost:.2f}",
            )
            total_grams += grams

        food_table.add_row(
            "[bold]TOTAL[/bold]",
            "",
            "",
            f"[bold]{total_grams:.0f}[/bold]",
            f"[bold]${result.total_cost:.2f}[/bold]",
            style="bold",
        )

        self.console.print(food_table)

        # Nutrient summary table
        nutrient_table = Table(title="Nutrient Summary")
        nutrient_table.add_column("Nutrient")
        nutrient_table.add_column("Amount", justify="right")
        nutrient_table.add_column("Target", justify="right")
        nutrient_table.add_column("Min", justify="right")
        nutrient_table.add_column("Max", justify="right")
        nutrient_table.add_column("Achieved", justify="right")

        for key, s in _targeted(result):
            if math.isnan(s.actual):
                amount_str = "[yellow]unknown[/yellow]"
                rate_str = "-"
            else:
                amount_str = f"{s.actual:.1f} {s.unit}"
                rate_color = "green" if 80.0 <= s.achievement_rate <= 120.0 else "red"
                rate_str = f"[{rate_color}]{s.achievement_rate:.0f}%[/{rate_color}]"

            nutrient_table.add_row(
                _display_name(key),
                amount_str,
                f"{s.target:.1f}" if s.target is not None else "-",
                f"{s.min_value:.1f}" if s.min_value is not None else "-",
                f"{s.max_value:.1f}" if s.max_value is not None else "-",
                rate_str,
            )

        self.console.print(nutrient_table)
        self.console.print(f"Nutrition score: [bold]{result.nutrition_score:.1f}[/bold] / 100")

        # Solver info
        if result.solver_info:
            info_parts = []
            if "elapsed_seconds" in result.solver_info:
                info_parts.append(f"Time: {result.solver_info['elapsed_seconds']:.3f}s")
            if "solver" in result.solver_info:
                info_parts.append(f"Solver: {result.solver_info['solver']}")
            if info_parts:
                self.console.print(f"[dim]{' | '.join(info_parts)}[/dim]")


class JSONFormatter:
    """Format results as JSON for programmatic use."""

    def to_dict(
        self,
        result: OptimizationResult,
        profile_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """Build the JSON-ready dict (NaN values become null)."""
        return {
            "timestamp": datetime.now().isoformat(),
            "profile": profile_name,
            "feasible": result.feasible,
            "infeasible_reason": result.infeasible_reason,
            "solution": {
                "picks": [
                    {
                        "food_id": p.food.id,
                        "name": p.food.name,
                        "category": p.food.category,
                        "count": p.count,
                        "packaging": p.food.packaging,
                        "grams": round(p.amount * 100.0, 1),
                        "cost": round(p.cost, 2),
                    }
                    for p in result.picks
                ],
                "total_cost": round(result.total_cost, 2),
                "nutrition_score": round(result.nutrition_score, 2),
                "nutrients": {
                    key: {
                        "actual": _clean(s.actual),
                        "target": s.target,
                        "min": s.min_value,
                        "max": s.max_value,
                        "achievement_rate": _clean(s.achievement_rate),
                        "unit": s.unit,
                    }
                    for key, s in result.nutrient_summary.items()
                },
            },
            "warnings": list(result.warnings),
            "solver_info": result.solver_info,
        }

    def format(
        self,
        result: OptimizationResult,
        profile_name: Optional[str] = None,
    ) -> str:
        """Return JSON string.

        Args:
            result: Optimization result to format
            profile_name: Optional profile name

        Returns:
            JSON string
        """
        return json.dumps(self.to_dict(result, profile_name), indent=2)


class MarkdownFormatter:
    """Format results as Markdown for sharing or documentation."""

    def format(
        self,
        result: OptimizationResult,
        profile_name: Optional[str] = None,
    ) -> str:
        """Return Markdown string.

        Args:
            result: Optimization result to format
            profile_name: Optional profile name

        Returns:
            Markdown string
        """
        lines = [
            "# Optimized Food Selection",
            "",
        ]

        if profile_name:
            lines.append(f"**Profile:** {profile_name}")

        if not result.feasible:
            lines.append(f"**Status:** infeasible ({result.infeasible_reason})")
            return "\n".join(lines)

        lines.append(f"**Total Cost:** ${result.total_cost:.2f}")
        lines.append(f"**Nutrition Score:** {result.nutrition_score:.1f}")

        for warning in result.warnings:
            lines.append(f"> Warning: {warning}")

        lines.extend(
            [
                "",
                "## Foods",
                "",
                "| Food | Packages | Amount | Cost |",
                "|------|----------|--------|------|",
            ]
        )

        for p in result.picks:
            lines.append(
                f"| {p.food.name} | {p.count} x {p.food.packaging} "
                f"| {p.amount * 100.0:.0f}g | ${p.cost:.2f} |"
            )

        lines.extend(
            [
                "",
                "## Nutrient Summary",
                "",
                "| Nutrient | Amount | Target | Achieved |",
                "|----------|--------|--------|----------|",
            ]
        )

        for key, s in _targeted(result):
            target = ""
            if s.min_value is not None and s.max_value is not None:
                target = f"{s.min_value:.0f}-{s.max_value:.0f}"
            elif s.min_value is not None:
                target = f">= {s.min_value:.0f}"
            elif s.max_value is not None:
                target = f"<= {s.max_value:.0f}"
            elif s.target is not None:
                target = f"{s.target:.0f}"

            if math.isnan(s.actual):
                lines.append(f"| {_display_name(key)} | unknown | {target} | - |")
            else:
                lines.append(
                    f"| {_display_name(key)} | {s.actual:.1f} {s.unit} "
                    f"| {target} | {s.achievement_rate:.0f}% |"
                )

        return "\n".join(lines)


def format_result(
    result: OptimizationResult,
    output_format: str = "table",
    profile_name: Optional[str] = None,
    console: Optional[Console] = None,
) -> Optional[str]:
    """Format optimization result in the specified format.

    Args:
        result: Optimization result to format
        output_format: One of 'table', 'json', 'markdown'
        profile_name: Optional profile name
        console: Rich console (for table format)

    Returns:
        Formatted string for json/markdown, None for table (prints directly)
    """
    if output_format == "table":
        formatter = TableFormatter(console)
        formatter.format(result, profile_name)
        return None
    elif output_format == "json":
        formatter = JSONFormatter()
        return formatter.format(result, profile_name)
    elif output_format == "markdown":
        formatter = MarkdownFormatter()
        return formatter.format(result, profile_name)
    else:
        raise ValueError(f"Unknown output format: {output_format}")
