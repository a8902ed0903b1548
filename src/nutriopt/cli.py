"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from nutriopt.app_logging import configure_logging
from nutriopt.config import get_settings, reload_settings
from nutriopt.data.nutrients import (
    DEFAULT_PRIORITIES,
    Nutrient,
    get_nutrient_display_name,
    get_nutrient_unit,
)
from nutriopt.data.packaging import packaging_multiplier, parse_packaging

app = typer.Typer(
    help="Choose food packages that meet nutrient targets at low cost",
    no_args_is_help=True,
)
console = Console()

OUTPUT_FORMATS = ("table", "json", "markdown")


# ============================================================================
# Helper for JSON output
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging"
    ),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(logging.DEBUG if verbose else logging.INFO)


# ============================================================================
# Main Commands
# ============================================================================


@app.command()
def optimize(
    profile_file: Path = typer.Argument(..., help="YAML problem profile"),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output format: table, json, markdown"
    ),
    objective: Optional[str] = typer.Option(
        None,
        "--objective",
        help="Objective: minimize_cost, balanced_nutrition, cost_with_nutrition, custom_weighted",
    ),
    time_limit: Optional[float] = typer.Option(
        None, "--time-limit", help="Solver time limit in seconds"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Settings file (default ~/.nutriopt/config.yaml)"
    ),
) -> None:
    """Run food selection optimization for a profile."""
    from nutriopt.export.formatters import JSONFormatter, format_result
    from nutriopt.optimizer.constraints import load_profile_from_yaml
    from nutriopt.optimizer.models import NutriOptError, ObjectiveMode
    from nutriopt.optimizer.solver import solve_diet_problem

    settings = reload_settings(config_path) if config_path else get_settings()
    output_format = output or settings.defaults.output_format

    if output_format not in OUTPUT_FORMATS:
        console.print(
            f"[red]Unknown output format: {output_format}. "
            f"Use one of: {', '.join(OUTPUT_FORMATS)}[/red]"
        )
        raise typer.Exit(1)

    if not profile_file.exists():
        console.print(f"[red]Profile file not found: {profile_file}[/red]")
        raise typer.Exit(1)

    try:
        request = load_profile_from_yaml(profile_file, settings.optimization)
    except (KeyError, ValueError) as e:
        console.print(f"[red]Invalid profile: {e}[/red]")
        raise typer.Exit(1)

    if objective:
        try:
            request.objective = ObjectiveMode.parse(objective)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
    if time_limit is not None:
        request.time_limit_seconds = time_limit

    try:
        result = solve_diet_problem(request, DEFAULT_PRIORITIES)
    except NutriOptError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    profile_name = profile_file.stem

    if output_format == "json":
        output_json(JSONFormatter().to_dict(result, profile_name))
    elif output_format == "markdown":
        print(format_result(result, "markdown", profile_name))
    else:
        format_result(result, "table", profile_name, console)

    if not result.feasible:
        if output_format == "table":
            console.print("\n[yellow]Suggestions:[/yellow]")
            console.print("  - Relax min/max bounds on nutrient targets")
            console.print("  - Lower category min_count values")
            console.print("  - Add more foods or remove exclusions")
        raise typer.Exit(1)


@app.command()
def nutrients(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List the nutrient keys usable in targets and foods."""
    if json_output:
        output_json({
            "success": True,
            "command": "nutrients",
            "data": [
                {
                    "key": n.key,
                    "name": get_nutrient_display_name(n),
                    "unit": get_nutrient_unit(n),
                    "priority": DEFAULT_PRIORITIES.tier(n).value,
                    "weight": DEFAULT_PRIORITIES.weight(n),
                }
                for n in Nutrient
            ],
        })
        return

    table = Table(title="Nutrients")
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Unit", style="dim")
    table.add_column("Priority", style="blue")
    table.add_column("Weight", justify="right")

    for n in Nutrient:
        table.add_row(
            n.key,
            get_nutrient_display_name(n),
            get_nutrient_unit(n),
            DEFAULT_PRIORITIES.tier(n).value,
            f"{DEFAULT_PRIORITIES.weight(n):g}",
        )

    console.print(table)


@app.command()
def packaging(
    size: str = typer.Argument(..., help="Package size, e.g. 500g or 1.5L"),
) -> None:
    """Show how a package size converts to 100g units."""
    parsed = parse_packaging(size)
    multiplier = packaging_multiplier(size)

    if parsed is None:
        console.print(f"[yellow]Could not parse '{size}', counting it as 100g[/yellow]")
    console.print(f"{size}: {multiplier:g} x 100g")


if __name__ == "__main__":
    app()
