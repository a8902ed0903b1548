"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".nutriopt"


@dataclass
class OptimizationConfig:
    """Default optimizer options, used where a profile is silent."""

    objective: str = "balanced_nutrition"
    cost_weight: float = 1.0
    nutrition_weight: float = 10.0
    default_max_per_food: int = 3
    step_size: float = 50.0
    time_limit_seconds: float = 30.0


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    output_format: str = "table"  # "table", "json", "markdown"


@dataclass
class Settings:
    """Main application settings."""

    optimization: OptimizationConfig = field(default_factory=OptimizationConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.nutriopt/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse optimization config
        if "optimization" in data:
            opt_data = data["optimization"] or {}
            if "objective" in opt_data:
                settings.optimization.objective = str(opt_data["objective"])
            if "cost_weight" in opt_data:
                settings.optimization.cost_weight = float(opt_data["cost_weight"])
            if "nutrition_weight" in opt_data:
                settings.optimization.nutrition_weight = float(
                    opt_data["nutrition_weight"]
                )
            if "default_max_per_food" in opt_data:
                settings.optimization.default_max_per_food = int(
                    opt_data["default_max_per_food"]
                )
            if "step_size" in opt_data:
                settings.optimization.step_size = float(opt_data["step_size"])
            if "time_limit_seconds" in opt_data:
                settings.optimization.time_limit_seconds = float(
                    opt_data["time_limit_seconds"]
                )

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.nutriopt/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "optimization": {
                "objective": self.optimization.objective,
                "cost_weight": self.optimization.cost_weight,
                "nutrition_weight": self.optimization.nutrition_weight,
                "default_max_per_food": self.optimization.default_max_per_food,
                "step_size": self.optimization.step_size,
                "time_limit_seconds": self.optimization.time_limit_seconds,
            },
            "defaults": {
                "output_format": self.defaults.output_format,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
