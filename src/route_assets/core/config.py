"""
Configuration module for the route asset build.

This module provides configuration loading and validation for where the
registry is read from, where artifacts are written and how radar documentation
links are derived.
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml

CONFIG_RELATIVE_PATH = Path("config") / "build.yml"


class ConfigValidationError(ValueError):
    """Raised when the build configuration is invalid."""


@dataclass
class BuildConfig:
    """Configuration for one build run."""

    registry_path: str = "lib/routes"
    output_dir: str = "assets/build"
    docs_url: str = "https://docs.rsshub.app/routes/{category}"
    fallback_category: str = "other"
    indent: int = 2

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildConfig":
        """Create BuildConfig from dictionary."""
        defaults = cls()
        return cls(
            registry_path=data.get("registry_path", defaults.registry_path),
            output_dir=data.get("output_dir", defaults.output_dir),
            docs_url=data.get("docs_url", defaults.docs_url),
            fallback_category=data.get("fallback_category", defaults.fallback_category),
            indent=data.get("indent", defaults.indent),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def docs_link(self, category: str) -> str:
        """Render the documentation URL for a category."""
        return self.docs_url.format(category=category)

    def resolve_registry_path(self, project_root: Path) -> Path:
        return project_root / self.registry_path

    def resolve_output_dir(self, project_root: Path) -> Path:
        return project_root / self.output_dir


def load_config(project_root: str | Path | None = None) -> BuildConfig:
    """
    Load build configuration from ``config/build.yml`` under the project root.

    Args:
        project_root: Project root directory. If None, uses the current
            working directory.

    Returns:
        BuildConfig with the configured (or default) settings

    Raises:
        yaml.YAMLError: If config file is invalid YAML
        ConfigValidationError: If config validation fails
    """
    root = Path.cwd() if project_root is None else Path(project_root)
    config_path = root / CONFIG_RELATIVE_PATH

    if not config_path.exists():
        # Defaults when no config file is present
        return BuildConfig()

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        return BuildConfig()

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{config_path} must contain a mapping")

    config = BuildConfig.from_dict(data)
    validate_config(config)
    return config


def validate_config(config: BuildConfig) -> None:
    """
    Validate configuration.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if not config.registry_path:
        raise ConfigValidationError("registry_path must not be empty")

    if not config.output_dir:
        raise ConfigValidationError("output_dir must not be empty")

    if "{category}" not in config.docs_url:
        raise ConfigValidationError("docs_url must contain a {category} placeholder")

    if not config.fallback_category:
        raise ConfigValidationError("fallback_category must not be empty")

    if not isinstance(config.indent, int) or isinstance(config.indent, bool) or config.indent < 0:
        raise ConfigValidationError("indent must be a non-negative integer")
