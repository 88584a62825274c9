"""Core types and steps of the route asset build."""

from route_assets.core.aggregate import (
    BuildResult,
    RadarItem,
    aggregate,
    default_category,
    route_categories,
    source_path,
    split_domain,
)
from route_assets.core.config import (
    BuildConfig,
    ConfigValidationError,
    load_config,
    validate_config,
)
from route_assets.core.registry import (
    DictRegistrySource,
    Namespace,
    RadarRule,
    Registry,
    RegistrySource,
    RegistryValidationError,
    Route,
    validate_registry,
)
from route_assets.core.source_literal import to_module_source, to_source
from route_assets.core.telemetry import BuildRecorder, BuildStats, WriteEvent, WriteStatus
from route_assets.core.writer import ensure_directory, write_json_file, write_text_file

__all__ = [
    # aggregate
    "BuildResult",
    "RadarItem",
    "aggregate",
    "default_category",
    "route_categories",
    "source_path",
    "split_domain",
    # config
    "BuildConfig",
    "ConfigValidationError",
    "load_config",
    "validate_config",
    # registry
    "DictRegistrySource",
    "Namespace",
    "RadarRule",
    "Registry",
    "RegistrySource",
    "RegistryValidationError",
    "Route",
    "validate_registry",
    # source_literal
    "to_module_source",
    "to_source",
    # telemetry
    "BuildRecorder",
    "BuildStats",
    "WriteEvent",
    "WriteStatus",
    # writer
    "ensure_directory",
    "write_json_file",
    "write_text_file",
]
