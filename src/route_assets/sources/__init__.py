"""Registry source implementations."""

from route_assets.sources.yaml_registry import YamlRegistrySource

__all__ = ["YamlRegistrySource"]
