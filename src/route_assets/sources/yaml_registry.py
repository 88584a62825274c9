"""
YAML registry source.

Reads route definitions either from a single YAML file mapping namespace
identifiers to namespaces, or from a directory holding one YAML file per
namespace.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from route_assets.core.registry import Registry, RegistrySource, RegistryValidationError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yml", ".yaml")


class YamlRegistrySource(RegistrySource):
    """
    Registry stored as YAML on disk.

    A directory layout uses the file stem as the namespace identifier, e.g.
    ``lib/routes/github.yml`` defines namespace ``github``. Files are read in
    sorted order so namespace order is stable between runs.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @property
    def name(self) -> str:
        """Return the registry location."""
        return str(self.path)

    def load(self) -> Registry:
        """
        Load the registry from disk.

        Returns:
            Registry with every namespace found

        Raises:
            FileNotFoundError: If the registry path doesn't exist
            yaml.YAMLError: If a file is invalid YAML
            RegistryValidationError: If the data is malformed
        """
        if not self.path.exists():
            raise FileNotFoundError(f"Registry not found: {self.path}")

        if self.path.is_dir():
            data = self._read_directory()
        else:
            data = self._read_file(self.path) or {}

        registry = Registry.from_dict(data)
        logger.info("Loaded %d namespaces from %s", len(registry), self.path)
        return registry

    def _read_directory(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        files = sorted(
            p for p in self.path.iterdir() if p.is_file() and p.suffix in YAML_SUFFIXES
        )
        for file_path in files:
            namespace = self._read_file(file_path)
            if namespace is None:
                logger.debug("Skipping empty registry file %s", file_path)
                continue
            if file_path.stem in data:
                raise RegistryValidationError(
                    f"Namespace {file_path.stem} is defined more than once"
                )
            data[file_path.stem] = namespace
        return data

    @staticmethod
    def _read_file(file_path: Path) -> Any:
        with open(file_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
