"""
Registry interface and descriptor types.

This module defines the typed view over the route registry: namespaces, the
routes they expose and the radar rules attached to each route. A
RegistrySource supplies a fully materialized Registry before aggregation
begins.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


class RegistryValidationError(ValueError):
    """Raised when registry data does not match the expected shape."""


@dataclass
class RadarRule:
    """
    A radar entry declared on a route.

    Attributes:
        source: Host + path patterns without scheme (e.g. "github.com/:user")
        title: Optional display title, falls back to the route name
        target: Optional path within the same namespace
    """
    source: list[str]
    title: str | None = None
    target: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RadarRule":
        return cls(
            source=list(data["source"]),
            title=data.get("title"),
            target=data.get("target"),
        )


@dataclass
class Route:
    """
    A single route definition.

    Attributes:
        path: Route path relative to its namespace (e.g. "/user/:name")
        name: Human readable route name
        categories: Declared categories, empty when none
        maintainers: Maintainer handles, empty when none
        radar: Radar rules, empty when none
        raw: The route mapping as read, used for the registry dump
    """
    path: str
    name: str
    categories: list[str] = field(default_factory=list)
    maintainers: list[str] = field(default_factory=list)
    radar: list[RadarRule] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, path: str, data: dict[str, Any]) -> "Route":
        return cls(
            path=path,
            name=data["name"],
            categories=list(data.get("categories") or []),
            maintainers=list(data.get("maintainers") or []),
            radar=[RadarRule.from_dict(rule) for rule in data.get("radar") or []],
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw) if self.raw else {"name": self.name}


@dataclass
class Namespace:
    """
    A named group of routes, usually one external site.

    Attributes:
        key: Namespace identifier used as the first path segment
        name: Display name
        categories: Declared categories, empty when none
        routes: Routes keyed by path, in declaration order
        raw: The namespace mapping as read, used for the registry dump
    """
    key: str
    name: str
    categories: list[str] = field(default_factory=list)
    routes: dict[str, Route] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, key: str, data: dict[str, Any]) -> "Namespace":
        routes = {
            path: Route.from_dict(path, route)
            for path, route in (data.get("routes") or {}).items()
        }
        return cls(
            key=key,
            name=data["name"],
            categories=list(data.get("categories") or []),
            routes=routes,
            raw=data,
        )

    def full_path(self, path: str) -> str:
        """Return the route path prefixed with this namespace."""
        return f"/{self.key}{path}"

    def to_dict(self) -> dict[str, Any]:
        # Keep the source key order, with routes re-dumped in place
        result = dict(self.raw) if self.raw else {"name": self.name}
        result["routes"] = {path: route.to_dict() for path, route in self.routes.items()}
        return result


@dataclass
class Registry:
    """Namespaces keyed by identifier, in source order."""

    namespaces: dict[str, Namespace] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Registry":
        """Validate raw registry data and build the typed registry."""
        validate_registry(data)
        return cls(
            namespaces={
                key: Namespace.from_dict(key, namespace)
                for key, namespace in data.items()
            }
        )

    def __iter__(self) -> Iterator[Namespace]:
        return iter(self.namespaces.values())

    def __len__(self) -> int:
        return len(self.namespaces)

    def get(self, key: str) -> Namespace | None:
        return self.namespaces.get(key)

    def to_dict(self) -> dict[str, Any]:
        """Dump the registry in its source shape."""
        return {key: namespace.to_dict() for key, namespace in self.namespaces.items()}


def _check_string_list(value: Any, where: str) -> None:
    if value is None:
        return
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise RegistryValidationError(f"{where} must be a list of strings")


def validate_registry(data: Any) -> None:
    """
    Validate raw registry data.

    Args:
        data: Mapping of namespace identifier to namespace mapping

    Raises:
        RegistryValidationError: If the data is malformed
    """
    if not isinstance(data, dict):
        raise RegistryValidationError("Registry must be a mapping of namespaces")

    for key, namespace in data.items():
        if not isinstance(namespace, dict):
            raise RegistryValidationError(f"Namespace {key} must be a mapping")

        if not namespace.get("name"):
            raise RegistryValidationError(f"Namespace {key} must have a name")

        _check_string_list(namespace.get("categories"), f"Namespace {key} categories")

        routes = namespace.get("routes") or {}
        if not isinstance(routes, dict):
            raise RegistryValidationError(f"Namespace {key} routes must be a mapping")

        for path, route in routes.items():
            where = f"Route /{key}{path}"
            if not isinstance(path, str) or not path.startswith("/"):
                raise RegistryValidationError(f"{where} path must start with '/'")
            if not isinstance(route, dict):
                raise RegistryValidationError(f"{where} must be a mapping")
            if not route.get("name"):
                raise RegistryValidationError(f"{where} must have a name")

            _check_string_list(route.get("categories"), f"{where} categories")
            _check_string_list(route.get("maintainers"), f"{where} maintainers")

            radar = route.get("radar") or []
            if not isinstance(radar, list):
                raise RegistryValidationError(f"{where} radar must be a list")
            for rule in radar:
                if not isinstance(rule, dict):
                    raise RegistryValidationError(f"{where} radar entries must be mappings")
                source = rule.get("source")
                if not source:
                    raise RegistryValidationError(f"{where} radar entry must have a source")
                _check_string_list(source, f"{where} radar source")
                target = rule.get("target")
                if target is not None and (not isinstance(target, str) or not target.startswith("/")):
                    raise RegistryValidationError(f"{where} radar target must start with '/'")


class RegistrySource(ABC):
    """
    Abstract base class for registry providers.

    A source knows where route definitions live and how to read them into a
    Registry. Subclasses implement the storage-specific loading.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Identifier for this source.

        Returns:
            A short description of where the registry is read from
        """
        pass

    @abstractmethod
    def load(self) -> Registry:
        """
        Read and validate the registry.

        Returns:
            A fully materialized Registry

        Raises:
            RegistryValidationError: If the stored data is malformed
        """
        pass


class DictRegistrySource(RegistrySource):
    """Registry source backed by an in-memory mapping."""

    def __init__(self, data: dict[str, Any]):
        self._data = data

    @property
    def name(self) -> str:
        return "memory"

    def load(self) -> Registry:
        return Registry.from_dict(self._data)
