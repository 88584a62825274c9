"""
Aggregation of the route registry into build artifacts.

A single walk over the registry produces:
- the maintainers map (full route path -> maintainer handles)
- the radar map (registrable domain -> subdomain -> radar items)
- a dump of the registry itself
"""

import ipaddress
import logging
from dataclasses import asdict, dataclass, field
from typing import Any
from urllib.parse import SplitResult, quote, urlsplit

import tldextract

from route_assets.core.config import BuildConfig
from route_assets.core.registry import Namespace, RadarRule, Registry, Route

logger = logging.getLogger(__name__)

BARE_DOMAIN = "."
NAME_KEY = "_name"

# Percent-encode sets of the WHATWG URL standard, as characters left unescaped
_PATH_SAFE = "/:@!$&'()*+,;=%~[]^|"
_QUERY_SAFE = "/:@!$&()*+,;=%~[]^|?`{}\\"
_FRAGMENT_SAFE = "/:@!$&'()*+,;=%~[]^|?#{}\\"

# Bundled public suffix snapshot only, no network fetch
_extract = tldextract.TLDExtract(suffix_list_urls=())


@dataclass
class RadarItem:
    """
    One radar rule as published in radar-rules.json.

    Attributes:
        title: Rule title
        docs: Documentation URL for the route category
        source: Path + query + fragment patterns on the monitored site
        target: Full route path the rule resolves to
    """
    title: str
    docs: str
    source: list[str]
    target: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BuildResult:
    """In-memory results of one aggregation pass."""

    maintainers: dict[str, list[str]] = field(default_factory=dict)
    radar: dict[str, dict[str, Any]] = field(default_factory=dict)
    routes: dict[str, Any] = field(default_factory=dict)


def parse_source_url(source: str) -> SplitResult:
    """
    Parse a radar source pattern into URL parts.

    Sources are written without a scheme; ``https://`` is prepended when
    none is present. Backslashes before the query or fragment count as
    path separators, as browsers treat them.

    Raises:
        ValueError: If the pattern is not a valid URL (e.g. bad port)
    """
    cut = min((i for i in (source.find("?"), source.find("#")) if i >= 0), default=len(source))
    source = source[:cut].replace("\\", "/") + source[cut:]
    url = source if "://" in source else f"https://{source}"
    parts = urlsplit(url)
    # Accessing port validates it
    parts.port
    return parts


def _is_ip(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True


def split_domain(hostname: str | None) -> tuple[str | None, str]:
    """
    Split a hostname into registrable domain and subdomain.

    Hosts under a TLD missing from the public suffix list take their last
    label as the suffix (``www.example.internal`` -> ``example.internal``).

    Returns:
        (domain, subdomain); domain is None when the host has no registrable
        domain, subdomain is "." for a bare domain
    """
    if not hostname or _is_ip(hostname):
        return None, BARE_DOMAIN
    extracted = _extract(hostname)
    if extracted.domain and extracted.suffix:
        return f"{extracted.domain}.{extracted.suffix}", extracted.subdomain or BARE_DOMAIN
    if not extracted.suffix:
        labels = hostname.split(".")
        if len(labels) >= 2 and all(labels):
            return ".".join(labels[-2:]), ".".join(labels[:-2]) or BARE_DOMAIN
    return None, extracted.subdomain or BARE_DOMAIN


def source_path(source: str) -> str:
    """Reduce a source pattern to percent-encoded path + query + fragment."""
    parts = parse_source_url(source)
    result = quote(parts.path or "/", safe=_PATH_SAFE)
    if parts.query:
        result += "?" + quote(parts.query, safe=_QUERY_SAFE)
    if parts.fragment:
        result += "#" + quote(parts.fragment, safe=_FRAGMENT_SAFE)
    return result


def default_category(namespace: Namespace, fallback: str = "other") -> str:
    """
    Resolve the default category of a namespace.

    Precedence: the namespace's first category, then the first category of
    the first route declaring any, then ``fallback``.
    """
    if namespace.categories:
        return namespace.categories[0]
    for route in namespace.routes.values():
        if route.categories:
            return route.categories[0]
    return fallback


def route_categories(route: Route, namespace: Namespace, default: str) -> list[str]:
    """Effective categories of a route."""
    return route.categories or namespace.categories or [default]


def _radar_bucket(radar: dict[str, dict[str, Any]], domain: str, subdomain: str, name: str) -> list[dict[str, Any]]:
    # First namespace to touch a domain names it
    bucket = radar.setdefault(domain, {NAME_KEY: name})
    return bucket.setdefault(subdomain, [])


def build_radar_item(
    namespace: Namespace,
    route: Route,
    rule: RadarRule,
    category: str,
    config: BuildConfig,
) -> RadarItem:
    target = namespace.full_path(rule.target) if rule.target else namespace.full_path(route.path)
    return RadarItem(
        title=rule.title or route.name,
        docs=config.docs_link(category),
        source=[source_path(source) for source in rule.source],
        target=target,
    )


def aggregate(registry: Registry, config: BuildConfig | None = None) -> BuildResult:
    """
    Walk the registry once and build the maintainers and radar maps.

    Args:
        registry: Loaded registry
        config: Build configuration, defaults when None

    Returns:
        BuildResult with maintainers, radar and the registry dump

    Raises:
        ValueError: If a radar source cannot be parsed as a URL
    """
    config = config or BuildConfig()
    result = BuildResult()
    skipped = 0

    for namespace in registry:
        default = default_category(namespace, config.fallback_category)

        for route in namespace.routes.values():
            full_path = namespace.full_path(route.path)
            categories = route_categories(route, namespace, default)

            if route.maintainers:
                result.maintainers[full_path] = list(route.maintainers)

            for rule in route.radar:
                hostname = parse_source_url(rule.source[0]).hostname
                domain, subdomain = split_domain(hostname)
                if domain is None:
                    logger.debug("No registrable domain for %s in %s", rule.source[0], full_path)
                    skipped += 1
                    continue

                item = build_radar_item(namespace, route, rule, categories[0], config)
                _radar_bucket(result.radar, domain, subdomain, namespace.name).append(item.to_dict())

    result.routes = registry.to_dict()

    logger.info(
        "Aggregated %d namespaces: %d maintained routes, %d radar domains",
        len(registry),
        len(result.maintainers),
        len(result.radar),
    )
    if skipped:
        logger.warning("Skipped %d radar entries without a registrable domain", skipped)
    return result
