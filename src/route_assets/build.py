"""
Build driver.

Loads the registry, aggregates it and writes the artifacts under
``<project root>/assets/build``:

- radar-rules.json
- radar-rules.js
- maintainers.json
- routes.json

Write failures are logged and do not change the exit status. Errors raised
while loading or aggregating abort the build with exit status 1.
"""

import asyncio
import logging
import sys
from pathlib import Path

from route_assets.core.aggregate import BuildResult, aggregate
from route_assets.core.config import BuildConfig, load_config
from route_assets.core.registry import RegistrySource
from route_assets.core.source_literal import to_module_source
from route_assets.core.telemetry import BuildRecorder, get_recorder
from route_assets.core.writer import ensure_directory, write_json_file, write_text_file
from route_assets.sources import YamlRegistrySource

logger = logging.getLogger(__name__)

RADAR_JSON = "radar-rules.json"
RADAR_JS = "radar-rules.js"
MAINTAINERS_JSON = "maintainers.json"
ROUTES_JSON = "routes.json"


async def write_artifacts(
    result: BuildResult,
    output_dir: Path,
    indent: int = 2,
    recorder: BuildRecorder | None = None,
) -> None:
    """Write every artifact in order, each attempt independent of the others."""
    recorder = recorder or get_recorder()

    await ensure_directory(output_dir, recorder)

    await write_json_file(output_dir / RADAR_JSON, result.radar, indent, recorder)
    await write_text_file(output_dir / RADAR_JS, to_module_source(result.radar), recorder)
    await write_json_file(output_dir / MAINTAINERS_JSON, result.maintainers, indent, recorder)
    await write_json_file(output_dir / ROUTES_JSON, result.routes, indent, recorder)


async def main(
    project_root: str | Path | None = None,
    source: RegistrySource | None = None,
    config: BuildConfig | None = None,
    recorder: BuildRecorder | None = None,
) -> BuildResult:
    """
    Run one build.

    Args:
        project_root: Project root, current working directory when None
        source: Registry source, the configured YAML registry when None
        config: Build configuration, read from the project when None
        recorder: Event recorder, the global recorder when None; cleared
            before the artifacts are written so it holds this run only

    Returns:
        The aggregated BuildResult

    Raises:
        Any error from config loading, registry loading or aggregation
    """
    root = Path.cwd() if project_root is None else Path(project_root)
    config = config or load_config(root)
    source = source or YamlRegistrySource(config.resolve_registry_path(root))

    logger.info("Reading registry from %s", source.name)
    registry = source.load()
    result = aggregate(registry, config)

    recorder = recorder or get_recorder()
    recorder.clear()
    await write_artifacts(result, config.resolve_output_dir(root), config.indent, recorder)

    stats = recorder.get_stats()
    if stats.failures:
        logger.warning("Build finished with %d failed steps", stats.failures)
    return result


def run(project_root: str | Path | None = None, source: RegistrySource | None = None) -> int:
    """
    Run a build and map its outcome to a process exit status.

    Returns:
        0 when the build completed (even with failed writes), 1 otherwise
    """
    try:
        asyncio.run(main(project_root, source))
    except Exception:
        logger.exception("An error occurred during the build process")
        return 1
    return 0


def cli() -> None:
    """Console entry point."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(run())
