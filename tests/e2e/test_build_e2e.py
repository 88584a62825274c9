"""
End-to-end tests for the route asset build.

Each test lays out a project root in a temporary directory (registry YAML,
optional config) and runs the build the way the entry point does, checking
the artifacts on disk and the exit status.
"""
import json
import logging
import shutil
from pathlib import Path

import pytest
import yaml

from route_assets.build import (
    MAINTAINERS_JSON,
    RADAR_JS,
    RADAR_JSON,
    ROUTES_JSON,
    main,
    run,
)
from route_assets.core import BuildConfig, DictRegistrySource
from route_assets.core.telemetry import BuildRecorder, get_recorder, set_recorder

REPO_ROOT = Path(__file__).resolve().parents[2]
ARTIFACTS = [RADAR_JSON, RADAR_JS, MAINTAINERS_JSON, ROUTES_JSON]

REGISTRY = {
    "github": {
        "name": "GitHub",
        "routes": {
            "/user/:name": {
                "name": "User Activities",
                "maintainers": ["DIYgod"],
                "radar": [{"source": ["github.com/:name"]}],
            },
            "/trending": {"name": "Trending"},
        },
    },
    "example": {
        "name": "Example",
        "categories": ["blog"],
        "routes": {
            "/blog": {
                "name": "Blog",
                "radar": [{"source": ["blog.example.com/feed"]}],
            },
        },
    },
}


@pytest.fixture(autouse=True)
def recorder():
    """Install a fresh global recorder for each test."""
    original = get_recorder()
    fresh = BuildRecorder()
    set_recorder(fresh)
    yield fresh
    set_recorder(original)


@pytest.fixture
def project(tmp_path):
    """Project root with a single-file registry and matching config."""
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "build.yml").write_text(
        yaml.safe_dump({"registry_path": "registry.yml"}), encoding="utf-8"
    )
    (tmp_path / "registry.yml").write_text(yaml.safe_dump(REGISTRY, sort_keys=False), encoding="utf-8")
    return tmp_path


def build_dir(root: Path) -> Path:
    return root / "assets" / "build"


def read_artifacts(root: Path) -> dict[str, bytes]:
    return {name: (build_dir(root) / name).read_bytes() for name in ARTIFACTS}


class TestBuild:
    """Full build against a project on disk."""

    def test_writes_all_artifacts(self, project):
        assert run(project) == 0

        out = build_dir(project)
        radar = json.loads((out / RADAR_JSON).read_text(encoding="utf-8"))
        maintainers = json.loads((out / MAINTAINERS_JSON).read_text(encoding="utf-8"))
        routes = json.loads((out / ROUTES_JSON).read_text(encoding="utf-8"))

        assert radar["github.com"]["."] == [
            {
                "title": "User Activities",
                "docs": "https://docs.rsshub.app/routes/other",
                "source": ["/:name"],
                "target": "/github/user/:name",
            }
        ]
        assert radar["example.com"]["_name"] == "Example"
        assert radar["example.com"]["blog"][0]["source"] == ["/feed"]
        assert radar["example.com"]["blog"][0]["docs"] == "https://docs.rsshub.app/routes/blog"
        assert maintainers == {"/github/user/:name": ["DIYgod"]}
        assert routes == REGISTRY

    def test_artifact_formats(self, project):
        run(project)

        out = build_dir(project)
        radar_json = (out / RADAR_JSON).read_text(encoding="utf-8")
        radar_js = (out / RADAR_JS).read_text(encoding="utf-8")

        assert radar_json.startswith('{\n  "github.com": {\n    "_name": "GitHub",')
        assert radar_js.startswith('({ "github.com":{ _name:"GitHub",')
        assert radar_js.endswith(")")

    def test_write_order(self, project, recorder):
        run(project)

        assert [event.artifact for event in recorder.get_events()] == ["directory", *ARTIFACTS]

    def test_idempotent(self, project):
        assert run(project) == 0
        first = read_artifacts(project)

        assert run(project) == 0

        assert read_artifacts(project) == first

    def test_overwrites_previous_outputs(self, project):
        out = build_dir(project)
        out.mkdir(parents=True)
        (out / MAINTAINERS_JSON).write_text('{"stale": []}', encoding="utf-8")

        run(project)

        assert "stale" not in (out / MAINTAINERS_JSON).read_text(encoding="utf-8")

    def test_sample_registry(self, tmp_path):
        """Test the registry shipped in lib/routes builds cleanly."""
        shutil.copytree(REPO_ROOT / "lib" / "routes", tmp_path / "lib" / "routes")

        assert run(tmp_path) == 0

        radar = json.loads((build_dir(tmp_path) / RADAR_JSON).read_text(encoding="utf-8"))
        assert radar["bbc.co.uk"]["_name"] == "BBC"
        assert radar["github.com"]["."][1]["target"] == "/github/issue/:user/:repo"


class TestMainApi:
    """Drive the async main directly."""

    @pytest.mark.asyncio
    async def test_dict_source_and_config(self, tmp_path):
        config = BuildConfig(output_dir="public", docs_url="https://docs.example.org/{category}")

        result = await main(tmp_path, source=DictRegistrySource(REGISTRY), config=config)

        assert (tmp_path / "public" / RADAR_JS).exists()
        assert result.radar["example.com"]["blog"][0]["docs"] == "https://docs.example.org/blog"

    @pytest.mark.asyncio
    async def test_recorder_holds_only_the_latest_run(self, project, recorder, caplog):
        """Test failures from an earlier run are not reported again."""
        blocker = build_dir(project) / MAINTAINERS_JSON
        blocker.mkdir(parents=True)

        await main(project)
        assert recorder.get_stats().failures == 1

        blocker.rmdir()
        caplog.clear()

        with caplog.at_level(logging.WARNING):
            await main(project)

        assert recorder.get_stats().failures == 0
        assert len(recorder.get_events()) == 5
        assert "failed steps" not in caplog.text


class TestFailurePolicy:
    """Non-fatal I/O failures and fatal build errors."""

    def test_directory_creation_fails(self, project, recorder, monkeypatch, caplog):
        """Test every write is still attempted and the exit status stays 0."""
        def deny(self, *args, **kwargs):
            raise PermissionError("permission denied")

        monkeypatch.setattr(Path, "mkdir", deny)

        with caplog.at_level(logging.INFO):
            assert run(project) == 0

        events = recorder.get_events()
        assert [event.artifact for event in events] == ["directory", *ARTIFACTS]
        assert all(not event.ok for event in events)
        for name in ARTIFACTS:
            assert f"Error writing {build_dir(project) / name}" in caplog.text

    def test_single_write_failure_does_not_stop_others(self, project, recorder):
        out = build_dir(project)
        (out / MAINTAINERS_JSON).mkdir(parents=True)

        assert run(project) == 0

        failed = [event.artifact for event in recorder.get_events() if not event.ok]
        assert failed == [MAINTAINERS_JSON]
        assert (out / ROUTES_JSON).exists()

    def test_malformed_source_is_fatal(self, project, caplog):
        broken = {"ns": {"name": "NS", "routes": {"/a": {"name": "A", "radar": [{"source": ["example.com:port"]}]}}}}
        (project / "registry.yml").write_text(yaml.safe_dump(broken), encoding="utf-8")

        with caplog.at_level(logging.ERROR):
            assert run(project) == 1

        assert "An error occurred during the build process" in caplog.text
        assert not build_dir(project).exists()

    def test_missing_registry_is_fatal(self, tmp_path):
        assert run(tmp_path) == 1

    def test_invalid_registry_is_fatal(self, project):
        (project / "registry.yml").write_text(yaml.safe_dump({"ns": {"routes": {}}}), encoding="utf-8")

        assert run(project) == 1

    def test_invalid_config_is_fatal(self, project):
        (project / "config" / "build.yml").write_text(
            yaml.safe_dump({"docs_url": "https://docs.example.org"}), encoding="utf-8"
        )

        assert run(project) == 1
