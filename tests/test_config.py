"""Tests for configuration loading."""

import pytest

from config import EXCLUDE_DIRS, GeneratorConfig, load_config


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify the default locations."""
    for name in ("GQL_SOURCE_ROOT", "GQL_ROOT_MARKER", "GQL_OUTPUT_DIR", "GQL_EXCLUDE"):
        monkeypatch.delenv(name, raising=False)
    config = load_config()
    assert config.source_root == "app"
    assert config.root_marker == "app/"
    assert config.queries_path.replace("\\", "/") == "GraphqlQueries/generatedQueries.json"
    assert config.fragments_path.replace("\\", "/") == "GraphqlQueries/generatedFragments.json"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify environment variables override defaults."""
    monkeypatch.setenv("GQL_SOURCE_ROOT", "src")
    monkeypatch.setenv("GQL_ROOT_MARKER", "src/")
    monkeypatch.setenv("GQL_EXCLUDE", "generated, dist")
    config = load_config()
    assert config.source_root == "src"
    assert config.root_marker == "src/"
    assert config.exclude_dirs == EXCLUDE_DIRS + ("generated", "dist")


def test_with_overrides_ignores_none() -> None:
    """Verify None overrides keep the current value."""
    config = GeneratorConfig().with_overrides(output_dir=None, dry_run=True)
    assert config.output_dir == "GraphqlQueries"
    assert config.dry_run
