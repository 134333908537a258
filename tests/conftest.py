"""Shared fixtures for license-validator tests."""

from pathlib import Path
from typing import Any

import pytest
import yaml
from click.testing import CliRunner

from license_validator.resolvers.manifest import ManifestGraphProvider

SAMPLE_GRAPH: dict[str, Any] = {
    "root": "com.example:app:1.0.0",
    "artifacts": {
        "com.example:app:1.0.0": {
            "dependencies": [
                "org.example:lib-a:1.0",
                "org.example:lib-b:2.0",
                {"coordinate": "junit:junit:4.13", "scope": "test"},
                {"coordinate": "javax.servlet:servlet-api:3.1", "scope": "provided"},
                {"coordinate": "org.example:extras:0.9", "optional": True},
            ],
        },
        "org.example:lib-a:1.0": {
            "licenses": [
                {
                    "name": "Apache-2.0",
                    "url": "https://www.apache.org/licenses/LICENSE-2.0",
                }
            ],
            "dependencies": ["org.example:lib-c:1.0"],
        },
        "org.example:lib-b:2.0": {
            "licenses": [{"name": "MIT"}],
            "dependencies": ["org.example:lib-c:1.0"],
        },
        "org.example:lib-c:1.0": {
            "licenses": [{"name": "MIT", "url": "https://opensource.org/licenses/MIT"}],
        },
        "junit:junit:4.13": {
            "licenses": [{"name": "EPL-1.0"}],
        },
        "javax.servlet:servlet-api:3.1": {
            "licenses": [{"name": "CDDL-1.0"}],
        },
        "org.example:extras:0.9": {
            "licenses": [{"name": "GPL-3.0"}],
        },
    },
}


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_graph() -> dict[str, Any]:
    """Provide a fresh copy of the sample artifact graph manifest."""
    return yaml.safe_load(yaml.safe_dump(SAMPLE_GRAPH))


@pytest.fixture
def sample_provider(sample_graph: dict[str, Any]) -> ManifestGraphProvider:
    """Provide a manifest provider for the sample graph."""
    return ManifestGraphProvider.from_mapping(sample_graph)


@pytest.fixture
def manifest_file(tmp_path: Path, sample_graph: dict[str, Any]) -> Path:
    """Write the sample graph as a YAML manifest file."""
    path = tmp_path / "graph.yaml"
    path.write_text(yaml.safe_dump(sample_graph), encoding="utf-8")
    return path
