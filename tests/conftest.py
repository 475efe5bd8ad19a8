"""Shared test fixtures for Chartpack."""

from __future__ import annotations

import tarfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from chartpack.config import PackConfig
from chartpack.models.chart import Chart, ChartFile, Metadata


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test output."""
    return tmp_path


@pytest.fixture
def settings() -> PackConfig:
    """Provide settings with default modes, independent of the environment."""
    return PackConfig(_env_file=None)


# ---------------------------------------------------------------------------
# Chart factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_chart() -> Callable[..., Chart]:
    """Factory fixture: build a Chart with sensible defaults."""

    def _factory(
        name: str = "web",
        version: str = "1.0.0",
        **overrides: Any,
    ) -> Chart:
        defaults: dict[str, Any] = {
            "metadata": Metadata(
                api_version="v2",
                name=name,
                version=version,
                description=f"The {name} chart",
            ),
            "raw": [ChartFile(name="values.yaml", data=b"replicas: 1\n")],
            "templates": [
                ChartFile(
                    name="templates/deployment.yaml",
                    data=b"kind: Deployment\nname: {{ .Release.Name }}\n",
                ),
                ChartFile(name="templates/service.yaml", data=b"kind: Service\n"),
            ],
            "files": [ChartFile(name="README.md", data=f"# {name}\n".encode())],
        }
        defaults.update(overrides)
        return Chart(**defaults)

    return _factory


@pytest.fixture
def chart(make_chart: Callable[..., Chart]) -> Chart:
    """Convenience: a ready-made dependency-free chart."""
    return make_chart()


@pytest.fixture
def chart_with_deps(make_chart: Callable[..., Chart]) -> Chart:
    """A chart with two dependencies, the first carrying its own dependency."""
    leaf = make_chart("common", "0.3.1", raw=[], files=[])
    redis = make_chart("redis", "7.2.0", dependencies=[leaf])
    postgres = make_chart("postgres", "12.1.0", values_schema=b'{"type": "object"}')
    return make_chart(dependencies=[redis, postgres])


# ---------------------------------------------------------------------------
# Archive helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def read_archive() -> Callable[[Path], dict[str, bytes]]:
    """Return ``{entry name: payload}`` for a .tgz, in stored order."""

    def _read(path: Path) -> dict[str, bytes]:
        entries: dict[str, bytes] = {}
        with tarfile.open(path, "r:gz") as tf:
            for member in tf.getmembers():
                fh = tf.extractfile(member)
                entries[member.name] = fh.read() if fh is not None else b""
        return entries

    return _read
