"""Chart.yaml persistence helpers."""

from __future__ import annotations

import os
from pathlib import Path

from chartpack.config import PackConfig, config
from chartpack.models.chart import Metadata


def write_file(path: Path, data: bytes, *, settings: PackConfig | None = None) -> None:
    """Write ``data`` to ``path``, creating parent directories as needed.

    New files get ``settings.file_mode``; existing files are truncated and
    keep their permissions.
    """
    settings = settings or config
    path.parent.mkdir(mode=settings.dir_mode, parents=True, exist_ok=True)
    with open(
        path,
        "wb",
        opener=lambda p, flags: os.open(p, flags, settings.file_mode),
    ) as fh:
        fh.write(data)


def save_chartfile(
    path: Path | str,
    metadata: Metadata,
    *,
    settings: PackConfig | None = None,
) -> None:
    """Serialize ``metadata`` as YAML and write it to ``path``."""
    write_file(Path(path), metadata.to_yaml(), settings=settings)
