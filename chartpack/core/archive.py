"""Chart archive writer — one gzip-compressed tar stream per chart tree.

Layout of ``<name>-<version>.tgz``::

    <name>/Chart.yaml
    <name>/Chart.lock              (when locked)
    <name>/values.yaml             (when present)
    <name>/values.schema.json      (when present)
    <name>/<templates...>
    <name>/<files...>
    <name>/charts/<dep>/...        (each dependency, flattened recursively)

Dependencies are written into the same tar stream as ordinary entries, so
one archive extracts as one self-contained unit.

Atomicity is rollback-by-delete: every failure exit path closes the
tar/gzip/file layers and removes the partially written file before the
error reaches the caller.  A process crash mid-write can still leave a
partial file behind.
"""

from __future__ import annotations

import json
import logging
import tarfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from chartpack.config import PackConfig, config
from chartpack.core.gzip_stream import GzipStreamWriter
from chartpack.core.names import validate_name
from chartpack.core.tar_writer import join_entry, write_to_tar
from chartpack.errors import (
    ChartFilesystemError,
    ChartPackError,
    ChartValidationError,
    DependencyError,
    DestinationConflictError,
    MalformedSchemaError,
)
from chartpack.models.chart import Chart

logger = logging.getLogger(__name__)

CHARTFILE_NAME = "Chart.yaml"
LOCKFILE_NAME = "Chart.lock"
VALUESFILE_NAME = "values.yaml"
SCHEMAFILE_NAME = "values.schema.json"
CHARTS_DIR = "charts"

# Informational marker carried in the gzip FEXTRA field, never in content.
HEADER_BYTES = b"+aHR0cHM6Ly95b3V0dS5iZS96OVV6MWljandyTQo="
HEADER_COMMENT = "Helm"


def archive_filename(chart: Chart) -> str:
    """Canonical archive filename, ``<name>-<version>.tgz``."""
    return f"{chart.name}-{chart.version}.tgz"


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------

def save(
    chart: Chart,
    out_dir: Path | str,
    *,
    settings: PackConfig | None = None,
) -> Path:
    """Write ``chart`` as ``<out_dir>/<name>-<version>.tgz``.

    If the directory is ``/foo`` and the chart is ``bar`` at ``1.0.0`` this
    produces ``/foo/bar-1.0.0.tgz``.  ``out_dir`` is created when missing.

    Returns the absolute path of the archive.  On any failure the archive
    file is removed before the error is raised.
    """
    settings = settings or config

    validate_name(chart.name)
    try:
        chart.validate_chart()
    except ChartValidationError as exc:
        raise ChartValidationError(f"chart validation: {exc}") from exc

    filename = Path(out_dir) / archive_filename(chart)
    _ensure_output_dir(filename.parent, settings)

    with _archive_stream(filename, settings) as out:
        write_tar_contents(out, chart)

    logger.info("Saved chart %s-%s to %s", chart.name, chart.version, filename)
    return filename.absolute()


def _ensure_output_dir(directory: Path, settings: PackConfig) -> None:
    try:
        if directory.exists():
            if not directory.is_dir():
                raise DestinationConflictError(directory)
            return
        directory.mkdir(mode=settings.dir_mode, parents=True, exist_ok=True)
    except OSError as exc:
        raise ChartFilesystemError(f"preparing {directory}: {exc}") from exc


@contextmanager
def _archive_stream(filename: Path, settings: PackConfig) -> Iterator[tarfile.TarFile]:
    """Yield a tar writer over a gzip layer over ``filename``.

    Created -> Writing -> Committed (closed, kept) or RolledBack (closed,
    deleted).
    """
    try:
        fh = filename.open("wb")
    except OSError as exc:
        raise ChartFilesystemError(f"creating {filename}: {exc}") from exc

    layers: list[Any] = [fh]
    try:
        zipper = GzipStreamWriter(
            fh,
            extra=HEADER_BYTES,
            comment=HEADER_COMMENT,
            compresslevel=settings.compress_level,
        )
        layers.insert(0, zipper)
        out = tarfile.open(fileobj=zipper, mode="w|", format=tarfile.PAX_FORMAT)
        layers.insert(0, out)
        yield out
    except BaseException as exc:
        _close_quietly(layers, filename)
        _discard(filename)
        if isinstance(exc, OSError):
            raise ChartFilesystemError(f"writing {filename}: {exc}") from exc
        raise

    try:
        _close_all(layers)
    except OSError as exc:
        _discard(filename)
        raise ChartFilesystemError(f"closing {filename}: {exc}") from exc


def _close_all(layers: list[Any]) -> None:
    """Close ``layers`` inner to outer, raising the first error after all ran."""
    first_error: OSError | None = None
    for layer in layers:
        try:
            layer.close()
        except OSError as exc:
            if first_error is None:
                first_error = exc
    if first_error is not None:
        raise first_error


def _close_quietly(layers: list[Any], filename: Path) -> None:
    try:
        _close_all(layers)
    except OSError as exc:
        logger.warning("Error closing %s during rollback: %s", filename, exc)


def _discard(filename: Path) -> None:
    try:
        filename.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove partial archive %s: %s", filename, exc)
    else:
        logger.warning("Rolled back partial archive %s", filename)


# ---------------------------------------------------------------------------
# Recursive flattening
# ---------------------------------------------------------------------------

def write_tar_contents(out: tarfile.TarFile, chart: Chart, prefix: str = "") -> None:
    """Append ``chart`` and all of its dependencies to ``out`` under ``prefix``."""
    validate_name(chart.name)
    base = join_entry(prefix, chart.name)

    # Chart.yaml
    write_to_tar(out, join_entry(base, CHARTFILE_NAME), chart.metadata.to_yaml())

    # Chart.lock
    if chart.lock is not None:
        write_to_tar(out, join_entry(base, LOCKFILE_NAME), chart.lock.to_yaml())

    # values.yaml
    values = chart.raw_file(VALUESFILE_NAME)
    if values is not None:
        write_to_tar(out, join_entry(base, VALUESFILE_NAME), values.data)

    # values.schema.json
    if chart.values_schema is not None:
        schema_path = join_entry(base, SCHEMAFILE_NAME)
        try:
            json.loads(chart.values_schema)
        except ValueError as exc:
            raise MalformedSchemaError(f"invalid JSON in {schema_path}: {exc}") from exc
        write_to_tar(out, schema_path, chart.values_schema)

    for f in chart.templates:
        write_to_tar(out, join_entry(base, f.name), f.data)

    for f in chart.files:
        write_to_tar(out, join_entry(base, f.name), f.data)

    deps_prefix = join_entry(base, CHARTS_DIR)
    for dep in chart.dependencies:
        try:
            write_tar_contents(out, dep, deps_prefix)
        except DependencyError:
            # already qualified by a deeper level
            raise
        except ChartPackError as exc:
            raise DependencyError(dep.full_path(base), exc) from exc
