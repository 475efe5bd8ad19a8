"""Directory materialization of a chart.

Layout under ``dest``::

    <name>/
        Chart.yaml
        values.yaml                  (when present)
        values.schema.json           (when present)
        <templates...>
        <files...>
        charts/<dep>-<version>.tgz   (one archive per dependency)

Dependencies are not expanded into nested directories: each one is written
as an independent archive so it can be extracted on its own.

There is no rollback.  A failed call may leave a partially populated
directory, and an existing directory is written into additively (files are
overwritten one by one, nothing is cleared first).
"""

from __future__ import annotations

import logging
from pathlib import Path

from chartpack.config import PackConfig, config
from chartpack.core.archive import (
    CHARTFILE_NAME,
    CHARTS_DIR,
    SCHEMAFILE_NAME,
    VALUESFILE_NAME,
    save,
)
from chartpack.core.chartfile import save_chartfile, write_file
from chartpack.core.names import validate_name
from chartpack.core.tar_writer import relative_entry
from chartpack.errors import (
    ChartFilesystemError,
    ChartPackError,
    DependencyError,
    DestinationConflictError,
)
from chartpack.models.chart import Chart

logger = logging.getLogger(__name__)


def save_dir(
    chart: Chart,
    dest: Path | str,
    *,
    settings: PackConfig | None = None,
) -> Path:
    """Write ``chart`` into a new ``<dest>/<name>`` directory.

    Returns the absolute path of the chart directory.
    """
    settings = settings or config

    validate_name(chart.name)
    outdir = Path(dest) / chart.name
    if outdir.exists() and not outdir.is_dir():
        raise DestinationConflictError(outdir)

    try:
        outdir.mkdir(mode=settings.dir_mode, parents=True, exist_ok=True)

        save_chartfile(outdir / CHARTFILE_NAME, chart.metadata, settings=settings)

        values = chart.raw_file(VALUESFILE_NAME)
        if values is not None:
            write_file(outdir / VALUESFILE_NAME, values.data, settings=settings)

        if chart.values_schema is not None:
            write_file(outdir / SCHEMAFILE_NAME, chart.values_schema, settings=settings)

        for group in (chart.templates, chart.files):
            for f in group:
                target = outdir / relative_entry(f.name)
                write_file(target, f.data, settings=settings)
                logger.debug("wrote %s", target)
    except OSError as exc:
        raise ChartFilesystemError(f"writing chart {chart.name} to {outdir}: {exc}") from exc

    # Each dependency becomes its own archive under charts/.
    base = outdir / CHARTS_DIR
    for dep in chart.dependencies:
        try:
            save(dep, base, settings=settings)
        except ChartPackError as exc:
            raise DependencyError(dep.full_path(chart.name), exc) from exc

    logger.info("Saved chart %s to directory %s", chart.name, outdir)
    return outdir.absolute()
