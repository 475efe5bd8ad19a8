"""Chartpack: writes in-memory charts to directories and ``.tgz`` archives.

Two output forms:
  - ``save``: one gzip-compressed tar stream, dependencies flattened in
  - ``save_dir``: a directory tree, each dependency as its own archive
"""

__version__ = "0.1.0"
__description__ = "Chart packaging: directory and archive writers for chart trees"

from chartpack.core.archive import save, write_tar_contents
from chartpack.core.chartfile import save_chartfile
from chartpack.core.directory import save_dir
from chartpack.core.names import validate_name
from chartpack.errors import (
    ArchiveFormatError,
    ChartFilesystemError,
    ChartPackError,
    ChartValidationError,
    DependencyError,
    DestinationConflictError,
    InvalidChartNameError,
    MalformedSchemaError,
)
from chartpack.models.chart import Chart, ChartFile, Dependency, Lock, Maintainer, Metadata

__all__ = [
    "__version__",
    # writers
    "save",
    "save_dir",
    "save_chartfile",
    "validate_name",
    "write_tar_contents",
    # models
    "Chart",
    "ChartFile",
    "Dependency",
    "Lock",
    "Maintainer",
    "Metadata",
    # errors
    "ArchiveFormatError",
    "ChartFilesystemError",
    "ChartPackError",
    "ChartValidationError",
    "DependencyError",
    "DestinationConflictError",
    "InvalidChartNameError",
    "MalformedSchemaError",
]
