"""Error taxonomy for chart packaging.

Every error raised by ``save`` / ``save_dir`` derives from ``ChartPackError``
so callers can catch the whole family with one clause.  Filesystem failures
are wrapped rather than leaked as bare ``OSError`` so the message always
names the path involved; the original error stays on ``__cause__``.
"""

from __future__ import annotations


class ChartPackError(RuntimeError):
    """Base class for all chart packaging failures."""


class InvalidChartNameError(ChartPackError, ValueError):
    """Raised when a chart name would change the location it is written to."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"chart name {name!r} is invalid: it must be a single path segment")


class DestinationConflictError(ChartPackError):
    """Raised when an output path exists and is not a directory."""

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"file {path} already exists and is not a directory")


class ChartFilesystemError(ChartPackError):
    """Raised when creating, writing, or closing an output path fails."""


class MalformedSchemaError(ChartPackError, ValueError):
    """Raised when a chart's values schema is not well-formed JSON."""


class ChartValidationError(ChartPackError, ValueError):
    """Raised when a chart fails its structural validation."""


class ArchiveFormatError(ChartPackError, ValueError):
    """Raised when a file does not look like a gzip-compressed chart archive."""


class DependencyError(ChartPackError):
    """Raised when writing a nested dependency fails.

    ``chart_path`` is the dependency's fully qualified path
    (``parent/charts/child``); the failure it wraps is on ``__cause__``.
    """

    def __init__(self, chart_path: str, cause: BaseException) -> None:
        self.chart_path = chart_path
        super().__init__(f"saving {chart_path}: {cause}")
