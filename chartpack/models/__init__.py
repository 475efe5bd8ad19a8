"""Chartpack data models — all Pydantic v2, all frozen (immutable)."""

from chartpack.models.chart import (
    CHART_TYPES,
    Chart,
    ChartFile,
    Dependency,
    Lock,
    Maintainer,
    Metadata,
)

__all__ = [
    "CHART_TYPES",
    "Chart",
    "ChartFile",
    "Dependency",
    "Lock",
    "Maintainer",
    "Metadata",
]
