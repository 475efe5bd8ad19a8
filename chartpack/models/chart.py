"""In-memory chart model consumed by the packaging writers.

Charts are built by a loader and only read here.  All models are frozen so
a chart cannot be mutated while it is being written.

Serialized field names follow the on-disk ``Chart.yaml`` / ``Chart.lock``
conventions (camelCase); Python attributes are snake_case.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from chartpack.errors import ChartValidationError

# Lenient semantic version: "1", "1.2", "v1.2.3", "1.2.3-rc.1+build.5"
_VERSION_RE = re.compile(
    r"^v?\d+(\.\d+)?(\.\d+)?(-[0-9A-Za-z.-]+)?(\+[0-9A-Za-z.-]+)?$"
)
_ALIAS_RE = re.compile(r"^[a-zA-Z0-9_-]+$")

CHART_TYPES = ("application", "library")


def _dump_yaml(data: dict[str, Any]) -> bytes:
    return yaml.safe_dump(
        data, sort_keys=True, default_flow_style=False, allow_unicode=True
    ).encode("utf-8")


# ---------------------------------------------------------------------------
# Chart.yaml
# ---------------------------------------------------------------------------

class Maintainer(BaseModel):
    """A chart maintainer entry."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str | None = None
    url: str | None = None


class Dependency(BaseModel):
    """A dependency declaration as it appears in ``Chart.yaml`` and ``Chart.lock``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    version: str | None = None
    repository: str | None = None
    condition: str | None = None
    tags: list[str] | None = None
    enabled: bool | None = None
    import_values: list[Any] | None = Field(default=None, alias="import-values")
    alias: str | None = None

    def validate_dependency(self) -> None:
        if not self.name:
            raise ChartValidationError("dependencies must have a name")
        if self.alias is not None and not _ALIAS_RE.match(self.alias):
            raise ChartValidationError(
                f"dependency {self.name!r} has disallowed characters in the alias"
            )


class Metadata(BaseModel):
    """The chart descriptor serialized as ``Chart.yaml``.

    Examples
    --------
    >>> md = Metadata(api_version="v2", name="web", version="1.0.0")
    >>> md.to_yaml().decode().splitlines()[0]
    'apiVersion: v2'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_version: str = Field(default="", alias="apiVersion")
    name: str = ""
    version: str = ""
    kube_version: str | None = Field(default=None, alias="kubeVersion")
    description: str | None = None
    type: str | None = None
    keywords: list[str] | None = None
    home: str | None = None
    sources: list[str] | None = None
    dependencies: list[Dependency] | None = None
    maintainers: list[Maintainer] | None = None
    icon: str | None = None
    app_version: str | None = Field(default=None, alias="appVersion")
    deprecated: bool | None = None
    annotations: dict[str, str] | None = None

    def validate_metadata(self) -> None:
        """Structural checks on the descriptor.

        The name-shape check is not repeated here; the writers apply
        ``validate_name`` to every chart they touch.
        """
        if not self.api_version:
            raise ChartValidationError("chart.metadata.apiVersion is required")
        if not self.name:
            raise ChartValidationError("chart.metadata.name is required")
        if not self.version:
            raise ChartValidationError("chart.metadata.version is required")
        if not _VERSION_RE.match(self.version):
            raise ChartValidationError(
                f"chart.metadata.version {self.version!r} is invalid"
            )
        if self.type and self.type not in CHART_TYPES:
            raise ChartValidationError(
                f"chart.metadata.type must be one of {', '.join(CHART_TYPES)}"
            )
        for dep in self.dependencies or []:
            dep.validate_dependency()

    def to_yaml(self) -> bytes:
        return _dump_yaml(
            self.model_dump(mode="json", by_alias=True, exclude_none=True)
        )


# ---------------------------------------------------------------------------
# Chart.lock
# ---------------------------------------------------------------------------

class Lock(BaseModel):
    """Resolved dependency versions, serialized as ``Chart.lock``."""

    model_config = ConfigDict(frozen=True)

    generated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    digest: str = ""
    dependencies: list[Dependency] = Field(default_factory=list)

    def to_yaml(self) -> bytes:
        return _dump_yaml(
            self.model_dump(mode="json", by_alias=True, exclude_none=True)
        )


# ---------------------------------------------------------------------------
# Chart
# ---------------------------------------------------------------------------

class ChartFile(BaseModel):
    """A file carried by a chart; ``name`` is relative to the chart root."""

    model_config = ConfigDict(frozen=True)

    name: str
    data: bytes = b""


class Chart(BaseModel):
    """A chart and, recursively, its bundled dependencies.

    ``raw`` holds the files as loaded (including ``values.yaml`` when the
    chart has one).  ``dependencies`` are complete sub-charts, kept in
    declaration order.
    """

    model_config = ConfigDict(frozen=True)

    metadata: Metadata
    lock: Lock | None = None
    raw: list[ChartFile] = Field(default_factory=list)
    values_schema: bytes | None = None
    templates: list[ChartFile] = Field(default_factory=list)
    files: list[ChartFile] = Field(default_factory=list)
    dependencies: list[Chart] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def version(self) -> str:
        return self.metadata.version

    def raw_file(self, name: str) -> ChartFile | None:
        """Return the first raw file called ``name``, if any."""
        for f in self.raw:
            if f.name == name:
                return f
        return None

    def full_path(self, parent_path: str = "") -> str:
        """Fully qualified chart path, e.g. ``web/charts/redis``."""
        if not parent_path:
            return self.name
        return f"{parent_path}/charts/{self.name}"

    def validate_chart(self) -> None:
        """Run the structural checks a chart must pass before packaging."""
        self.metadata.validate_metadata()


Chart.model_rebuild()
