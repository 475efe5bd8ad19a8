"""Chart name validation.

Chart names are joined directly into output paths, so a name that is not a
single path segment could write outside the intended root.
"""

from __future__ import annotations

import posixpath

from chartpack.errors import InvalidChartNameError


def validate_name(name: str) -> None:
    """Raise ``InvalidChartNameError`` unless ``name`` is one path segment.

    Both ``/`` and ``\\`` count as separators regardless of host, and the
    relative segments ``.`` and ``..`` are rejected.
    """
    candidate = name.replace("\\", "/")
    if not name or posixpath.basename(candidate) != name or name in (".", ".."):
        raise InvalidChartNameError(name)
