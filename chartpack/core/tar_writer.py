"""Single-entry writer for chart archives."""

from __future__ import annotations

import io
import logging
import os
import posixpath
import tarfile
import time

logger = logging.getLogger(__name__)

ENTRY_MODE = 0o644


def to_slash(name: str) -> str:
    """Convert host path separators in ``name`` to forward slashes."""
    for sep in (os.sep, os.altsep):
        if sep and sep != "/":
            name = name.replace(sep, "/")
    return name


def relative_entry(name: str) -> str:
    """Return ``name`` with host separators converted and leading slashes removed."""
    return to_slash(name).lstrip("/")


def join_entry(*parts: str) -> str:
    """Join archive path segments and clean the result.

    Empty segments are skipped so a root chart (empty prefix) lands at
    ``<name>/...``.  Every segment after the first is made relative, so an
    absolute file name stays under the chart directory.
    """
    first, *rest = [p for p in parts if p]
    joined = posixpath.join(to_slash(first), *(relative_entry(p) for p in rest))
    return posixpath.normpath(joined)


def write_to_tar(out: tarfile.TarFile, name: str, body: bytes) -> None:
    """Append ``body`` to ``out`` as one regular-file entry called ``name``.

    The header and payload go through a single ``addfile`` call; if either
    half fails the error propagates and the archive must be discarded.
    """
    info = tarfile.TarInfo(name=to_slash(name))
    info.type = tarfile.REGTYPE
    info.mode = ENTRY_MODE
    info.size = len(body)
    info.mtime = int(time.time())
    out.addfile(info, io.BytesIO(body))
    logger.debug("tar entry %s (%d bytes)", info.name, info.size)
