"""Gzip compression layer with header metadata.

The standard library ``gzip.GzipFile`` cannot write the optional FEXTRA and
FCOMMENT header fields.  Chart archives carry an informational marker in
those fields, so this module writes the RFC 1952 member framing itself and
delegates the deflate stream and checksum to ``zlib``.

Member layout::

    1f 8b 08 FLG MTIME(4) XFL OS [XLEN(2) EXTRA] [COMMENT 00] DEFLATE CRC32(4) ISIZE(4)
"""

from __future__ import annotations

import struct
import zlib
from pathlib import Path
from typing import BinaryIO

from pydantic import BaseModel, ConfigDict

from chartpack.errors import ArchiveFormatError

GZIP_MAGIC = b"\x1f\x8b"
_METHOD_DEFLATE = 8

FEXTRA = 0x04
FNAME = 0x08
FCOMMENT = 0x10

_OS_UNKNOWN = 255


class GzipHeader(BaseModel):
    """The fixed and optional fields of a gzip member header."""

    model_config = ConfigDict(frozen=True)

    flags: int
    mtime: int
    xfl: int
    os: int
    extra: bytes | None = None
    filename: str | None = None
    comment: str | None = None


class GzipStreamWriter:
    """Write-only, file-like gzip member writer.

    Parameters
    ----------
    fileobj:
        Binary sink the compressed member is written to.  It is not closed
        by ``close()``; the caller owns it.
    extra:
        Raw bytes for the FEXTRA field (at most 65535 bytes).
    comment:
        Latin-1 text for the FCOMMENT field.
    compresslevel:
        zlib compression level, 0-9.
    mtime:
        Header modification time.  Zero means "not available".
    """

    def __init__(
        self,
        fileobj: BinaryIO,
        *,
        extra: bytes = b"",
        comment: str = "",
        compresslevel: int = 6,
        mtime: int = 0,
    ) -> None:
        if len(extra) > 0xFFFF:
            raise ValueError("gzip extra field is limited to 65535 bytes")
        if "\x00" in comment:
            raise ValueError("gzip comment must not contain NUL")
        self._fileobj = fileobj
        self._compressor = zlib.compressobj(
            compresslevel, zlib.DEFLATED, -zlib.MAX_WBITS, zlib.DEF_MEM_LEVEL, 0
        )
        self._crc = 0
        self._size = 0
        self.closed = False
        self._write_header(extra, comment.encode("latin-1"), compresslevel, mtime)

    def _write_header(
        self, extra: bytes, comment: bytes, compresslevel: int, mtime: int
    ) -> None:
        flags = 0
        if extra:
            flags |= FEXTRA
        if comment:
            flags |= FCOMMENT

        if compresslevel == zlib.Z_BEST_COMPRESSION:
            xfl = 2
        elif compresslevel == zlib.Z_BEST_SPEED:
            xfl = 4
        else:
            xfl = 0

        header = GZIP_MAGIC + struct.pack(
            "<BBIBB", _METHOD_DEFLATE, flags, mtime & 0xFFFFFFFF, xfl, _OS_UNKNOWN
        )
        if extra:
            header += struct.pack("<H", len(extra)) + extra
        if comment:
            header += comment + b"\x00"
        self._fileobj.write(header)

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed gzip stream")
        view = memoryview(data)
        self._crc = zlib.crc32(view, self._crc)
        self._size += view.nbytes
        chunk = self._compressor.compress(view)
        if chunk:
            self._fileobj.write(chunk)
        return view.nbytes

    def close(self) -> None:
        """Finish the deflate stream and write the CRC32/ISIZE trailer."""
        if self.closed:
            return
        self.closed = True
        self._fileobj.write(self._compressor.flush())
        self._fileobj.write(
            struct.pack("<II", self._crc & 0xFFFFFFFF, self._size & 0xFFFFFFFF)
        )

    def __enter__(self) -> GzipStreamWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Header readback
# ---------------------------------------------------------------------------

def _read_exact(fh: BinaryIO, n: int, path: Path) -> bytes:
    data = fh.read(n)
    if len(data) != n:
        raise ArchiveFormatError(f"{path}: truncated gzip header")
    return data


def _read_zero_terminated(fh: BinaryIO, path: Path) -> bytes:
    buf = bytearray()
    while True:
        b = _read_exact(fh, 1, path)
        if b == b"\x00":
            return bytes(buf)
        buf += b


def read_gzip_header(path: Path | str) -> GzipHeader:
    """Parse the header of the first gzip member in ``path``.

    Only the header is read; the compressed body is not touched.
    """
    path = Path(path)
    with path.open("rb") as fh:
        fixed = fh.read(10)
        if len(fixed) != 10 or fixed[:2] != GZIP_MAGIC:
            raise ArchiveFormatError(f"{path}: not a gzip stream")
        method, flags, mtime, xfl, os_byte = struct.unpack("<BBIBB", fixed[2:])
        if method != _METHOD_DEFLATE:
            raise ArchiveFormatError(f"{path}: unsupported compression method {method}")

        extra = filename = comment = None
        if flags & FEXTRA:
            (xlen,) = struct.unpack("<H", _read_exact(fh, 2, path))
            extra = _read_exact(fh, xlen, path)
        if flags & FNAME:
            filename = _read_zero_terminated(fh, path).decode("latin-1")
        if flags & FCOMMENT:
            comment = _read_zero_terminated(fh, path).decode("latin-1")

    return GzipHeader(
        flags=flags,
        mtime=mtime,
        xfl=xfl,
        os=os_byte,
        extra=extra,
        filename=filename,
        comment=comment,
    )
