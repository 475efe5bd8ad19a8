"""Tests for the gzip layer — header fields and stdlib compatibility."""

from __future__ import annotations

import gzip
import io
from pathlib import Path

import pytest

from chartpack.core.gzip_stream import (
    FCOMMENT,
    FEXTRA,
    GzipStreamWriter,
    read_gzip_header,
)
from chartpack.errors import ArchiveFormatError


def _write(path: Path, payload: bytes, **kwargs) -> None:
    with path.open("wb") as fh:
        with GzipStreamWriter(fh, **kwargs) as zipper:
            zipper.write(payload)


class TestGzipStreamWriter:
    def test_stdlib_decompresses(self, tmp_path: Path):
        payload = b"chart data " * 1000
        target = tmp_path / "out.gz"
        _write(target, payload, extra=b"marker", comment="Helm")
        assert gzip.decompress(target.read_bytes()) == payload

    def test_header_fields(self, tmp_path: Path):
        target = tmp_path / "out.gz"
        _write(target, b"x", extra=b"marker", comment="Helm")
        header = read_gzip_header(target)
        assert header.flags == FEXTRA | FCOMMENT
        assert header.extra == b"marker"
        assert header.comment == "Helm"
        assert header.filename is None
        assert header.mtime == 0
        assert header.os == 255

    def test_no_optional_fields(self, tmp_path: Path):
        target = tmp_path / "out.gz"
        _write(target, b"plain")
        header = read_gzip_header(target)
        assert header.flags == 0
        assert header.extra is None
        assert header.comment is None
        assert gzip.decompress(target.read_bytes()) == b"plain"

    def test_best_compression_sets_xfl(self, tmp_path: Path):
        target = tmp_path / "out.gz"
        _write(target, b"abc", compresslevel=9)
        assert read_gzip_header(target).xfl == 2

    def test_many_small_writes(self, tmp_path: Path):
        target = tmp_path / "out.gz"
        with target.open("wb") as fh:
            with GzipStreamWriter(fh) as zipper:
                for i in range(500):
                    zipper.write(f"{i}\n".encode())
        expected = "".join(f"{i}\n" for i in range(500)).encode()
        assert gzip.decompress(target.read_bytes()) == expected

    def test_close_is_idempotent(self):
        buf = io.BytesIO()
        zipper = GzipStreamWriter(buf)
        zipper.close()
        size = len(buf.getvalue())
        zipper.close()
        assert len(buf.getvalue()) == size

    def test_write_after_close(self):
        zipper = GzipStreamWriter(io.BytesIO())
        zipper.close()
        with pytest.raises(ValueError):
            zipper.write(b"late")

    def test_does_not_close_sink(self):
        buf = io.BytesIO()
        GzipStreamWriter(buf).close()
        assert not buf.closed

    def test_rejects_oversized_extra(self):
        with pytest.raises(ValueError):
            GzipStreamWriter(io.BytesIO(), extra=b"x" * 70000)

    def test_rejects_nul_in_comment(self):
        with pytest.raises(ValueError):
            GzipStreamWriter(io.BytesIO(), comment="a\x00b")


class TestReadGzipHeader:
    def test_stdlib_filename_field(self, tmp_path: Path):
        target = tmp_path / "named.gz"
        with target.open("wb") as raw, gzip.GzipFile(
            filename="inner.txt", mode="wb", fileobj=raw
        ) as gz:
            gz.write(b"x")
        assert read_gzip_header(target).filename == "inner.txt"

    def test_not_gzip(self, tmp_path: Path):
        target = tmp_path / "plain.txt"
        target.write_bytes(b"hello world, not gzip")
        with pytest.raises(ArchiveFormatError):
            read_gzip_header(target)

    def test_truncated(self, tmp_path: Path):
        target = tmp_path / "short.gz"
        target.write_bytes(b"\x1f\x8b")
        with pytest.raises(ArchiveFormatError):
            read_gzip_header(target)
