"""Tests for validate_name — single path segment only."""

from __future__ import annotations

import pytest

from chartpack.core.names import validate_name
from chartpack.errors import ChartPackError, InvalidChartNameError


class TestValidateName:
    @pytest.mark.parametrize(
        "name", ["web", "my-chart", "chart_1", "a.b", "..hidden", "v1.2.3"]
    )
    def test_single_segment_accepted(self, name: str):
        validate_name(name)

    @pytest.mark.parametrize(
        "name",
        ["", ".", "..", "../evil", "a/b", "/abs", "trailing/", "a\\b", "..\\evil"],
    )
    def test_path_like_rejected(self, name: str):
        with pytest.raises(InvalidChartNameError) as exc_info:
            validate_name(name)
        assert exc_info.value.name == name

    def test_error_is_in_family(self):
        with pytest.raises(ChartPackError):
            validate_name("../evil")

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_name("a/b")
