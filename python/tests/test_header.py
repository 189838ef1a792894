"""Tests for $MeshFormat validation."""

import io

import pytest

from gmshreader import validate_header
from gmshreader.errors import (
    HeaderError,
    MalformedHeader,
    MshDecodeError,
    UnsupportedEncoding,
    UnsupportedVersion,
)


def _header(text):
    return validate_header(io.StringIO(text))


class TestValidateHeader:
    def test_valid_41(self):
        header = _header("$MeshFormat\n4.1 0 8\n$EndMeshFormat\n")
        assert header.version == pytest.approx(4.1)
        assert header.is_ascii is True
        assert header.data_size == 8

    def test_valid_40(self):
        header = _header("$MeshFormat\n4 0 8\n$EndMeshFormat\n")
        assert header.version == 4.0

    def test_header_is_frozen(self):
        header = _header("$MeshFormat\n4.1 0 8\n$EndMeshFormat\n")
        with pytest.raises(AttributeError):
            header.version = 2.2

    def test_leading_whitespace_allowed(self):
        header = _header("\n  $MeshFormat 4.1 0 8 $EndMeshFormat")
        assert header.data_size == 8

    @pytest.mark.parametrize("version", ["3.0", "2.2", "1"])
    def test_old_version_rejected(self, version):
        with pytest.raises(UnsupportedVersion):
            _header(f"$MeshFormat\n{version} 0 8\n$EndMeshFormat\n")

    def test_binary_rejected(self):
        with pytest.raises(UnsupportedEncoding, match="ASCII"):
            _header("$MeshFormat\n4.1 1 8\n$EndMeshFormat\n")

    def test_version_checked_before_encoding(self):
        with pytest.raises(UnsupportedVersion):
            _header("$MeshFormat\n2.2 1 8\n$EndMeshFormat\n")

    def test_missing_start_marker(self):
        with pytest.raises(MalformedHeader, match=r"\$MeshFormat"):
            _header("$Nodes\n4.1 0 8\n")

    def test_missing_end_marker(self):
        with pytest.raises(MalformedHeader, match=r"\$EndMeshFormat"):
            _header("$MeshFormat\n4.1 0 8\n$Nodes\n")

    def test_end_marker_at_end_of_input(self):
        with pytest.raises(MalformedHeader):
            _header("$MeshFormat\n4.1 0 8\n")

    def test_empty_input(self):
        with pytest.raises(MalformedHeader):
            _header("")

    def test_non_numeric_version(self):
        with pytest.raises(MalformedHeader):
            _header("$MeshFormat\nfour 0 8\n$EndMeshFormat\n")

    @pytest.mark.parametrize("version", ["nan", "inf", "1e400"])
    def test_non_finite_version(self, version):
        with pytest.raises(MalformedHeader):
            _header(f"$MeshFormat\n{version} 0 8\n$EndMeshFormat\n")

    def test_error_hierarchy(self):
        for cls in (MalformedHeader, UnsupportedVersion, UnsupportedEncoding):
            assert issubclass(cls, HeaderError)
            assert issubclass(cls, MshDecodeError)
            assert issubclass(cls, ValueError)
