"""Tests for gmshreader.tokens TokenStream."""

import io

import numpy as np
import pytest

from gmshreader.errors import InvalidToken, MissingSection, TruncatedStream
from gmshreader.tokens import TokenStream


def _stream(text):
    return TokenStream(io.StringIO(text))


def test_tokens_span_lines():
    tokens = _stream("1 2\n\n3\n  4 5  \n")
    np.testing.assert_array_equal(tokens.read_ints(4), [1, 2, 3, 4])
    assert tokens.read_int() == 5


def test_read_floats():
    tokens = _stream("0.5 -1e-3\n2\n")
    np.testing.assert_allclose(tokens.read_floats(3), [0.5, -1e-3, 2.0])


def test_read_zero_values():
    tokens = _stream("")
    assert len(tokens.read_ints(0)) == 0


def test_truncated_read_raises():
    tokens = _stream("1 2\n")
    with pytest.raises(TruncatedStream, match="got 2 of 3"):
        tokens.read_ints(3, "node tags")


def test_truncated_single_token():
    tokens = _stream("")
    with pytest.raises(TruncatedStream):
        tokens.read_int()


def test_invalid_int():
    tokens = _stream("1 x\n")
    tokens.read_int()
    with pytest.raises(InvalidToken, match="line 1"):
        tokens.read_int("node tag")


def test_invalid_float_in_bulk_read():
    tokens = _stream("0.0 abc 1.0\n")
    with pytest.raises(InvalidToken):
        tokens.read_floats(3)


def test_skip_to_marker_drops_rest_of_line():
    tokens = _stream("1 2 3\n$Entities\n$Nodes\n7\n")
    assert tokens.read_int() == 1
    tokens.skip_to_marker("$Nodes")
    assert tokens.read_int() == 7


def test_skip_to_marker_handles_crlf():
    tokens = _stream("junk\r\n$Elements\r\n4\r\n")
    tokens.skip_to_marker("$Elements")
    assert tokens.read_int() == 4


def test_missing_marker():
    tokens = _stream("$Nodes\n1\n")
    with pytest.raises(MissingSection, match=r"\$Elements"):
        tokens.skip_to_marker("$Elements")


def test_block_header():
    tokens = _stream("3 12 4 2\n")
    header = tokens.read_block_header("$Elements")
    assert header == (3, 12, 4, 2)
    assert header.flag == 4
    assert header.size == 2


def test_negative_block_size_rejected():
    tokens = _stream("0 1 0 -1\n")
    with pytest.raises(InvalidToken, match="Negative size"):
        tokens.read_block_header("$Nodes")


def test_negative_section_count_rejected():
    tokens = _stream("-1 0 0 0\n")
    with pytest.raises(InvalidToken, match="Negative count"):
        tokens.read_section_header("$Elements")


def test_section_header():
    tokens = _stream("2 5 1 5\n")
    assert tokens.read_section_header("$Nodes") == (2, 5, 1, 5)


@pytest.mark.parametrize("token", ["1_0", "0x1f", "+", "1.5"])
def test_python_only_int_forms_rejected(token):
    with pytest.raises(InvalidToken):
        _stream(f"{token}\n").read_int()
    with pytest.raises(InvalidToken):
        _stream(f"{token}\n").read_ints(1)


@pytest.mark.parametrize("token", ["nan", "inf", "-Infinity", "1_0.5", "1e400"])
def test_non_finite_floats_rejected(token):
    with pytest.raises(InvalidToken):
        _stream(f"{token}\n").read_float()
    with pytest.raises(InvalidToken):
        _stream(f"0 {token} 1\n").read_floats(3)


def test_plain_float_forms_accepted():
    tokens = _stream("1 -2. .5 +3e-2 1E+02\n")
    np.testing.assert_allclose(tokens.read_floats(5), [1.0, -2.0, 0.5, 0.03, 100.0])


def test_int64_overflow_rejected():
    with pytest.raises(InvalidToken, match="int64"):
        _stream("99999999999999999999\n").read_ints(1)
