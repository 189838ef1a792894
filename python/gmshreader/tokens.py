"""Whitespace token stream over line-oriented MSH text."""

from __future__ import annotations

import math
import re
from collections import deque
from typing import Iterable, NamedTuple

import numpy as np

from gmshreader.errors import InvalidToken, MissingSection, TruncatedStream

# Plain decimal forms only; no digit separators, inf or nan.
_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


class EntityBlockHeader(NamedTuple):
    """Leading four integers of a ``$Nodes`` or ``$Elements`` entity block.

    ``flag`` is the parametric flag for node blocks and the element type
    code for element blocks.
    """

    dim: int
    entity_tag: int
    flag: int
    size: int


class TokenStream:
    """Reads whitespace-delimited tokens and section markers from text lines.

    Tokens may span any number of lines; marker searches work on whole
    lines.  Any iterable of strings works as the source, typically an open
    text file or ``io.StringIO``.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines = iter(lines)
        self._pending: deque[str] = deque()
        self.line_number = 0

    def _fill(self) -> bool:
        while not self._pending:
            line = next(self._lines, None)
            if line is None:
                return False
            self.line_number += 1
            self._pending.extend(line.split())
        return True

    def next_token(self, what: str = "token") -> str:
        if not self._fill():
            raise TruncatedStream(
                f"Unexpected end of input while reading {what} "
                f"(after line {self.line_number})"
            )
        return self._pending.popleft()

    def read_int(self, what: str = "integer") -> int:
        token = self.next_token(what)
        if not _INT_RE.fullmatch(token):
            raise InvalidToken(
                f"Expected {what} on line {self.line_number}, got {token!r}"
            )
        return int(token)

    def read_float(self, what: str = "number") -> float:
        token = self.next_token(what)
        if not _FLOAT_RE.fullmatch(token):
            raise InvalidToken(
                f"Expected {what} on line {self.line_number}, got {token!r}"
            )
        value = float(token)
        if not math.isfinite(value):
            raise InvalidToken(
                f"{what} out of range on line {self.line_number}: {token!r}"
            )
        return value

    def _take(self, count: int, what: str) -> list[str]:
        out = []
        while len(out) < count:
            if not self._fill():
                raise TruncatedStream(
                    f"Unexpected end of input while reading {what}: "
                    f"got {len(out)} of {count} values (after line {self.line_number})"
                )
            need = count - len(out)
            if len(self._pending) <= need:
                out.extend(self._pending)
                self._pending.clear()
            else:
                out.extend(self._pending.popleft() for _ in range(need))
        return out

    def _check_all(self, raw: list[str], pattern: re.Pattern, count: int,
                   what: str) -> None:
        for token in raw:
            if not pattern.fullmatch(token):
                raise InvalidToken(
                    f"Expected {count} {what} ending on line {self.line_number}, "
                    f"got {token!r}"
                )

    def read_ints(self, count: int, what: str = "integers") -> np.ndarray:
        """Read *count* integers into an int64 array."""
        raw = self._take(count, what)
        self._check_all(raw, _INT_RE, count, what)
        try:
            return np.array([int(t) for t in raw], dtype=np.int64)
        except OverflowError:
            raise InvalidToken(
                f"{what} out of int64 range ending on line {self.line_number}"
            ) from None

    def read_floats(self, count: int, what: str = "numbers") -> np.ndarray:
        """Read *count* floating-point values into a float64 array.

        Values that overflow to infinity are rejected.
        """
        raw = self._take(count, what)
        self._check_all(raw, _FLOAT_RE, count, what)
        values = np.array([float(t) for t in raw], dtype=np.float64)
        if not np.isfinite(values).all():
            raise InvalidToken(
                f"{what} out of range ending on line {self.line_number}"
            )
        return values

    def read_section_header(self, section: str) -> tuple[int, int, int, int]:
        """Read the four-integer ``$Nodes``/``$Elements`` section header.

        Returns ``(num_blocks, count, min_tag, max_tag)``; the block and
        entry counts must not be negative.
        """
        num_blocks, count, min_tag, max_tag = (
            int(v) for v in self.read_ints(4, f"{section} section header")
        )
        if num_blocks < 0 or count < 0:
            raise InvalidToken(
                f"Negative count in {section} section header on line "
                f"{self.line_number}: {num_blocks} blocks, {count} entries"
            )
        return num_blocks, count, min_tag, max_tag

    def read_block_header(self, section: str) -> EntityBlockHeader:
        header = EntityBlockHeader(
            *(int(v) for v in self.read_ints(4, f"{section} entity block header"))
        )
        if header.size < 0:
            raise InvalidToken(
                f"Negative size {header.size} in {section} entity block header "
                f"on line {self.line_number}"
            )
        return header

    def skip_to_marker(self, marker: str) -> None:
        """Discard input up to and including the line equal to *marker*.

        Tokens left over from the current line are dropped first.
        """
        self._pending.clear()
        for line in self._lines:
            self.line_number += 1
            if line.strip() == marker:
                return
        raise MissingSection(f"Reached end of input before {marker}")
