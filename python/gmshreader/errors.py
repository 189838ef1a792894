"""Error taxonomy and consistency records for MSH decoding.

Every fatal condition derives from :class:`MshDecodeError` (a ``ValueError``),
so callers can catch a single type.  Advisory conditions are not exceptions:
they are recorded as :class:`TagRangeMismatch` / :class:`CountMismatch`
entries on the decoded mesh.
"""

from __future__ import annotations

from dataclasses import dataclass


class MshDecodeError(ValueError):
    """Base class for all fatal MSH decoding errors."""


class HeaderError(MshDecodeError):
    """The ``$MeshFormat`` section failed validation."""


class MalformedHeader(HeaderError):
    pass


class UnsupportedVersion(HeaderError):
    pass


class UnsupportedEncoding(HeaderError):
    pass


class UnknownElementType(MshDecodeError):
    """An element type code outside the supported table."""

    def __init__(self, code: int, message: str | None = None):
        self.code = code
        super().__init__(message or f"Unknown Gmsh element type {code}")


class DanglingNodeReference(MshDecodeError):
    """An element references a node tag with no allocated slot."""

    def __init__(self, tag: int, message: str | None = None):
        self.tag = tag
        super().__init__(message or f"Element references undefined node tag {tag}")


class TruncatedStream(MshDecodeError):
    """Input ended while more tokens were required."""


class MissingSection(TruncatedStream):
    """Input ended before a required section marker was found."""


class InvalidToken(MshDecodeError):
    """A token could not be read as the expected number."""


class ConsistencyError(MshDecodeError):
    """A consistency check failed while running in strict mode."""


@dataclass(frozen=True)
class TagRangeMismatch:
    """Declared min/max tags of a section disagree with the tags observed."""

    section: str
    declared_min: int
    declared_max: int
    observed_min: int | None
    observed_max: int | None

    def __str__(self) -> str:
        return (
            f"Min/Max {self.section} tags reported in section header are wrong: "
            f"({self.declared_min}/{self.declared_max}) != "
            f"({self.observed_min}/{self.observed_max})"
        )


@dataclass(frozen=True)
class CountMismatch:
    """Declared total of a section disagrees with the number of entries read."""

    section: str
    declared: int
    observed: int

    def __str__(self) -> str:
        return (
            f"Section {self.section} declares {self.declared} entries "
            f"but {self.observed} were read"
        )
