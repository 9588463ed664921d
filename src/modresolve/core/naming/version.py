"""Semantic versions and half-open version ranges.

Versions follow SemVer 2.0.0 ordering [SemVer]_ via the ``semantic_version``
library: a version carrying a pre-release tag sorts before the associated
normal version. Any pre-release version is treated as a *snapshot* (a work in
progress build of the release it precedes).

Ranges are half-open, ``[lower, upper)``, and additionally exclude snapshots
of the upper bound, so ``[1.0.0, 2.0.0)`` does not contain ``2.0.0-SNAPSHOT``.

References
----------
.. [SemVer] Preston-Werner, T. (2013). "Semantic Versioning 2.0.0."
   https://semver.org/
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

import semantic_version

from modresolve.exceptions import VersionParseError

SNAPSHOT = "SNAPSHOT"


# ---------------------------------------------------------------------------
# Version: An ordered semantic version value
# ---------------------------------------------------------------------------


@total_ordering
class Version:
    """An immutable semantic version.

    Args:
        version: A version string of the form ``MAJOR.MINOR.PATCH`` with an
            optional pre-release and build suffix, or an already parsed
            ``semantic_version.Version``.

    Raises:
        VersionParseError: If the string is not a valid semantic version.
    """

    __slots__ = ("_semver",)

    DEFAULT: Version

    def __init__(self, version: str | semantic_version.Version) -> None:
        if isinstance(version, semantic_version.Version):
            self._semver = version
            return
        try:
            self._semver = semantic_version.Version(version.strip())
        except (ValueError, AttributeError) as exc:
            raise VersionParseError(
                f"Invalid version {version!r} - must be of the form MAJOR.minor.patch"
            ) from exc

    @classmethod
    def of(cls, major: int, minor: int, patch: int, snapshot: bool = False) -> Version:
        """Build a version from its numeric parts.

        Raises:
            ValueError: If any part is negative.
        """
        if major < 0 or minor < 0 or patch < 0:
            raise ValueError(
                f"Illegal version {major}.{minor}.{patch} - all version parts must be positive"
            )
        prerelease = (SNAPSHOT,) if snapshot else ()
        return cls(
            semantic_version.Version(
                major=major, minor=minor, patch=patch, prerelease=prerelease
            )
        )

    @property
    def major(self) -> int:
        return self._semver.major

    @property
    def minor(self) -> int:
        return self._semver.minor

    @property
    def patch(self) -> int:
        return self._semver.patch

    @property
    def is_snapshot(self) -> bool:
        """Whether this version is a pre-release (not yet released) build."""
        return bool(self._semver.prerelease)

    def core(self) -> Version:
        """Return ``MAJOR.MINOR.PATCH`` with pre-release and build stripped."""
        return Version.of(self.major, self.minor, self.patch)

    def snapshot(self) -> Version:
        return Version.of(self.major, self.minor, self.patch, snapshot=True)

    def next_major(self) -> Version:
        return Version.of(self.major + 1, 0, 0)

    def next_minor(self) -> Version:
        return Version.of(self.major, self.minor + 1, 0)

    def next_patch(self) -> Version:
        return Version.of(self.major, self.minor, self.patch + 1)

    def _identity(self) -> tuple[int, int, int, tuple[str, ...]]:
        # Build metadata takes no part in equality or ordering.
        return self.major, self.minor, self.patch, tuple(self._semver.prerelease or ())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Version):
            return self._identity() == other._identity()
        return NotImplemented

    def __lt__(self, other: Version) -> bool:
        if isinstance(other, Version):
            return self._semver < other._semver
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._identity())

    def __str__(self) -> str:
        return str(self._semver)

    def __repr__(self) -> str:
        return f"Version({str(self._semver)!r})"


Version.DEFAULT = Version.of(1, 0, 0)


# ---------------------------------------------------------------------------
# VersionRange: Half-open [lower, upper) membership predicate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VersionRange:
    """A range of versions from ``lower_bound`` (inclusive) to ``upper_bound``
    (exclusive).

    Instances are callable, so a range can be passed wherever a
    ``Callable[[Version], bool]`` acceptance predicate is expected.

    Attributes:
        lower_bound: Smallest version in the range.
        upper_bound: First version past the range. Its snapshot is also
            outside the range.

    Raises:
        ValueError: If ``lower_bound`` is not strictly below ``upper_bound``.
    """

    lower_bound: Version
    upper_bound: Version

    def __post_init__(self) -> None:
        if not self.lower_bound < self.upper_bound:
            raise ValueError(
                f"upper bound {self.upper_bound} must be greater than "
                f"lower bound {self.lower_bound}"
            )

    def contains(self, version: Version) -> bool:
        """Check whether *version* falls within the range."""
        return self.lower_bound <= version < self.upper_bound.snapshot()

    def __contains__(self, version: object) -> bool:
        return isinstance(version, Version) and self.contains(version)

    def __call__(self, version: Version) -> bool:
        return self.contains(version)

    def __str__(self) -> str:
        return f"[{self.lower_bound},{self.upper_bound})"
