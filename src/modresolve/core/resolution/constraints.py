"""Domain values and directed compatibility constraints.

A resolution attempt keeps, per module id, a *domain*: the set of
``PossibleVersion`` values still in play. Each declared dependency edge
between two ids becomes one ``Constraint`` relating the two domains.

Constraint semantics
--------------------
For an edge ``from_id -> to_id`` the constraint maps each concrete version
of ``from_id`` that declares the dependency to its ``CompatibleVersions``.
A ``from_id`` version with no entry places no restriction on ``to_id``, and
neither does the ``ABSENT`` value of ``from_id``: a module that is not
installed requires nothing.

Evaluation is directional and runs in two passes (see ``constrain_to`` and
``constrain_from``), because a dependant restricts which versions of its
dependency are acceptable while the dependency's availability restricts
which versions of the dependant remain viable.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from functools import total_ordering
from types import MappingProxyType

from modresolve.core.naming import Name, Version, VersionRange


# ---------------------------------------------------------------------------
# PossibleVersion: A candidate value in a module's domain
# ---------------------------------------------------------------------------


@total_ordering
@dataclass(frozen=True)
class PossibleVersion:
    """A candidate for a module: either a concrete version or ``ABSENT``.

    ``ABSENT`` means the module could simply not be part of the result, and
    sorts below every concrete version so it is never preferred when
    picking the latest candidate.
    """

    version: Version | None = None

    @property
    def is_absent(self) -> bool:
        return self.version is None

    def __lt__(self, other: PossibleVersion) -> bool:
        if not isinstance(other, PossibleVersion):
            return NotImplemented
        if other.version is None:
            return False
        if self.version is None:
            return True
        return self.version < other.version

    def __str__(self) -> str:
        return "<absent>" if self.version is None else str(self.version)


ABSENT = PossibleVersion()


# ---------------------------------------------------------------------------
# CompatibleVersions: What one dependant version accepts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompatibleVersions:
    """The dependency versions acceptable to one version of a dependant.

    Attributes:
        version_range: Range a concrete dependency version must fall in.
        missing_allowed: Whether the dependency may be ``ABSENT``.
    """

    version_range: VersionRange
    missing_allowed: bool

    def is_compatible(self, candidate: PossibleVersion) -> bool:
        if candidate.version is None:
            return self.missing_allowed
        return self.version_range.contains(candidate.version)


# ---------------------------------------------------------------------------
# Constraint: A directed edge between two domains
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Constraint:
    """Compatibility between the domains of a dependant and a dependency.

    Equality and hashing use only the ``(from_id, to_id)`` edge, so a
    deduplicating work queue holds at most one entry per edge.

    Attributes:
        from_id: The dependant module id.
        to_id: The dependency module id.
        compatibilities: Concrete dependant version -> accepted dependency
            versions. Dependant versions without an entry are unconstrained.
    """

    from_id: Name
    to_id: Name
    compatibilities: Mapping[Version, CompatibleVersions] = field(
        default_factory=dict, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "compatibilities", MappingProxyType(dict(self.compatibilities))
        )

    def _supports(self, dependant: PossibleVersion, dependency: PossibleVersion) -> bool:
        if dependant.version is None:
            return True
        compatibility = self.compatibilities.get(dependant.version)
        return compatibility is None or compatibility.is_compatible(dependency)

    def constrain_to(
        self,
        from_versions: Collection[PossibleVersion],
        to_versions: set[PossibleVersion],
    ) -> bool:
        """Remove dependency candidates that no dependant candidate accepts.

        Example: if ``core-1.0.0`` depends on ``child [1.0.0,2.0.0)``, then
        ``child-3.0.0`` is removed unless some other remaining version of
        ``core`` accepts it, or does not depend on ``child`` at all.

        Args:
            from_versions: Domain of ``from_id``. Read only.
            to_versions: Domain of ``to_id``. Narrowed in place.

        Returns:
            Whether ``to_versions`` changed.
        """
        invalid = [
            candidate
            for candidate in to_versions
            if not any(self._supports(dependant, candidate) for dependant in from_versions)
        ]
        to_versions.difference_update(invalid)
        return bool(invalid)

    def constrain_from(
        self,
        from_versions: set[PossibleVersion],
        to_versions: Collection[PossibleVersion],
    ) -> bool:
        """Remove dependant candidates whose dependency cannot be satisfied.

        Args:
            from_versions: Domain of ``from_id``. Narrowed in place.
            to_versions: Domain of ``to_id``. Read only.

        Returns:
            Whether ``from_versions`` changed.
        """
        invalid = []
        for candidate in from_versions:
            if candidate.version is None:
                continue
            compatibility = self.compatibilities.get(candidate.version)
            if compatibility is None:
                continue
            if not any(compatibility.is_compatible(dependency) for dependency in to_versions):
                invalid.append(candidate)
        from_versions.difference_update(invalid)
        return bool(invalid)

    def __str__(self) -> str:
        return f"{self.from_id}==>{self.to_id}"
