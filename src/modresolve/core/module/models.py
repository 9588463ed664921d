"""Module and dependency-edge data types.

A ``Module`` is one version of a named unit; it declares ``DependencyInfo``
edges on other module ids. Both are immutable once read from a registry and
the resolver only ever reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from modresolve.core.naming import Name, Version, VersionRange


# ---------------------------------------------------------------------------
# DependencyInfo: A declared dependency edge
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DependencyInfo:
    """A dependency on another module, over a half-open version range.

    Represents: "this module version *requires* that module ``id`` is also
    present at some version in ``[min_version, upper_bound)``". An optional
    dependency need not be present, but if it is, its version must still
    fall in the range.

    Attributes:
        id: Id of the module depended on. Plain strings are wrapped in a
            ``Name``.
        min_version: Minimum supported version (inclusive).
        max_version: First unsupported version (exclusive), or None to derive
            it from ``min_version`` (see ``upper_bound``).
        optional: Whether the dependency may be left unsatisfied.
    """

    id: Name
    min_version: Version = Version.DEFAULT
    max_version: Version | None = None
    optional: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", Name.of(self.id))

    @property
    def upper_bound(self) -> Version:
        """The effective exclusive upper bound.

        Defaults to the next major version of ``min_version``, or the next
        minor version while the major version is still 0.
        """
        if self.max_version is not None:
            return self.max_version
        core = self.min_version.core()
        if core.major == 0:
            return core.next_minor()
        return core.next_major()

    def version_range(self) -> VersionRange:
        return VersionRange(self.min_version, self.upper_bound)

    def __str__(self) -> str:
        suffix = " (optional)" if self.optional else ""
        return f"{self.id} {self.version_range()}{suffix}"


# ---------------------------------------------------------------------------
# Module: One version of a module with its declared dependencies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Module:
    """A module at a specific version.

    Identity is the ``(id, version)`` pair: two modules with the same id and
    version compare equal regardless of their declared dependencies.
    """

    id: Name
    version: Version
    dependencies: tuple[DependencyInfo, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", Name.of(self.id))
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    def dependency_info(self, dependency_id: Name | str) -> DependencyInfo | None:
        """Return the first declared dependency on *dependency_id*, if any."""
        dependency_id = Name.of(dependency_id)
        for dependency in self.dependencies:
            if dependency.id == dependency_id:
                return dependency
        return None

    def dependency_ids(self) -> list[Name]:
        """Return the ids this module depends on, in declaration order."""
        seen: dict[Name, None] = {}
        for dependency in self.dependencies:
            seen.setdefault(dependency.id)
        return list(seen)

    def __str__(self) -> str:
        return f"{self.id}-{self.version}"
