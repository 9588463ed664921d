"""Dependency resolver: the public entry point for resolution.

Determines a working set of modules for a set of requested root modules.
Where several versions are compatible, the latest available is chosen. The
latest version of the requested modules is prioritised, in the order
requested: if using the latest version of the first root prevents using the
latest version of the second, the second gives way.
"""

from __future__ import annotations

from collections.abc import Iterable

from modresolve.core.module import ModuleRegistry
from modresolve.core.naming import Name, Version, VersionRange
from modresolve.core.resolution.attempt import ResolutionAttempt
from modresolve.core.resolution.models import (
    OptionalResolutionStrategy,
    ResolutionResult,
)


class DependencyResolver:
    """Resolves compatible module sets from a ``ModuleRegistry``.

    Each call runs an independent ``ResolutionAttempt``, so one resolver may
    be used from several threads provided the registry tolerates concurrent
    reads.

    Args:
        registry: The registry to resolve modules from.
        optional_strategy: The policy for optional dependencies.
        max_iterations: If given, abort with ``ResolutionError`` after this
            many constraint evaluations in a single attempt.
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        optional_strategy: OptionalResolutionStrategy = OptionalResolutionStrategy.INCLUDE_IF_REQUIRED,
        *,
        max_iterations: int | None = None,
    ) -> None:
        if max_iterations is not None and max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        self._registry = registry
        self._optional_strategy = optional_strategy
        self._max_iterations = max_iterations

    @property
    def optional_strategy(self) -> OptionalResolutionStrategy:
        return self._optional_strategy

    def resolve(self, root_ids: Iterable[Name | str]) -> ResolutionResult:
        """Resolve the latest compatible versions of *root_ids*.

        Args:
            root_ids: Ids of the modules that must be present, any version.

        Returns:
            A ``ResolutionResult``. Unsatisfiable requirements yield
            ``success=False`` rather than an exception.
        """
        return self.builder().require_all(root_ids).build()

    def builder(self) -> ResolutionBuilder:
        """Return a builder for requirements with version restrictions."""
        return ResolutionBuilder(self)

    def _attempt(self) -> ResolutionAttempt:
        return ResolutionAttempt(
            self._registry, self._optional_strategy, self._max_iterations
        )


class ResolutionBuilder:
    """Collects root requirements and performs the resolution.

    Every ``require*`` call replaces any earlier requirement on the same
    module id; the id keeps the position of its first request.
    """

    def __init__(self, resolver: DependencyResolver) -> None:
        self._resolver = resolver
        self._valid_versions: dict[Name, VersionRange | None] = {}

    def require(self, module_id: Name | str) -> ResolutionBuilder:
        """Require *module_id* at any version, preferring the latest."""
        self._valid_versions[Name.of(module_id)] = None
        return self

    def require_all(self, module_ids: Iterable[Name | str]) -> ResolutionBuilder:
        for module_id in module_ids:
            self.require(module_id)
        return self

    def require_version(self, module_id: Name | str, version: Version) -> ResolutionBuilder:
        """Require *module_id* at exactly *version*."""
        self._valid_versions[Name.of(module_id)] = VersionRange(version, version.next_patch())
        return self

    def require_version_range(
        self, module_id: Name | str, version_range: VersionRange
    ) -> ResolutionBuilder:
        """Require *module_id* at a version within *version_range*."""
        self._valid_versions[Name.of(module_id)] = version_range
        return self

    def build(self) -> ResolutionResult:
        """Perform the resolution."""
        return self._resolver._attempt().resolve(dict(self._valid_versions))
