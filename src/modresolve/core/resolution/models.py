"""Resolution configuration and result types.

Pure data holders with no resolution logic, safe to import from anywhere in
the package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from modresolve.core.module import Module
from modresolve.core.naming import Name, Version


# ---------------------------------------------------------------------------
# OptionalResolutionStrategy: How optional dependencies are treated
# ---------------------------------------------------------------------------


class OptionalResolutionStrategy(Enum):
    """Policy for optional dependencies.

    - ``INCLUDE_IF_REQUIRED``: an optional dependency is only included when
      something else needs it concretely. When a choice remains, absence is
      preferred. ``IGNORE`` is an alias.
    - ``INCLUDE_IF_AVAILABLE``: an optional dependency may be left out, but
      is included whenever a compatible version remains.
    - ``REQUIRE``: optional dependencies are treated as mandatory; a
      missing one fails the resolution. ``FORCE_INCLUDE`` is an alias.
    """

    INCLUDE_IF_REQUIRED = "include_if_required"
    INCLUDE_IF_AVAILABLE = "include_if_available"
    REQUIRE = "require"
    IGNORE = "include_if_required"
    FORCE_INCLUDE = "require"

    @property
    def is_required(self) -> bool:
        """Whether optional dependencies must be present."""
        return self is OptionalResolutionStrategy.REQUIRE

    @property
    def is_desired(self) -> bool:
        """Whether finalization prefers a concrete version over absence."""
        return self is not OptionalResolutionStrategy.INCLUDE_IF_REQUIRED


# ---------------------------------------------------------------------------
# ResolutionResult: The output of one resolution attempt
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolutionResult:
    """Result of dependency resolution.

    A successful result holds exactly one version per selected module id,
    and every non-optional dependency of a selected module is itself
    selected at a version inside the declared range.

    Attributes:
        success: True if a compatible module set was found.
        modules: The selected modules. Empty if resolution failed; a failed
            resolution never carries a partial result.
        conflicts: Human-readable descriptions of why resolution failed.
            Empty if resolution succeeded.
    """

    success: bool
    modules: frozenset[Module] = field(default_factory=frozenset)
    conflicts: tuple[str, ...] = ()

    def versions(self) -> dict[Name, Version]:
        """Return the selected version of each module id."""
        return {module.id: module.version for module in self.modules}

    def get(self, module_id: Name | str) -> Module | None:
        """Return the selected module with the given id, if any."""
        module_id = Name.of(module_id)
        for module in self.modules:
            if module.id == module_id:
                return module
        return None

    def __bool__(self) -> bool:
        return self.success
