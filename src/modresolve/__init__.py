"""modresolve: Version resolution for versioned module dependency graphs."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from modresolve.core.module import (
    DependencyInfo,
    Module,
    ModuleRegistry,
    TableModuleRegistry,
)
from modresolve.core.naming import Name, Version, VersionRange
from modresolve.core.resolution import (
    DependencyResolver,
    OptionalResolutionStrategy,
    ResolutionBuilder,
    ResolutionResult,
)
from modresolve.exceptions import (
    ModResolveError,
    RegistryContractError,
    ResolutionError,
    VersionParseError,
)

__all__ = [
    "DependencyInfo",
    "DependencyResolver",
    "ModResolveError",
    "Module",
    "ModuleRegistry",
    "Name",
    "OptionalResolutionStrategy",
    "RegistryContractError",
    "ResolutionBuilder",
    "ResolutionError",
    "ResolutionResult",
    "TableModuleRegistry",
    "Version",
    "VersionParseError",
    "VersionRange",
]
