"""Module registry: the catalogue of known module versions.

The resolver treats the registry as a read-only collaborator. Only two
queries are needed during resolution, ``get_module_versions`` and
``get_module``; everything else here serves callers that build and inspect
a registry.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Collection, Iterable, Iterator

from modresolve.core.module.models import Module
from modresolve.core.naming import Name, Version

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# ModuleRegistry: Abstract collaborator interface
# ---------------------------------------------------------------------------


class ModuleRegistry(ABC):
    """Enumerates module versions and their dependency metadata.

    Implementations must be safe for concurrent reads if the same registry
    is shared by resolvers running on several threads.
    """

    @abstractmethod
    def get_module_versions(self, module_id: Name) -> Collection[Module]:
        """Return every known version of *module_id*. Empty if unknown."""

    @abstractmethod
    def get_module(self, module_id: Name, version: Version) -> Module | None:
        """Return the module at exactly *version*, or None if not known."""

    @abstractmethod
    def module_ids(self) -> set[Name]:
        """Return the ids of all modules with at least one version."""

    def get_latest_module_version(
        self,
        module_id: Name | str,
        min_version: Version | None = None,
        max_version: Version | None = None,
    ) -> Module | None:
        """Return the most recent version of a module within optional bounds.

        Args:
            module_id: Module to look up.
            min_version: Lower bound (inclusive), or None for no bound.
            max_version: Upper bound (exclusive), or None for no bound.

        Returns:
            The highest matching ``Module``, or None if nothing matches.
        """
        latest: Module | None = None
        for module in self.get_module_versions(Name.of(module_id)):
            if min_version is not None and module.version < min_version:
                continue
            if max_version is not None and module.version >= max_version:
                continue
            if latest is None or module.version > latest.version:
                latest = module
        return latest


# ---------------------------------------------------------------------------
# TableModuleRegistry: In-memory registry keyed by (id, version)
# ---------------------------------------------------------------------------


class TableModuleRegistry(ModuleRegistry):
    """An in-memory registry holding a table of id -> version -> module.

    Supports:
    - Adding modules (multiple versions per id, first registration wins)
    - Removing modules
    - Querying versions per id, newest first
    - Iteration, ``len()`` and membership over all registered modules

    Thread safety: reads are safe to share between threads; mutation
    requires external synchronization.
    """

    def __init__(self, modules: Iterable[Module] = ()) -> None:
        self._modules: dict[Name, dict[Version, Module]] = {}
        self.add_all(modules)

    def add(self, module: Module) -> bool:
        """Register a module.

        Args:
            module: The ``Module`` to add.

        Returns:
            True if added, False if a module with the same id and version is
            already registered (the existing one is kept).
        """
        versions = self._modules.setdefault(module.id, {})
        if module.version in versions:
            logger.debug("Module %s is already registered, ignoring", module)
            return False
        versions[module.version] = module
        return True

    def add_all(self, modules: Iterable[Module]) -> bool:
        changed = False
        for module in modules:
            changed |= self.add(module)
        return changed

    def remove(self, module: Module) -> bool:
        """Unregister a module. Returns whether it was present."""
        versions = self._modules.get(module.id)
        if not versions or module.version not in versions:
            return False
        del versions[module.version]
        if not versions:
            del self._modules[module.id]
        return True

    def get_module_versions(self, module_id: Name) -> list[Module]:
        """Return all versions of a module, sorted descending (newest first)."""
        versions = self._modules.get(Name.of(module_id), {})
        return sorted(versions.values(), key=lambda m: m.version, reverse=True)

    def get_module(self, module_id: Name, version: Version) -> Module | None:
        return self._modules.get(Name.of(module_id), {}).get(version)

    def module_ids(self) -> set[Name]:
        return set(self._modules)

    def __iter__(self) -> Iterator[Module]:
        for versions in self._modules.values():
            yield from versions.values()

    def __len__(self) -> int:
        return sum(len(versions) for versions in self._modules.values())

    def __contains__(self, module: object) -> bool:
        if not isinstance(module, Module):
            return False
        return module.version in self._modules.get(module.id, {})
