"""Tests for edge cases: cycles, shared roots, registry contract violations,
the iteration bound, determinism and concurrent use.
"""

from __future__ import annotations

from collections.abc import Collection
from concurrent.futures import ThreadPoolExecutor

import pytest

from modresolve.core.module import DependencyInfo, Module, TableModuleRegistry
from modresolve.core.naming import Name, Version
from modresolve.core.resolution import DependencyResolver, ResolutionResult
from modresolve.exceptions import RegistryContractError, ResolutionError


def _add(
    registry: TableModuleRegistry,
    name: str,
    version: str,
    deps: list[DependencyInfo] | None = None,
) -> Module:
    """Create a module, register it and return it."""
    module = Module(name, Version(version), deps or [])
    registry.add(module)
    return module


class _MislabellingRegistry(TableModuleRegistry):
    """Answers every version query with the versions of ``core``."""

    def get_module_versions(self, module_id: Name) -> list[Module]:
        return super().get_module_versions(Name("core"))


class _ForgetfulRegistry(TableModuleRegistry):
    """Lists versions it then refuses to return."""

    def get_module(self, module_id: Name, version: Version) -> Module | None:
        return None


# ===========================================================================
# Graph shapes
# ===========================================================================


class TestGraphShapes:

    def test_cycle_resolves(self, registry: TableModuleRegistry) -> None:
        a = _add(registry, "a", "1.0.0", [DependencyInfo("b")])
        b = _add(registry, "b", "1.0.0", [DependencyInfo("a")])
        result = DependencyResolver(registry).resolve(["a"])
        assert result.success is True
        assert result.modules == {a, b}

    def test_cycle_constrains_root_back(self, registry: TableModuleRegistry) -> None:
        """A dependency can rule out the newest version of the root itself."""
        a1 = _add(registry, "a", "1.0.0", [DependencyInfo("b")])
        _add(registry, "a", "2.0.0", [DependencyInfo("b")])
        b = _add(registry, "b", "1.0.0", [DependencyInfo("a", Version("1.0.0"), Version("2.0.0"))])
        result = DependencyResolver(registry).resolve(["a"])
        assert result.modules == {a1, b}

    def test_unsatisfiable_cycle_fails(self, registry: TableModuleRegistry) -> None:
        _add(registry, "a", "1.0.0", [DependencyInfo("b")])
        _add(registry, "b", "1.0.0", [DependencyInfo("a", Version("2.0.0"))])
        assert DependencyResolver(registry).resolve(["a"]).success is False

    def test_root_that_is_also_a_dependency(self, registry: TableModuleRegistry) -> None:
        core = _add(registry, "core", "1.0.0", [DependencyInfo("lib")])
        lib = _add(registry, "lib", "1.2.0")
        _add(registry, "lib", "2.0.0")
        result = DependencyResolver(registry).resolve(["lib", "core"])
        assert result.success is True
        assert result.modules == {core, lib}

    def test_conflicting_roots_fail(self, registry: TableModuleRegistry) -> None:
        _add(registry, "core", "1.0.0", [DependencyInfo("lib")])
        _add(registry, "lib", "2.0.0")
        result = DependencyResolver(registry).resolve(["lib", "core"])
        assert result.success is False
        assert result.modules == frozenset()

    def test_unreferenced_closure_members_dropped(self, registry: TableModuleRegistry) -> None:
        """Dependencies of versions that lost are not part of the result."""
        _add(registry, "core", "1.0.0", [DependencyInfo("old")])
        core2 = _add(registry, "core", "2.0.0", [DependencyInfo("new")])
        _add(registry, "old", "1.0.0")
        new = _add(registry, "new", "1.0.0")
        result = DependencyResolver(registry).resolve(["core"])
        assert result.modules == {core2, new}

    def test_dependency_of_excluded_root_version_ignored(
        self, registry: TableModuleRegistry
    ) -> None:
        """Only versions passing the root's range contribute dependencies."""
        core1 = _add(registry, "core", "1.0.0")
        _add(registry, "core", "2.0.0", [DependencyInfo("missing")])
        result = (
            DependencyResolver(registry)
            .builder()
            .require_version("core", Version("1.0.0"))
            .build()
        )
        assert result.modules == {core1}


# ===========================================================================
# Registry contract
# ===========================================================================


class TestRegistryContract:

    def test_mislabelled_versions_raise(self) -> None:
        registry = _MislabellingRegistry()
        _add(registry, "core", "1.0.0", [DependencyInfo("lib")])
        with pytest.raises(RegistryContractError):
            DependencyResolver(registry).resolve(["core"])

    def test_missing_listed_module_raises(self) -> None:
        registry = _ForgetfulRegistry()
        _add(registry, "core", "1.0.0")
        with pytest.raises(RegistryContractError):
            DependencyResolver(registry).resolve(["core"])


# ===========================================================================
# Configuration
# ===========================================================================


class TestIterationBound:

    def test_bound_exceeded_raises(self, registry: TableModuleRegistry) -> None:
        _add(registry, "a", "1.0.0", [DependencyInfo("b")])
        _add(registry, "b", "1.0.0", [DependencyInfo("c")])
        _add(registry, "c", "1.0.0")
        with pytest.raises(ResolutionError):
            DependencyResolver(registry, max_iterations=1).resolve(["a"])

    def test_generous_bound_does_not_change_result(self, registry: TableModuleRegistry) -> None:
        _add(registry, "a", "1.0.0", [DependencyInfo("b")])
        _add(registry, "b", "1.0.0", [DependencyInfo("c")])
        _add(registry, "c", "1.0.0")
        bounded = DependencyResolver(registry, max_iterations=1000).resolve(["a"])
        unbounded = DependencyResolver(registry).resolve(["a"])
        assert bounded == unbounded

    def test_non_positive_bound_rejected(self, registry: TableModuleRegistry) -> None:
        with pytest.raises(ValueError):
            DependencyResolver(registry, max_iterations=0)


# ===========================================================================
# Results, determinism and concurrency
# ===========================================================================


class TestResults:

    def _registry(self) -> TableModuleRegistry:
        registry = TableModuleRegistry()
        _add(registry, "core", "1.0.0", [DependencyInfo("a"), DependencyInfo("b", optional=True)])
        _add(registry, "core", "1.1.0", [DependencyInfo("a", Version("1.2.0"))])
        _add(registry, "a", "1.0.0")
        _add(registry, "a", "1.3.0")
        _add(registry, "b", "1.0.0")
        return registry

    def test_deterministic(self) -> None:
        resolver = DependencyResolver(self._registry())
        first = resolver.resolve(["core"])
        second = resolver.resolve(["core"])
        assert first == second
        assert first.versions() == {
            Name("core"): Version("1.1.0"),
            Name("a"): Version("1.3.0"),
        }

    def test_concurrent_resolutions_agree(self) -> None:
        resolver = DependencyResolver(self._registry())
        with ThreadPoolExecutor(max_workers=4) as pool:
            results: Collection[ResolutionResult] = list(
                pool.map(lambda _: resolver.resolve(["core"]), range(16))
            )
        assert len({result.modules for result in results}) == 1

    def test_truthiness(self) -> None:
        assert ResolutionResult(success=True)
        assert not ResolutionResult(success=False)
