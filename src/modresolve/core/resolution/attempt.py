"""A single dependency resolution attempt.

The algorithm is based on Arc Consistency Algorithm #3 (AC-3), run in both
directions over every dependency edge:

1. **Domains.** Starting from the roots, walk the dependency closure
   breadth-first. Every version of every reached id becomes a candidate
   (roots are filtered by their acceptance predicate). Every non-root id is
   also seeded with ``ABSENT``, the possibility of leaving it out.
2. **Constraints.** For every dependency id declared by any registry version
   of a domain's id, one ``Constraint`` records which dependency versions
   each candidate accepts.
3. **Propagation.** A deduplicating work queue of constraints is drained;
   each evaluation narrows the dependency side and then the dependant side,
   re-queueing the constraints of any domain that shrank. Domains only ever
   shrink, so the loop terminates, including on cyclic graphs.
4. **Finalization.** Roots are collapsed to their latest remaining version in
   request order, then their dependencies breadth-first, re-running
   propagation after every collapse. Only modules reachable from the selected
   roots end up in the result.

If any root domain becomes empty the attempt fails with no partial result.

All state is local to one ``ResolutionAttempt`` instance; create a fresh one
per resolution.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Collection, Mapping

from modresolve.core.module import Module, ModuleRegistry
from modresolve.core.naming import Name, Version
from modresolve.core.resolution.constraints import (
    ABSENT,
    CompatibleVersions,
    Constraint,
    PossibleVersion,
)
from modresolve.core.resolution.models import (
    OptionalResolutionStrategy,
    ResolutionResult,
)
from modresolve.core.resolution.queue import UniqueQueue
from modresolve.exceptions import RegistryContractError, ResolutionError

logger = logging.getLogger(__name__)

VersionPredicate = Callable[[Version], bool]


class ResolutionAttempt:
    """Mutable state of one resolution: domains, constraints, work queue.

    Args:
        registry: Source of module versions. Treated as read-only.
        optional_strategy: Policy for optional dependencies.
        max_iterations: Upper bound on constraint evaluations, or None for
            no bound.
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        optional_strategy: OptionalResolutionStrategy,
        max_iterations: int | None = None,
    ) -> None:
        self._registry = registry
        self._optional_strategy = optional_strategy
        self._max_iterations = max_iterations
        self._iterations = 0

        self._requirements: Mapping[Name, VersionPredicate | None] = {}
        self._roots: list[Name] = []
        self._domains: dict[Name, set[PossibleVersion]] = {}
        self._constraints: list[Constraint] = []
        self._constraints_by_id: dict[Name, list[Constraint]] = {}
        self._queue: UniqueQueue[Constraint] = UniqueQueue()

    def resolve(
        self, requirements: Mapping[Name, VersionPredicate | None]
    ) -> ResolutionResult:
        """Run the attempt.

        Args:
            requirements: Root module ids, in priority order, each mapped to
                an acceptance predicate for its versions (None accepts all).

        Returns:
            The ``ResolutionResult``.

        Raises:
            RegistryContractError: If the registry returns inconsistent data.
            ResolutionError: If ``max_iterations`` is exceeded.
        """
        self._requirements = requirements
        self._roots = list(requirements)

        self._populate_domains()
        self._populate_constraints()
        logger.debug(
            "Resolving %s: %d domains, %d constraints",
            ", ".join(map(str, self._roots)),
            len(self._domains),
            len(self._constraints),
        )
        if not self._roots_available():
            return self._failure()

        self._queue = UniqueQueue(self._constraints)
        self._process_constraints()
        if not self._roots_available():
            return self._failure()

        modules = self._finalise_modules()
        if modules is None:
            return self._failure()
        return ResolutionResult(success=True, modules=frozenset(modules))

    # -- registry access ---------------------------------------------------

    def _module_versions(self, module_id: Name) -> Collection[Module]:
        modules = self._registry.get_module_versions(module_id)
        for module in modules:
            if module.id != module_id:
                raise RegistryContractError(
                    f"Registry returned {module} when asked for versions of {module_id!s}"
                )
        return modules

    def _get_module(self, module_id: Name, version: Version) -> Module:
        module = self._registry.get_module(module_id, version)
        if module is None:
            raise RegistryContractError(
                f"Registry has no {module_id}-{version} although it listed that version"
            )
        if module.id != module_id or module.version != version:
            raise RegistryContractError(
                f"Registry returned {module} when asked for {module_id}-{version}"
            )
        return module

    # -- domain and constraint construction --------------------------------

    def _domain(self, module_id: Name) -> set[PossibleVersion]:
        return self._domains.setdefault(module_id, set())

    def _populate_domains(self) -> None:
        """Build candidate domains over the transitive dependency closure."""
        involved = set(self._roots)
        pending = deque(self._roots)
        for root in self._roots:
            self._domains[root] = set()

        while pending:
            module_id = pending.popleft()
            domain = self._domain(module_id)
            accepts = self._requirements.get(module_id)
            for module in self._module_versions(module_id):
                if accepts is not None and not accepts(module.version):
                    continue
                domain.add(PossibleVersion(module.version))
                for dependency in module.dependencies:
                    if dependency.id not in involved:
                        involved.add(dependency.id)
                        pending.append(dependency.id)
                        self._domains[dependency.id] = {ABSENT}

    def _populate_constraints(self) -> None:
        """Build one constraint per (dependant, dependency) id pair.

        Dependency ids are gathered from every registry version of the
        dependant, not just its candidates, while the compatibility table
        only covers concrete candidates.
        """
        missing_allowed_if_optional = not self._optional_strategy.is_required
        for module_id, domain in list(self._domains.items()):
            if not domain:
                continue
            dependency_ids: dict[Name, None] = {}
            for module in self._module_versions(module_id):
                dependency_ids.update(dict.fromkeys(module.dependency_ids()))

            for dependency_id in dependency_ids:
                compatibilities: dict[Version, CompatibleVersions] = {}
                for candidate in domain:
                    if candidate.version is None:
                        continue
                    module = self._get_module(module_id, candidate.version)
                    info = module.dependency_info(dependency_id)
                    if info is not None:
                        compatibilities[candidate.version] = CompatibleVersions(
                            info.version_range(),
                            info.optional and missing_allowed_if_optional,
                        )
                constraint = Constraint(module_id, dependency_id, compatibilities)
                self._constraints.append(constraint)
                self._constraints_by_id.setdefault(module_id, []).append(constraint)
                self._constraints_by_id.setdefault(dependency_id, []).append(constraint)

    # -- propagation --------------------------------------------------------

    def _roots_available(self) -> bool:
        return all(self._domains.get(root) for root in self._roots)

    def _count_iteration(self) -> None:
        self._iterations += 1
        if self._max_iterations is not None and self._iterations > self._max_iterations:
            raise ResolutionError(
                f"Resolution exceeded {self._max_iterations} constraint evaluations"
            )

    def _process_constraints(self) -> None:
        """Drain the work queue, or stop as soon as a root domain is empty."""
        while self._queue and self._roots_available():
            constraint = self._queue.pop()
            self._count_iteration()
            from_domain = self._domain(constraint.from_id)
            to_domain = self._domain(constraint.to_id)

            if constraint.constrain_to(frozenset(from_domain), to_domain):
                self._queue.extend(
                    related
                    for related in self._constraints_by_id.get(constraint.to_id, ())
                    if related != constraint
                )

            if constraint.constrain_from(from_domain, frozenset(to_domain)):
                self._queue.extend(self._constraints_by_id.get(constraint.from_id, ()))

    # -- finalization -------------------------------------------------------

    def _finalise_modules(self) -> list[Module] | None:
        """Collapse the constrained domains down to the final module set.

        Roots are restricted first and in order, to keep their versions as
        recent as possible. Dependencies are then followed breadth-first;
        modules no selected version depends on are left out.

        Returns:
            The selected modules, or None if a collapse left a root (or an
            already selected module) without a version.
        """
        selected: dict[Module, None] = {}
        pending: deque[Module] = deque()

        for root in self._roots:
            version = self._reduce_to_final_version(root, include_if_optional=True)
            if version is None or not self._roots_available():
                return None
            module = self._get_module(root, version)
            if module not in selected:
                selected[module] = None
                pending.append(module)

        while pending:
            module = pending.popleft()
            for dependency in module.dependencies:
                version = self._reduce_to_final_version(
                    dependency.id, self._optional_strategy.is_desired
                )
                if not self._roots_available():
                    return None
                if version is None:
                    continue
                dependency_module = self._get_module(dependency.id, version)
                if dependency_module not in selected:
                    selected[dependency_module] = None
                    pending.append(dependency_module)

        for module in selected:
            if PossibleVersion(module.version) not in self._domains.get(module.id, ()):
                logger.debug("Selected module %s was invalidated during finalization", module)
                return None
        return list(selected)

    def _reduce_to_final_version(
        self, module_id: Name, include_if_optional: bool
    ) -> Version | None:
        """Reduce a domain to its single preferred candidate and re-propagate.

        Args:
            module_id: The domain to collapse.
            include_if_optional: If False and ``ABSENT`` is still a candidate,
                ``ABSENT`` is chosen instead of the latest version.

        Returns:
            The chosen version, or None if the module ends up absent.
        """
        domain = self._domains.get(module_id)
        if not domain:
            return None
        if len(domain) == 1:
            return next(iter(domain)).version

        if not include_if_optional and ABSENT in domain:
            choice = ABSENT
        else:
            choice = max(domain)
        logger.debug("Collapsing %s from %d candidates to %s", module_id, len(domain), choice)
        domain.clear()
        domain.add(choice)
        self._queue.extend(self._constraints_by_id.get(module_id, ()))
        self._process_constraints()
        return choice.version

    # -- diagnostics ---------------------------------------------------------

    def _failure(self) -> ResolutionResult:
        conflicts = tuple(self._describe_failure())
        logger.info(
            "Resolution of %s failed: %s",
            ", ".join(map(str, self._roots)),
            "; ".join(conflicts),
        )
        return ResolutionResult(success=False, conflicts=conflicts)

    def _describe_failure(self) -> list[str]:
        msgs: list[str] = []
        for root in self._roots:
            if self._domains.get(root):
                continue
            versions = self._registry.get_module_versions(root)
            accepts = self._requirements.get(root)
            if not versions:
                msgs.append(f"Module {str(root)!r} is not available in the registry")
            elif accepts is not None and not any(accepts(m.version) for m in versions):
                available = ", ".join(str(m.version) for m in versions)
                msgs.append(
                    f"No version of {str(root)!r} satisfies the requested range "
                    f"(available: {available})"
                )
            else:
                msgs.append(
                    f"No version of {str(root)!r} is compatible with the "
                    f"dependencies available to it"
                )
        if not msgs:
            msgs.append(
                "Resolution failed: no compatible set of module versions exists"
            )
        return msgs
