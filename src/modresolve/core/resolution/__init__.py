"""Arc-consistency based module version resolution.

Public names are re-exported here, so callers can write
``from modresolve.core.resolution import DependencyResolver``.
"""

from modresolve.core.resolution.attempt import ResolutionAttempt
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
from modresolve.core.resolution.resolver import DependencyResolver, ResolutionBuilder

__all__ = [
    "ABSENT",
    "CompatibleVersions",
    "Constraint",
    "DependencyResolver",
    "OptionalResolutionStrategy",
    "PossibleVersion",
    "ResolutionAttempt",
    "ResolutionBuilder",
    "ResolutionResult",
    "UniqueQueue",
]
