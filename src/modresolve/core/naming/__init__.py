"""Module identifiers and semantic version primitives."""

from modresolve.core.naming.name import Name
from modresolve.core.naming.version import Version, VersionRange

__all__ = [
    "Name",
    "Version",
    "VersionRange",
]
