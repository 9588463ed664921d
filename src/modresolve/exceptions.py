"""modresolve exception hierarchy.

All public exceptions inherit from ModResolveError, giving callers a single
base class to catch when they want to handle any modresolve-specific failure
without swallowing unrelated errors.

An unsatisfiable set of requirements is *not* an exception: it is reported
as a failed ``ResolutionResult``.
"""


class ModResolveError(Exception):
    """Base exception for all modresolve errors."""


class VersionParseError(ModResolveError, ValueError):
    """Raised when a version string is not a valid semantic version.

    Also a ``ValueError`` so that callers validating user input can treat it
    like any other malformed value.
    """


class RegistryContractError(ModResolveError):
    """Raised when a module registry breaks its contract.

    Covers registries that return a module under the wrong id or version,
    or that cannot produce a module they previously enumerated. These are
    programming errors in the registry, not resolution failures.
    """


class ResolutionError(ModResolveError):
    """Raised when a resolution attempt is aborted.

    Covers exceeding the configured bound on constraint evaluations. An
    attempt that merely finds no compatible module set does not raise.
    """
