"""Exception hierarchy shared across endpoint resolution, dispatch, and auth.

A call travels through URL templating, payload building, the throttle, the
HTTP transport, and finally the remote service's own error conventions.  This
module groups those failure modes so callers can catch :class:`SnoocoreError`
for everything, or react to the specific stage that failed.

Configuration and template problems are raised before any I/O happens.
Transport and remote failures are normalised by the executor into
:class:`TransportError` and :class:`RemoteApiError` so there is a single
failure path regardless of where the call went wrong.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

__all__ = [
    "SnoocoreError",
    "MissingParameterError",
    "UnsupportedExtensionError",
    "InvalidPathError",
    "InvalidArgumentError",
    "TransportError",
    "RemoteApiError",
    "OAuthError",
    "DescriptorLoadError",
]


class SnoocoreError(RuntimeError):
    """Base exception for every failure raised by the client."""


class MissingParameterError(SnoocoreError, KeyError):
    """Raised when a ``$`` URL template variable has no matching argument."""

    def __init__(self, parameter: str) -> None:
        super().__init__(f"missing required url parameter {parameter}")
        self.parameter = parameter

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class UnsupportedExtensionError(SnoocoreError):
    """Raised when an endpoint only offers extensions other than ``.json``."""

    def __init__(self, extensions: Sequence[str]) -> None:
        super().__init__(
            "Invalid extension types specified, unable to use this endpoint: "
            + ", ".join(extensions)
        )
        self.extensions = tuple(extensions)


class InvalidPathError(SnoocoreError, LookupError):
    """Raised when path navigation misses or lands on a node without methods."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Invalid path provided: {path!r}. This endpoint does not exist. Make "
            "sure that your call matches the routes that are defined in the API "
            "documentation"
        )
        self.path = path


class InvalidArgumentError(SnoocoreError, ValueError):
    """Raised when a convenience method receives incomplete arguments."""


class TransportError(SnoocoreError):
    """Raised when the HTTP exchange itself failed (network or HTTP status)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteApiError(SnoocoreError):
    """Raised when the remote service answered with an ``error`` payload."""

    def __init__(self, reason: Any) -> None:
        super().__init__(str(reason))
        self.reason = reason


class OAuthError(RemoteApiError):
    """Raised when the token endpoint refuses an OAuth grant."""


class DescriptorLoadError(SnoocoreError):
    """Raised when an endpoint descriptor table cannot be read or validated."""
