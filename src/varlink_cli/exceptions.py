"""Custom exception hierarchy for varlink-cli.

All exceptions that cross layer boundaries must inherit from
:class:`VarlinkCliError`.  Raw third-party and OS exceptions (socket
errors, python-varlink errors) must NEVER propagate beyond the
infrastructure layer: they must be caught and re-raised as a typed
subclass defined here.

A remote error returned by a service is *not* an exception: it is a
reply outcome which the CLI reports and then exits successfully.
Likewise a user cancellation while waiting for replies is an outcome.

Hierarchy
---------
VarlinkCliError
├── MissingArgumentError
├── InvalidArgumentError
│   └── ConfigurationError
├── InvalidJsonError
├── CannotResolveError
├── CannotConnectError
├── CallFailedError
├── ConnectionClosedError
├── PanicError
└── EnvironmentError
"""

from __future__ import annotations


class VarlinkCliError(Exception):
    """Base exception for all varlink-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Arguments -------------------------------------------------------------

class MissingArgumentError(VarlinkCliError):
    """Raised when a mandatory argument was not given."""


class InvalidArgumentError(VarlinkCliError):
    """Raised when an option or target string cannot be parsed."""


class ConfigurationError(InvalidArgumentError):
    """Raised when an environment setting holds an unusable value."""


class InvalidJsonError(VarlinkCliError):
    """Raised when parameters or a reply cannot be decoded or rendered as JSON."""


# --- Addressing / transport ------------------------------------------------

class CannotResolveError(VarlinkCliError):
    """Raised when the resolver returns no address for an interface."""


class CannotConnectError(VarlinkCliError):
    """Raised when a connection to the service address cannot be opened."""


class CallFailedError(VarlinkCliError):
    """Raised when a request cannot be sent or the reply stream breaks."""


class ConnectionClosedError(VarlinkCliError):
    """Raised when the peer closes the connection before a final reply."""


# --- Internal --------------------------------------------------------------

class PanicError(VarlinkCliError):
    """Raised when data a compliant service returned violates an invariant."""


class EnvironmentError(VarlinkCliError):
    """Raised when a required runtime dependency is not available."""
