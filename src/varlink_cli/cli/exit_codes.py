"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
Each failure class of the call and help flows has its own code so
scripts can tell a bad argument from an unreachable service.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit: command completed, remote error reported, or call canceled."""

GENERAL_ERROR: int = 1
"""A known VarlinkCliError without a more specific code was caught."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

MISSING_ARGUMENT: int = 3
"""A mandatory positional argument was not given."""

INVALID_ARGUMENT: int = 4
"""An option or target could not be parsed."""

INVALID_JSON: int = 5
"""Input parameters or a received reply are not valid JSON."""

CANNOT_RESOLVE: int = 6
"""The resolver service did not know the requested interface."""

CANNOT_CONNECT: int = 7
"""No connection could be established to the service address."""

CALL_FAILED: int = 8
"""The request could not be sent or the reply stream broke down."""

CONNECTION_CLOSED: int = 9
"""The service closed the connection before sending a final reply."""

PANIC: int = 10
"""An internal invariant was violated."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C outside a reply wait.  POSIX convention (128 + SIGINT=2)."""
